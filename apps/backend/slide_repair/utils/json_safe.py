"""
JSON helpers for generator payloads that embed JSON inside strings.
"""
import json
from typing import Any, Optional


def try_parse_json(text: Any) -> Optional[Any]:
    """Parse a string holding a JSON object or array; anything else returns None."""
    if not isinstance(text, str):
        return None
    candidate = text.strip()
    if not candidate or candidate[0] not in '{[':
        return None
    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, (dict, list)) else None


def try_parse_json_object(text: Any) -> Optional[dict]:
    parsed = try_parse_json(text)
    return parsed if isinstance(parsed, dict) else None


def deep_parse_json_strings(obj: Any) -> Any:
    """
    Recursively replace strings that hold JSON objects/arrays with the parsed value.

    Scalar-looking strings ("42", "true") are left alone so numeric labels stay text.
    """
    if isinstance(obj, str):
        parsed = try_parse_json(obj)
        return deep_parse_json_strings(parsed) if parsed is not None else obj
    if isinstance(obj, list):
        return [deep_parse_json_strings(item) for item in obj]
    if isinstance(obj, dict):
        return {key: deep_parse_json_strings(value) for key, value in obj.items()}
    return obj


def stringify(value: Any) -> str:
    """Render any value as display text (compact JSON for containers)."""
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    try:
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'), default=str)
    except (TypeError, ValueError):
        return str(value)
