"""
Environment-specific logging configuration
"""
import logging
import os
from typing import Dict, Any, Optional

# Engine modules that log every individual repair at INFO
CHATTY_ENGINE_MODULES = [
    "slide_repair.repair.content_normalizer",
    "slide_repair.repair.type_normalizer",
    "slide_repair.repair.budget",
]

PROFILES: Dict[str, Dict[str, Any]] = {
    # Repair actions are still visible to callers through slide warnings
    "production": {
        "default_level": "WARNING",
        "console_format": "%(levelname)s - %(message)s",
        "log_requests": False,
        "suppress_modules": CHATTY_ENGINE_MODULES,
    },
    "development": {
        "default_level": "INFO",
        "console_format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_requests": True,
        "suppress_modules": [],
    },
    # Includes every appended warning via WarningLog debug records
    "debug": {
        "default_level": "DEBUG",
        "console_format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        "log_requests": True,
        "suppress_modules": [],
    },
}


def detect_environment() -> str:
    """debug wins over production; anything else is development"""
    if os.getenv("DEBUG", "false").lower() == "true":
        return "debug"
    if os.getenv("RENDER") is not None or os.getenv("ENV") == "production":
        return "production"
    return "development"


def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration based on environment"""
    environment = detect_environment()
    selected = dict(PROFILES[environment])
    selected["suppress_modules"] = list(selected["suppress_modules"])

    level_override = os.getenv("LOG_LEVEL")
    if level_override:
        selected["default_level"] = level_override.upper()

    selected["environment"] = environment
    return selected


def apply_logging_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Replace root handlers with one console handler configured for the active profile"""
    if config is None:
        config = get_logging_config()

    root_logger = logging.getLogger()
    level = logging.getLevelName(config["default_level"])
    root_logger.setLevel(level if isinstance(level, int) else logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(config["console_format"]))
    root_logger.handlers = [console_handler]

    for module in config.get("suppress_modules", []):
        logging.getLogger(module).setLevel(logging.WARNING)

    return config
