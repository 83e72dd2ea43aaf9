"""
Exception hierarchy for the slide repair service.

The repair engine itself never raises for malformed slide content; every bad
shape has a structural repair or a downgrade path. These exceptions cover the
edges around it: input that is not a slide at all, typed validation of the
repaired output, and configuration.
"""

from typing import Optional, Dict, Any


class SlideRepairError(Exception):
    """Base exception for all slide repair errors"""

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.context = context or {}

    def __str__(self):
        parts = [super().__str__()]
        if self.cause:
            parts.append(f" (caused by: {type(self.cause).__name__}: {str(self.cause)})")
        if self.context:
            parts.append(f" Context: {self.context}")
        return "".join(parts)


class InvalidSlideError(SlideRepairError):
    """Input is not a slide object (not a mapping)"""
    pass


# === Validation exceptions ===

class ValidationError(SlideRepairError):
    """Repaired content failed validation"""
    pass


class ComponentValidationError(ValidationError):
    """A component failed typed validation"""

    def __init__(self, component_type: str, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.component_type = component_type


class SchemaValidationError(ValidationError):
    """Slide failed typed schema validation"""
    pass


# === Configuration exceptions ===

class ConfigurationError(SlideRepairError):
    """Invalid service configuration"""
    pass
