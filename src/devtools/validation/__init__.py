"""Settings validation for devtools."""

from devtools.validation.validator import (
    Severity,
    ValidationIssue,
    ValidationResult,
    validate_settings,
)

__all__ = ["Severity", "ValidationIssue", "ValidationResult", "validate_settings"]
