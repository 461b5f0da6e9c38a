"""Exception types raised by devtools."""

from __future__ import annotations


class DevtoolsError(Exception):
    """Base class for devtools errors."""


class InvalidScopeError(DevtoolsError, ValueError):
    """Raised when a caller names a configuration scope that doesn't exist."""

    def __init__(self, scope: object) -> None:
        self.scope = scope
        super().__init__(f"Unknown configuration scope: {scope!r}")


class InvalidImportError(DevtoolsError, ValueError):
    """Raised when an import payload carries no settings object."""

    def __init__(self, message: str = "No settings provided in import") -> None:
        super().__init__(message)
