"""Type definitions for devtools."""

from devtools.types.config import ConfigScope, DevtoolsConfig, ScopeStatus, Settings
from devtools.types.permissions import (
    GlobalRule,
    PermissionCheckResult,
    PermissionRule,
    PermissionRuleType,
    ScopedRule,
)

__all__ = [
    "ConfigScope",
    "DevtoolsConfig",
    "GlobalRule",
    "PermissionCheckResult",
    "PermissionRule",
    "PermissionRuleType",
    "ScopeStatus",
    "ScopedRule",
    "Settings",
]
