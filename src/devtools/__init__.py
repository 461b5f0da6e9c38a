"""devtools — settings resolution and permission rules for a CLI assistant.

Usage:
    from devtools import ConfigService, PermissionService, load_config

    service = ConfigService(load_config())
    settings = await service.load_settings()
    result = PermissionService(settings).check_permission(
        "Bash", {"command": "git status"},
    )
"""

from devtools.core.config import load_config
from devtools.errors import DevtoolsError, InvalidImportError, InvalidScopeError
from devtools.permissions.conflicts import RuleConflict, are_rules_conflict, find_conflicts
from devtools.permissions.rules import parse_permission_rule
from devtools.permissions.service import PermissionService
from devtools.settings.resolver import ScopeResolver
from devtools.settings.service import ConfigService
from devtools.types.config import ConfigScope, DevtoolsConfig, ScopeStatus, Settings
from devtools.types.permissions import (
    GlobalRule,
    PermissionCheckResult,
    PermissionRule,
    PermissionRuleType,
    ScopedRule,
)
from devtools.validation.validator import validate_settings

__version__ = "0.1.0"

__all__ = [
    # Core API
    "ConfigService",
    "PermissionService",
    "ScopeResolver",
    "are_rules_conflict",
    "find_conflicts",
    "load_config",
    "parse_permission_rule",
    "validate_settings",
    # Configuration
    "ConfigScope",
    "DevtoolsConfig",
    "ScopeStatus",
    "Settings",
    # Permission types
    "GlobalRule",
    "PermissionCheckResult",
    "PermissionRule",
    "PermissionRuleType",
    "RuleConflict",
    "ScopedRule",
    # Errors
    "DevtoolsError",
    "InvalidImportError",
    "InvalidScopeError",
]
