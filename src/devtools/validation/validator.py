"""Settings validation: structural checks plus allow/deny conflict warnings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from devtools.permissions.conflicts import find_conflicts


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    path: str
    message: str
    severity: Severity

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message, "severity": self.severity.value}


@dataclass(slots=True)
class ValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(e.severity is Severity.ERROR for e in self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": [e.to_dict() for e in self.errors]}

    def error(self, path: str, message: str) -> None:
        self.errors.append(ValidationIssue(path, message, Severity.ERROR))

    def warning(self, path: str, message: str) -> None:
        self.errors.append(ValidationIssue(path, message, Severity.WARNING))


DEFAULT_MODES = frozenset({"default", "plan", "acceptEdits", "bypassPermissions"})

HOOK_EVENTS = frozenset({
    # Assistant lifecycle events
    "PreToolUse", "PostToolUse", "Notification", "UserPromptSubmit",
    "Stop", "SubagentStop", "PreCompact", "SessionStart", "SessionEnd",
    # Dashboard hook names
    "prompt:before", "prompt:after", "tool:before", "tool:after",
    "response:before", "response:after",
})

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_settings(settings: Any) -> ValidationResult:
    """Validate a settings object without touching the filesystem."""
    result = ValidationResult()
    if not isinstance(settings, dict):
        result.error("", "Settings object is empty")
        return result

    for check in _CHECKS:
        check(settings, result)
    return result


def _validate_permissions(settings: dict[str, Any], result: ValidationResult) -> None:
    permissions = settings.get("permissions")
    if not isinstance(permissions, dict):
        return

    allow = _string_list(permissions.get("allow"))
    deny = _string_list(permissions.get("deny"))
    conflicting = {c.deny for c in find_conflicts(allow, deny)}
    for deny_rule in deny:
        if deny_rule in conflicting:
            result.warning(
                "permissions", f'Permission rule "{deny_rule}" conflicts with allow rules',
            )

    mode = permissions.get("defaultMode")
    if mode is not None and mode not in DEFAULT_MODES:
        result.error("permissions.defaultMode", f"Invalid default mode: {mode}")


def _validate_sandbox(settings: dict[str, Any], result: ValidationResult) -> None:
    sandbox = settings.get("sandbox")
    if not isinstance(sandbox, dict):
        return
    network = sandbox.get("network")
    if not isinstance(network, dict):
        return

    for key, label in (("httpProxyPort", "HTTP"), ("socksProxyPort", "SOCKS")):
        port = network.get(key)
        if port is None:
            continue
        if not isinstance(port, int) or isinstance(port, bool) or not 1 <= port <= 65535:
            result.error(
                f"sandbox.network.{key}", f"{label} proxy port must be between 1 and 65535",
            )


def _validate_mcp_servers(settings: dict[str, Any], result: ValidationResult) -> None:
    servers = settings.get("mcpServers")
    if not isinstance(servers, dict):
        return
    for name, server in servers.items():
        command = server.get("command") if isinstance(server, dict) else None
        if not isinstance(command, str) or not command.strip():
            result.error(
                f"mcpServers.{name}.command", f'MCP server "{name}" has no command specified',
            )


def _validate_env(settings: dict[str, Any], result: ValidationResult) -> None:
    env = settings.get("env")
    if not isinstance(env, dict):
        return
    for key in env:
        if not _ENV_NAME_RE.match(str(key)):
            result.error(f"env.{key}", f"Invalid environment variable name: {key}")


def _validate_hooks(settings: dict[str, Any], result: ValidationResult) -> None:
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return
    for event in hooks:
        if event not in HOOK_EVENTS:
            result.warning(f"hooks.{event}", f"Unknown hook type: {event}")


def _validate_plugins(settings: dict[str, Any], result: ValidationResult) -> None:
    plugins = settings.get("enabledPlugins")
    if not isinstance(plugins, dict):
        return
    for name, enabled in plugins.items():
        if not isinstance(enabled, bool):
            result.error(f"enabledPlugins.{name}", f'Plugin "{name}" must be a boolean')


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


_CHECKS = (
    _validate_permissions,
    _validate_sandbox,
    _validate_mcp_servers,
    _validate_env,
    _validate_hooks,
    _validate_plugins,
)
