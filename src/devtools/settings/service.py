"""ConfigService — async entry points used by route handlers.

Blocking file operations run in a worker thread so a request waiting on disk
only suspends its own task. There is no locking between requests: two
writers to the same scope race and the last write wins.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import anyio.to_thread

from devtools.errors import InvalidImportError
from devtools.permissions.rules import parse_permission_rule
from devtools.permissions.service import PermissionService
from devtools.settings.resolver import ScopeResolver
from devtools.types.config import ConfigScope, DevtoolsConfig, Settings
from devtools.types.permissions import PermissionRule, PermissionRuleType

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

# Scopes included in a full export; enterprise settings are managed elsewhere
EXPORTABLE_SCOPES = (ConfigScope.USER, ConfigScope.PROJECT, ConfigScope.LOCAL)


class ConfigService:
    """Scope-aware settings access for one runtime configuration."""

    def __init__(self, config: DevtoolsConfig) -> None:
        self._resolver = ScopeResolver(config)

    @property
    def resolver(self) -> ScopeResolver:
        return self._resolver

    async def load_settings(self, scope: ConfigScope | str | None = None) -> Settings:
        """Settings for *scope*, or the merged effective view when omitted."""
        return await anyio.to_thread.run_sync(self._resolver.load_effective, scope)

    async def save_settings(self, scope: ConfigScope | str, settings: Settings) -> None:
        await anyio.to_thread.run_sync(self._resolver.save, scope, settings)

    async def delete_config_file(self, scope: ConfigScope | str) -> None:
        await anyio.to_thread.run_sync(self._resolver.delete, scope)

    async def get_all_config_status(self) -> dict[str, dict[str, Any]]:
        status = await anyio.to_thread.run_sync(self._resolver.status_for_all_scopes)
        return {scope.value: s.to_dict() for scope, s in status.items()}

    async def build_permission_service(
        self, scope: ConfigScope | str | None = None,
    ) -> PermissionService:
        """A fresh PermissionService over freshly loaded settings."""
        return PermissionService(await self.load_settings(scope))

    async def add_permission_rule(
        self,
        text: str,
        rule_type: PermissionRuleType | str,
        scope: ConfigScope | str = ConfigScope.USER,
    ) -> PermissionRule:
        """Append a rule to *scope*'s settings file and return the parsed rule."""
        rule = parse_permission_rule(text, rule_type)
        settings = await self.load_settings(scope)
        service = PermissionService(settings)
        service.add_rule(rule)
        await self.save_settings(scope, _with_rules(settings, service))
        logger.info("Added %s rule %r to %s scope", rule.type.value, text, _name(scope))
        return rule

    async def remove_permission_rule(
        self, text: str, scope: ConfigScope | str = ConfigScope.USER,
    ) -> bool:
        """Remove the first rule matching *text* exactly. Returns whether one was found."""
        settings = await self.load_settings(scope)
        service = PermissionService(settings)
        if not service.remove_rule(text):
            return False
        await self.save_settings(scope, _with_rules(settings, service))
        logger.info("Removed rule %r from %s scope", text, _name(scope))
        return True

    # --- export / import ---

    async def export_settings(self, scope: ConfigScope | str | None = None) -> dict[str, Any]:
        """Versioned export envelope for one scope, or the merged view."""
        settings = await self.load_settings(scope)
        return {
            "version": EXPORT_VERSION,
            "exportedAt": _timestamp(),
            "scope": _name(scope) if scope is not None else "merged",
            "settings": settings,
        }

    async def export_all(self) -> dict[str, Any]:
        """Export user, project and local scopes side by side.

        A scope whose file cannot be read is exported as ``None`` rather than
        failing the whole export.
        """
        scopes: dict[str, Settings | None] = {}
        for scope in EXPORTABLE_SCOPES:
            try:
                scopes[scope.value] = await self.load_settings(scope)
            except OSError as e:
                logger.warning("Skipping %s scope in export: %s", scope.value, e)
                scopes[scope.value] = None
        return {"version": EXPORT_VERSION, "exportedAt": _timestamp(), "scopes": scopes}

    async def import_settings(
        self, payload: Any, scope: ConfigScope | str = ConfigScope.USER,
    ) -> Settings:
        """Write ``payload["settings"]`` over *scope*'s file and return it.

        Raises InvalidImportError when the payload has no settings object.
        """
        settings = payload.get("settings") if isinstance(payload, dict) else None
        if not settings or not isinstance(settings, dict):
            raise InvalidImportError()
        await self.save_settings(scope, settings)
        logger.info("Imported settings to %s scope", _name(scope))
        return settings

    # --- env ---

    async def get_env(self, scope: ConfigScope | str | None = None) -> dict[str, Any]:
        """The ``env`` block of *scope*, or of the merged view when omitted."""
        env = (await self.load_settings(scope)).get("env")
        return dict(env) if isinstance(env, dict) else {}

    async def set_env(self, scope: ConfigScope | str, env: dict[str, Any]) -> None:
        """Replace *scope*'s ``env`` block, keeping every other key."""
        settings = await self.load_settings(scope)
        await self.save_settings(scope, {**settings, "env": env})
        logger.info("Saved %d env variables to %s scope", len(env), _name(scope))


def _with_rules(settings: Settings, service: PermissionService) -> Settings:
    # Keep sibling keys such as permissions.defaultMode untouched
    current = settings.get("permissions")
    permissions = dict(current) if isinstance(current, dict) else {}
    permissions.update(service.export_rules())
    return {**settings, "permissions": permissions}


def _name(scope: ConfigScope | str) -> str:
    return scope.value if isinstance(scope, ConfigScope) else scope


def _timestamp() -> str:
    # ISO 8601 in UTC with millisecond precision, e.g. 2024-05-01T12:00:00.000Z
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")
