"""Scope-aware settings files: path mapping, loading, merging, saving.

Four scopes each map to one JSON file. The effective view overlays them in
order (enterprise, user, project, local) with a *shallow* merge: for every
top-level key the value from the last scope defining it wins as a whole.
Nested objects such as ``permissions`` are never combined across scopes.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from devtools.errors import InvalidScopeError
from devtools.types.config import ConfigScope, DevtoolsConfig, ScopeStatus, Settings

logger = logging.getLogger(__name__)

_ENTERPRISE_FILENAME = "managed-settings.json"
_SETTINGS_FILENAME = "settings.json"
_LOCAL_SETTINGS_FILENAME = "settings.local.json"


def _file_mode(path: Path) -> int:
    """Mode for a rewritten settings file: keep the existing one, else 0o666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def coerce_scope(scope: ConfigScope | str) -> ConfigScope:
    """Accept a ConfigScope or its string value."""
    if isinstance(scope, ConfigScope):
        return scope
    try:
        return ConfigScope(scope)
    except ValueError:
        raise InvalidScopeError(scope) from None


class ScopeResolver:
    """Reads, merges and writes the per-scope settings files."""

    def __init__(self, config: DevtoolsConfig) -> None:
        self._config = config

    @property
    def config(self) -> DevtoolsConfig:
        return self._config

    def paths_for_scopes(self) -> dict[ConfigScope, Path]:
        """Map every scope to its settings file path."""
        project_dir = self._config.cwd / ".claude"
        return {
            ConfigScope.ENTERPRISE: self._config.enterprise_dir / _ENTERPRISE_FILENAME,
            ConfigScope.USER: self._config.claude_dir / _SETTINGS_FILENAME,
            ConfigScope.PROJECT: project_dir / _SETTINGS_FILENAME,
            ConfigScope.LOCAL: project_dir / _LOCAL_SETTINGS_FILENAME,
        }

    def path_for(self, scope: ConfigScope | str) -> Path:
        return self.paths_for_scopes()[coerce_scope(scope)]

    # -- raw access ----------------------------------------------------------

    def read_raw(self, scope: ConfigScope | str) -> str | None:
        """Return the file content for *scope*, or None if it doesn't exist."""
        path = self.path_for(scope)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write_raw(self, scope: ConfigScope | str, content: str) -> Path:
        """Replace the scope file with *content*.

        The content goes to a temporary sibling first and is moved over the
        target, so concurrent readers see either the old or the new file.
        """
        path = self.path_for(scope)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_name, _file_mode(path))
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Wrote %d bytes to %s", len(content), path)
        return path

    # -- settings ------------------------------------------------------------

    def load_scope(self, scope: ConfigScope | str) -> Settings:
        """Load one scope's settings.

        A missing file yields ``{}``. A malformed file is logged and also
        yields ``{}`` so one corrupt scope never blocks reading the others.
        Other OS errors propagate.
        """
        scope = coerce_scope(scope)
        try:
            content = self.read_raw(scope)
        except UnicodeDecodeError as exc:
            logger.warning("Failed to decode %s settings as UTF-8: %s", scope.value, exc)
            return {}
        if not content:
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            logger.warning("Failed to parse %s settings: %s", scope.value, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning(
                "Ignoring %s settings: expected a JSON object, got %s",
                scope.value, type(data).__name__,
            )
            return {}
        return data

    def load_effective(self, scope: ConfigScope | str | None = None) -> Settings:
        """Load one scope, or the merged view of all scopes when *scope* is None."""
        if scope is not None:
            return self.load_scope(scope)

        merged: Settings = {}
        for s in ConfigScope.ordered():
            merged.update(self.load_scope(s))
        return merged

    def save(self, scope: ConfigScope | str, settings: Settings) -> Path:
        """Write *settings* to the scope file as 2-space indented JSON."""
        if not isinstance(settings, dict):
            raise TypeError(
                f"settings must be a mapping, got {type(settings).__name__}"
            )
        path = self.write_raw(scope, json.dumps(settings, indent=2))
        logger.info("Saved %s settings to %s", coerce_scope(scope).value, path)
        return path

    def delete(self, scope: ConfigScope | str) -> None:
        """Remove the scope file. A missing file is not an error."""
        path = self.path_for(scope)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        logger.info("Deleted %s", path)

    def status_for_all_scopes(self) -> dict[ConfigScope, ScopeStatus]:
        return {
            scope: ScopeStatus(exists=path.exists(), path=path)
            for scope, path in self.paths_for_scopes().items()
        }
