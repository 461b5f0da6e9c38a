"""Configuration types for devtools."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

# Settings are opaque JSON objects keyed by section name (permissions, env, ...)
Settings = dict[str, Any]


class ConfigScope(Enum):
    """Configuration tiers, in merge order.

    Later scopes override earlier ones: local > project > user > enterprise.
    """

    ENTERPRISE = "enterprise"
    USER = "user"
    PROJECT = "project"
    LOCAL = "local"

    @classmethod
    def ordered(cls) -> tuple[ConfigScope, ...]:
        """Scopes in the order they are overlaid when merging."""
        return (cls.ENTERPRISE, cls.USER, cls.PROJECT, cls.LOCAL)


@dataclass(frozen=True, slots=True)
class ScopeStatus:
    """Whether one scope file exists, and where."""

    exists: bool
    path: Path

    def to_dict(self) -> dict[str, Any]:
        return {"exists": self.exists, "path": str(self.path)}


@dataclass(frozen=True, slots=True)
class DevtoolsConfig:
    """Environment inputs, computed once at startup.

    Built by :func:`devtools.core.config.load_config` and passed explicitly
    to the settings resolver.
    """

    home: Path
    cwd: Path
    platform: str
    managed_dir: Path | None = None  # overrides the platform enterprise directory

    @property
    def claude_dir(self) -> Path:
        return self.home / ".claude"

    @property
    def enterprise_dir(self) -> Path:
        if self.managed_dir is not None:
            return self.managed_dir
        if self.platform == "darwin":
            return Path("/Library/Application Support/ClaudeCode")
        if self.platform == "win32":
            return Path("C:/Program Files/ClaudeCode")
        return Path("/etc/claude-code")
