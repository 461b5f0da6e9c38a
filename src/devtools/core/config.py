"""Configuration loading (env vars, .env)."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from devtools.types.config import DevtoolsConfig

# Load .env from current directory (and parents), won't override existing env vars
load_dotenv()


def load_env_config() -> dict[str, Any]:
    """Load recognised configuration values from environment variables."""
    config: dict[str, Any] = {}

    if home := os.environ.get("DEVTOOLS_HOME"):
        config["home"] = home
    if project := os.environ.get("DEVTOOLS_PROJECT_DIR"):
        config["project_dir"] = project
    if managed := os.environ.get("DEVTOOLS_MANAGED_DIR"):
        config["managed_dir"] = managed

    return config


def load_config(
    cwd: str | Path | None = None,
    home: str | Path | None = None,
    platform: str | None = None,
) -> DevtoolsConfig:
    """Build the immutable runtime configuration.

    Explicit arguments win over environment variables, which win over the
    host defaults (``Path.home()``, ``Path.cwd()``, ``sys.platform``).
    """
    env = load_env_config()

    if home is None:
        home = env.get("home") or Path.home()
    if cwd is None:
        cwd = env.get("project_dir") or Path.cwd()

    return DevtoolsConfig(
        home=Path(home).expanduser(),
        cwd=Path(cwd).expanduser().resolve(),
        platform=platform or sys.platform,
        managed_dir=Path(env["managed_dir"]) if "managed_dir" in env else None,
    )

