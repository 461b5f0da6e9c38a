"""Test fixtures: isolated scope directories and settings-file helpers."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from devtools.settings.resolver import ScopeResolver
from devtools.types.config import ConfigScope, DevtoolsConfig


@pytest.fixture
def devtools_config(tmp_path: Path) -> DevtoolsConfig:
    """A config whose four scope files all live under tmp_path."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    return DevtoolsConfig(
        home=home,
        cwd=project.resolve(),
        platform="linux",
        managed_dir=tmp_path / "managed",
    )


@pytest.fixture
def resolver(devtools_config: DevtoolsConfig) -> ScopeResolver:
    return ScopeResolver(devtools_config)


@pytest.fixture
def write_scope(resolver: ScopeResolver) -> Callable[[ConfigScope, Any], Path]:
    """Write raw JSON (or a raw string) straight to a scope file."""

    def _write(scope: ConfigScope, data: Any) -> Path:
        path = resolver.path_for(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch, devtools_config: DevtoolsConfig) -> DevtoolsConfig:
    """Point load_config() at the temporary scope directories."""
    monkeypatch.setenv("DEVTOOLS_HOME", str(devtools_config.home))
    monkeypatch.setenv("DEVTOOLS_PROJECT_DIR", str(devtools_config.cwd))
    monkeypatch.setenv("DEVTOOLS_MANAGED_DIR", str(devtools_config.managed_dir))
    return devtools_config
