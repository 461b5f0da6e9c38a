"""Tests for scope path mapping, loading, merging and saving."""

from __future__ import annotations

import json
import logging
import os
import stat
from pathlib import Path

import pytest

from devtools.errors import InvalidScopeError
from devtools.settings.resolver import ScopeResolver, coerce_scope
from devtools.types.config import ConfigScope, DevtoolsConfig

ALL_SCOPES = list(ConfigScope)


class TestPaths:
    def test_paths_for_scopes(self, resolver: ScopeResolver, devtools_config: DevtoolsConfig):
        paths = resolver.paths_for_scopes()
        assert paths[ConfigScope.ENTERPRISE] == devtools_config.managed_dir / "managed-settings.json"
        assert paths[ConfigScope.USER] == devtools_config.home / ".claude" / "settings.json"
        assert paths[ConfigScope.PROJECT] == devtools_config.cwd / ".claude" / "settings.json"
        assert paths[ConfigScope.LOCAL] == devtools_config.cwd / ".claude" / "settings.local.json"

    def test_linux_enterprise_path(self):
        config = DevtoolsConfig(home=Path("/home/dev"), cwd=Path("/work"), platform="linux")
        path = ScopeResolver(config).path_for(ConfigScope.ENTERPRISE)
        assert path == Path("/etc/claude-code/managed-settings.json")

    def test_path_for_accepts_string(self, resolver: ScopeResolver):
        assert resolver.path_for("user") == resolver.path_for(ConfigScope.USER)

    def test_unknown_scope(self, resolver: ScopeResolver):
        with pytest.raises(InvalidScopeError):
            resolver.path_for("global")
        with pytest.raises(ValueError):
            coerce_scope("nope")


class TestLoadScope:
    @pytest.mark.parametrize("scope", ALL_SCOPES)
    def test_missing_file_is_empty(self, resolver: ScopeResolver, scope: ConfigScope):
        assert resolver.load_scope(scope) == {}

    def test_reads_json(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, {"model": "opus", "env": {"A": "1"}})
        assert resolver.load_scope(ConfigScope.USER) == {"model": "opus", "env": {"A": "1"}}

    def test_empty_file_is_empty(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.PROJECT, "")
        assert resolver.load_scope(ConfigScope.PROJECT) == {}

    def test_malformed_json_is_logged_not_raised(self, resolver: ScopeResolver, write_scope, caplog):
        write_scope(ConfigScope.LOCAL, "{not json")
        with caplog.at_level(logging.WARNING):
            assert resolver.load_scope(ConfigScope.LOCAL) == {}
        assert "Failed to parse local settings" in caplog.text

    def test_invalid_utf8_is_logged_not_raised(self, resolver: ScopeResolver, caplog):
        path = resolver.path_for(ConfigScope.PROJECT)
        path.parent.mkdir(parents=True)
        path.write_bytes(b'{"model": "\xff\xfe"}')
        with caplog.at_level(logging.WARNING):
            assert resolver.load_scope(ConfigScope.PROJECT) == {}
        assert "Failed to decode project settings" in caplog.text

    def test_non_object_json_is_empty(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, "[1, 2, 3]")
        assert resolver.load_scope(ConfigScope.USER) == {}

    def test_directory_in_place_of_file_propagates(self, resolver: ScopeResolver):
        resolver.path_for(ConfigScope.USER).mkdir(parents=True)
        with pytest.raises(OSError):
            resolver.load_scope(ConfigScope.USER)


class TestLoadEffective:
    def test_no_files(self, resolver: ScopeResolver):
        assert resolver.load_effective() == {}

    def test_with_scope_is_load_scope(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, {"model": "a"})
        write_scope(ConfigScope.LOCAL, {"model": "b"})
        assert resolver.load_effective(ConfigScope.USER) == {"model": "a"}
        assert resolver.load_effective("local") == {"model": "b"}

    def test_later_scopes_override(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.ENTERPRISE, {"model": "e", "a": 1})
        write_scope(ConfigScope.USER, {"model": "u", "b": 2})
        write_scope(ConfigScope.PROJECT, {"model": "p", "c": 3})
        write_scope(ConfigScope.LOCAL, {"model": "l"})
        assert resolver.load_effective() == {"model": "l", "a": 1, "b": 2, "c": 3}

    def test_project_overrides_user(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, {"model": "u"})
        write_scope(ConfigScope.PROJECT, {"model": "p"})
        assert resolver.load_effective()["model"] == "p"

    def test_merge_is_shallow(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, {"permissions": {"allow": ["A"], "deny": ["X"]}})
        write_scope(ConfigScope.LOCAL, {"permissions": {"allow": ["B"]}})
        effective = resolver.load_effective()
        assert effective["permissions"] == {"allow": ["B"]}

    def test_corrupt_scope_does_not_block_others(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, {"model": "u"})
        write_scope(ConfigScope.PROJECT, "{{{")
        assert resolver.load_effective() == {"model": "u"}

    def test_undecodable_scope_does_not_block_others(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.USER, {"model": "u"})
        path = resolver.path_for(ConfigScope.PROJECT)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b'{"model": "\xff\xfe"}')
        assert resolver.load_effective() == {"model": "u"}


class TestSave:
    @pytest.mark.parametrize("scope", ALL_SCOPES)
    def test_round_trip(self, resolver: ScopeResolver, scope: ConfigScope):
        settings = {
            "permissions": {"allow": ["Bash(git:*)"], "deny": []},
            "env": {"DEBUG": "1"},
            "enabledPlugins": {"x@y": True},
            "cleanupPeriodDays": 30,
        }
        resolver.save(scope, settings)
        assert resolver.load_scope(scope) == settings

    def test_pretty_printed_two_spaces(self, resolver: ScopeResolver):
        path = resolver.save(ConfigScope.USER, {"model": "opus"})
        assert path.read_text(encoding="utf-8") == '{\n  "model": "opus"\n}'

    def test_creates_parent_dirs(self, resolver: ScopeResolver):
        path = resolver.path_for(ConfigScope.LOCAL)
        assert not path.parent.exists()
        resolver.save(ConfigScope.LOCAL, {})
        assert path.exists()

    def test_overwrites_and_leaves_no_temp_files(self, resolver: ScopeResolver):
        resolver.save(ConfigScope.USER, {"model": "a" * 1000})
        resolver.save(ConfigScope.USER, {"model": "b"})
        path = resolver.path_for(ConfigScope.USER)
        assert json.loads(path.read_text()) == {"model": "b"}
        assert [p.name for p in path.parent.iterdir()] == ["settings.json"]

    def test_keeps_existing_file_mode(self, resolver: ScopeResolver, write_scope):
        path = write_scope(ConfigScope.USER, {"model": "a"})
        path.chmod(0o644)
        resolver.save(ConfigScope.USER, {"model": "b"})
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_new_file_mode_follows_umask(self, resolver: ScopeResolver):
        old_umask = os.umask(0o022)
        try:
            path = resolver.save(ConfigScope.LOCAL, {})
        finally:
            os.umask(old_umask)
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_unicode(self, resolver: ScopeResolver):
        resolver.save(ConfigScope.PROJECT, {"note": "café ✓"})
        assert resolver.load_scope(ConfigScope.PROJECT) == {"note": "café ✓"}

    def test_rejects_non_mapping(self, resolver: ScopeResolver):
        with pytest.raises(TypeError):
            resolver.save(ConfigScope.USER, ["not", "settings"])  # type: ignore[arg-type]

    def test_invalid_scope(self, resolver: ScopeResolver):
        with pytest.raises(InvalidScopeError):
            resolver.save("everywhere", {})


class TestDelete:
    def test_delete_existing(self, resolver: ScopeResolver, write_scope):
        path = write_scope(ConfigScope.USER, {"model": "x"})
        resolver.delete(ConfigScope.USER)
        assert not path.exists()
        assert resolver.load_scope(ConfigScope.USER) == {}

    def test_delete_missing_is_silent(self, resolver: ScopeResolver):
        resolver.delete(ConfigScope.LOCAL)


class TestStatus:
    def test_status_for_all_scopes(self, resolver: ScopeResolver, write_scope):
        write_scope(ConfigScope.PROJECT, {})
        status = resolver.status_for_all_scopes()
        assert set(status) == set(ConfigScope)
        assert status[ConfigScope.PROJECT].exists is True
        assert status[ConfigScope.USER].exists is False
        assert status[ConfigScope.USER].path == resolver.path_for(ConfigScope.USER)


class TestRawAccess:
    def test_read_raw_missing(self, resolver: ScopeResolver):
        assert resolver.read_raw(ConfigScope.USER) is None

    def test_write_then_read_raw(self, resolver: ScopeResolver):
        resolver.write_raw(ConfigScope.USER, '{"a": 1}')
        assert resolver.read_raw(ConfigScope.USER) == '{"a": 1}'
