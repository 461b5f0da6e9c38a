"""CLI subcommands for devtools (settings, permissions, env, validate)."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, NoReturn

import click
import yaml
from rich.console import Console

from devtools.cli.output import print_check_result, print_rules, print_status, print_validation
from devtools.errors import DevtoolsError
from devtools.settings.service import ConfigService
from devtools.types.config import ConfigScope
from devtools.types.permissions import PermissionRuleType
from devtools.validation.validator import validate_settings

_SCOPES = [s.value for s in ConfigScope.ordered()]
_RULE_TYPES = [t.value for t in PermissionRuleType]


def _service(ctx: click.Context) -> ConfigService:
    return ConfigService(ctx.obj["config"])


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(1)


def _parse_args(pairs: tuple[str, ...], param_hint: str = "--arg") -> dict[str, Any]:
    args: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint=param_hint)
        args[key] = value
    return args


# --- settings ---

@click.group()
def settings_cmd() -> None:
    """Inspect and edit settings files."""


@settings_cmd.command("show")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=None,
              help="Single scope (default: merged effective settings)")
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="json")
@click.pass_context
def settings_show(ctx: click.Context, scope: str | None, fmt: str) -> None:
    """Print effective or per-scope settings."""
    try:
        settings = asyncio.run(_service(ctx).load_settings(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)

    if fmt == "yaml":
        click.echo(yaml.safe_dump(settings, sort_keys=False, allow_unicode=True), nl=False)
    else:
        click.echo(json.dumps(settings, indent=2))


@settings_cmd.command("status")
@click.pass_context
def settings_status(ctx: click.Context) -> None:
    """Show which scope files exist."""
    service = _service(ctx)
    status = service.resolver.status_for_all_scopes()
    print_status(Console(), status)


@settings_cmd.command("paths")
@click.pass_context
def settings_paths(ctx: click.Context) -> None:
    """Print the settings file path of every scope."""
    for scope, path in _service(ctx).resolver.paths_for_scopes().items():
        click.echo(f"{scope.value:<12} {path}")


@settings_cmd.command("delete")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), required=True)
@click.confirmation_option(prompt="Delete this settings file?")
@click.pass_context
def settings_delete(ctx: click.Context, scope: str) -> None:
    """Delete a scope's settings file."""
    try:
        asyncio.run(_service(ctx).delete_config_file(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)
    click.echo(f"Settings deleted from {scope} scope")


@settings_cmd.command("export")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=None,
              help="Single scope (default: merged effective settings)")
@click.option("--all", "export_all", is_flag=True, help="Export user, project and local scopes")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Write to a file instead of stdout")
@click.pass_context
def settings_export(ctx: click.Context, scope: str | None, export_all: bool, output: str | None) -> None:
    """Export settings as a versioned JSON document."""
    if export_all and scope:
        raise click.UsageError("--all and --scope are mutually exclusive")
    service = _service(ctx)
    try:
        data = asyncio.run(service.export_all() if export_all else service.export_settings(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)

    text = json.dumps(data, indent=2)
    if output is None:
        click.echo(text)
        return
    try:
        Path(output).write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        _fail(e)
    click.echo(f"Exported settings to {output}")


@settings_cmd.command("import")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=ConfigScope.USER.value)
@click.pass_context
def settings_import(ctx: click.Context, file: str, scope: str) -> None:
    """Import an exported settings document into a scope."""
    try:
        payload = json.loads(Path(file).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        _fail(e)
    except json.JSONDecodeError as e:
        _fail(ValueError(f"{file} is not valid JSON: {e}"))

    try:
        asyncio.run(_service(ctx).import_settings(payload, scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)
    click.echo(f"Settings imported to {scope} scope")


# --- permissions ---

@click.group()
def permissions_cmd() -> None:
    """Inspect, test and edit permission rules."""


@permissions_cmd.command("list")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=None,
              help="Single scope (default: merged effective settings)")
@click.pass_context
def permissions_list(ctx: click.Context, scope: str | None) -> None:
    """List rules in evaluation order."""
    try:
        service = asyncio.run(_service(ctx).build_permission_service(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)
    print_rules(Console(), service.get_rules())


@permissions_cmd.command("check")
@click.argument("tool")
@click.option("--arg", "-a", "arg_pairs", multiple=True, help="Tool argument as key=value")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=None)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def permissions_check(
    ctx: click.Context, tool: str, arg_pairs: tuple[str, ...], scope: str | None, as_json: bool,
) -> None:
    """Evaluate a tool call against the current rules."""
    args = _parse_args(arg_pairs)
    try:
        service = asyncio.run(_service(ctx).build_permission_service(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)

    result = service.check_permission(tool, args)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_check_result(Console(), result)


@permissions_cmd.command("add")
@click.argument("rule")
@click.option("--type", "-t", "rule_type", type=click.Choice(_RULE_TYPES), required=True)
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=ConfigScope.USER.value)
@click.pass_context
def permissions_add(ctx: click.Context, rule: str, rule_type: str, scope: str) -> None:
    """Append a rule to a scope's settings file."""
    try:
        asyncio.run(_service(ctx).add_permission_rule(rule, rule_type, scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)
    click.echo(f"Added {rule_type} rule {rule} to {scope} scope")


@permissions_cmd.command("remove")
@click.argument("rule")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=ConfigScope.USER.value)
@click.pass_context
def permissions_remove(ctx: click.Context, rule: str, scope: str) -> None:
    """Remove a rule (exact text match) from a scope's settings file."""
    try:
        removed = asyncio.run(_service(ctx).remove_permission_rule(rule, scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)
    if not removed:
        click.echo(f"Rule not found in {scope} scope: {rule}", err=True)
        raise SystemExit(1)
    click.echo(f"Removed rule {rule} from {scope} scope")


# --- env ---

@click.group()
def env_cmd() -> None:
    """Inspect and edit the env block of settings."""


@env_cmd.command("show")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=None,
              help="Single scope (default: merged effective settings)")
@click.pass_context
def env_show(ctx: click.Context, scope: str | None) -> None:
    """Print environment variables as KEY=VALUE lines."""
    try:
        env = asyncio.run(_service(ctx).get_env(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)
    for key, value in env.items():
        click.echo(f"{key}={value}")


@env_cmd.command("set")
@click.argument("pairs", nargs=-1, required=True)
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=ConfigScope.USER.value)
@click.pass_context
def env_set(ctx: click.Context, pairs: tuple[str, ...], scope: str) -> None:
    """Set KEY=VALUE variables in a scope, keeping the others."""
    updates = _parse_args(pairs, param_hint="PAIRS")
    service = _service(ctx)

    async def _run() -> None:
        env = await service.get_env(scope)
        env.update(updates)
        await service.set_env(scope, env)

    try:
        asyncio.run(_run())
    except (OSError, DevtoolsError) as e:
        _fail(e)
    click.echo(f"Environment variables saved to {scope} scope")


@env_cmd.command("unset")
@click.argument("keys", nargs=-1, required=True)
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=ConfigScope.USER.value)
@click.pass_context
def env_unset(ctx: click.Context, keys: tuple[str, ...], scope: str) -> None:
    """Remove variables from a scope's env block."""
    service = _service(ctx)

    async def _run() -> list[str]:
        env = await service.get_env(scope)
        missing = [k for k in keys if k not in env]
        for key in keys:
            env.pop(key, None)
        await service.set_env(scope, env)
        return missing

    try:
        missing = asyncio.run(_run())
    except (OSError, DevtoolsError) as e:
        _fail(e)
    for key in missing:
        click.echo(f"Not set in {scope} scope: {key}", err=True)
    click.echo(f"Environment variables saved to {scope} scope")


# --- validate ---

@click.command("validate")
@click.option("--scope", "-s", type=click.Choice(_SCOPES), default=None,
              help="Single scope (default: merged effective settings)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def validate_cmd(ctx: click.Context, scope: str | None, as_json: bool) -> None:
    """Validate settings; exits 1 when errors are found."""
    try:
        settings = asyncio.run(_service(ctx).load_settings(scope))
    except (OSError, DevtoolsError) as e:
        _fail(e)

    result = validate_settings(settings)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_validation(Console(), result)
    if not result.valid:
        raise SystemExit(1)
