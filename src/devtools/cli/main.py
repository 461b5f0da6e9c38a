"""CLI entry point for devtools."""

from __future__ import annotations

import logging

import click

from devtools.core.config import load_config


@click.group()
@click.option("--cwd", default=None, help="Project directory (default: current directory)")
@click.option("--home", default=None, help="Home directory holding ~/.claude")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, cwd: str | None, home: str | None, verbose: bool) -> None:
    """devtools -- inspect and edit assistant settings across scopes.

    \b
    Usage:
      devtools settings status
      devtools settings show --scope user
      devtools permissions list
      devtools permissions check Bash --arg command="git status"
      devtools env set DEBUG=1 --scope local
      devtools settings export --all -o backup.json
      devtools validate
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(cwd=cwd, home=home)


def _register_subcommands() -> None:
    """Register CLI subcommands."""
    from devtools.cli.commands import env_cmd, permissions_cmd, settings_cmd, validate_cmd

    cli.add_command(settings_cmd, "settings")
    cli.add_command(permissions_cmd, "permissions")
    cli.add_command(env_cmd, "env")
    cli.add_command(validate_cmd, "validate")


_register_subcommands()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
