"""Rich-powered tables for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from devtools.types.config import ConfigScope, ScopeStatus
from devtools.types.permissions import PermissionCheckResult, PermissionRule
from devtools.validation.validator import Severity, ValidationResult

STYLE_ALLOW = "bold #34d399"   # green
STYLE_ASK = "bold #fbbf24"     # amber
STYLE_DENY = "bold #f87171"    # red
STYLE_MUTED = "#7c7c8a"

_TYPE_STYLES = {"allow": STYLE_ALLOW, "ask": STYLE_ASK, "deny": STYLE_DENY}


def print_status(console: Console, status: dict[ConfigScope, ScopeStatus]) -> None:
    table = Table(title="Settings files")
    table.add_column("Scope", no_wrap=True)
    table.add_column("Exists", no_wrap=True)
    table.add_column("Path", style=STYLE_MUTED, overflow="fold")
    for scope, s in status.items():
        exists = f"[{STYLE_ALLOW}]yes[/]" if s.exists else f"[{STYLE_MUTED}]no[/]"
        table.add_row(scope.value, exists, escape(str(s.path)))
    console.print(table)


def print_rules(console: Console, rules: list[PermissionRule]) -> None:
    if not rules:
        console.print("No permission rules.")
        return

    table = Table(title="Permission rules (evaluated top to bottom)")
    table.add_column("#", justify="right")
    table.add_column("Type", no_wrap=True)
    table.add_column("Tool", no_wrap=True)
    table.add_column("Pattern")
    table.add_column("Rule", style=STYLE_MUTED)
    for i, rule in enumerate(rules, 1):
        style = _TYPE_STYLES[rule.type.value]
        table.add_row(
            str(i),
            f"[{style}]{rule.type.value}[/]",
            rule.tool or "*",
            escape(rule.pattern or ""),
            escape(rule.original),
        )
    console.print(table)


def print_check_result(console: Console, result: PermissionCheckResult) -> None:
    if not result.allowed:
        verdict = f"[{STYLE_DENY}]DENY[/]"
    elif result.ask:
        verdict = f"[{STYLE_ASK}]ASK[/]"
    else:
        verdict = f"[{STYLE_ALLOW}]ALLOW[/]"

    console.print(verdict)
    if result.reason:
        console.print(f"  reason: {result.reason}")
    if result.rule is not None:
        console.print(f"  rule:   {escape(result.rule.original)}")
    else:
        console.print(f"  [{STYLE_MUTED}]no matching rule (default allow)[/]")


def print_validation(console: Console, result: ValidationResult) -> None:
    if not result.errors:
        console.print(f"[{STYLE_ALLOW}]Settings are valid.[/]")
        return

    table = Table(title="Validation issues")
    table.add_column("Severity", no_wrap=True)
    table.add_column("Path")
    table.add_column("Message")
    for issue in result.errors:
        style = STYLE_DENY if issue.severity is Severity.ERROR else STYLE_ASK
        table.add_row(
            f"[{style}]{issue.severity.value}[/]", escape(issue.path or "-"), escape(issue.message),
        )
    console.print(table)
