"""Allow/deny rule conflict detection, used by the settings validator."""

from __future__ import annotations

import re
from dataclasses import dataclass

_PATTERN_RE = re.compile(r"\((.*)\)")


@dataclass(frozen=True, slots=True)
class RuleConflict:
    allow: str
    deny: str


def _tool_of(rule: str) -> str:
    return rule.split("(", 1)[0]


def _pattern_of(rule: str) -> str:
    match = _PATTERN_RE.search(rule)
    return match.group(1) if match else ""


def _wildcard_prefix(pattern: str) -> str:
    # "git push:*" -> "git push", "/etc/*" -> "/etc/"
    prefix = pattern.split("*", 1)[0]
    return prefix.removesuffix(":")


def are_rules_conflict(allow_rule: str, deny_rule: str) -> bool:
    """Return True if an allow rule and a deny rule can match the same call."""
    if _tool_of(allow_rule) != _tool_of(deny_rule):
        return False

    allow_pattern = _pattern_of(allow_rule)
    deny_pattern = _pattern_of(deny_rule)

    if allow_pattern == "*" or deny_pattern == "*":
        return True

    if "*" in allow_pattern and "*" in deny_pattern:
        allow_prefix = _wildcard_prefix(allow_pattern)
        deny_prefix = _wildcard_prefix(deny_pattern)
        return deny_prefix.startswith(allow_prefix) or allow_prefix.startswith(deny_prefix)

    return allow_pattern == deny_pattern


def find_conflicts(allow: list[str], deny: list[str]) -> list[RuleConflict]:
    """Every (allow, deny) pair that conflicts, in deny-then-allow order."""
    return [
        RuleConflict(allow=a, deny=d)
        for d in deny
        for a in allow
        if are_rules_conflict(a, d)
    ]
