"""Permission rule parsing and matching."""

from __future__ import annotations

import re
from typing import Any

from devtools.permissions.matchers import pattern_matches
from devtools.types.permissions import (
    GlobalRule,
    PermissionRule,
    PermissionRuleType,
    ScopedRule,
)

# Tool(pattern) -- tool name is letters only, pattern runs to the final ")"
_RULE_RE = re.compile(r"^([A-Za-z]+)\((.*)\)$")


def coerce_rule_type(rule_type: PermissionRuleType | str) -> PermissionRuleType:
    if isinstance(rule_type, PermissionRuleType):
        return rule_type
    return PermissionRuleType(rule_type)


def parse_permission_rule(
    text: str, rule_type: PermissionRuleType | str,
) -> PermissionRule:
    """Parse a rule string such as ``Bash(git:*)``.

    Text that doesn't have the ``Tool(pattern)`` shape becomes a
    :class:`GlobalRule`, which matches every tool call. Parsing never fails
    on the rule text itself; an unknown *rule_type* raises ``ValueError``.
    """
    rule_type = coerce_rule_type(rule_type)
    match = _RULE_RE.fullmatch(text)
    if match:
        return ScopedRule(
            type=rule_type,
            tool=match.group(1),
            pattern=match.group(2),
            original=text,
        )
    return GlobalRule(type=rule_type, original=text)


def rule_matches(rule: PermissionRule, tool: str, args: dict[str, Any]) -> bool:
    """Check if a rule applies to a tool call."""
    if rule.tool and rule.tool != tool:
        return False
    if rule.pattern:
        return pattern_matches(tool, rule.pattern, args)
    return True
