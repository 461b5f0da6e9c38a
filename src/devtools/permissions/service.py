"""PermissionService — evaluates tool calls against settings permission rules.

Rules are checked in load order and the first matching rule decides:

- deny  -> not allowed
- ask   -> allowed, but requires confirmation
- allow -> allowed

A call that matches no rule is allowed.
"""

from __future__ import annotations

import logging
from typing import Any

from devtools.permissions.rules import parse_permission_rule, rule_matches
from devtools.types.config import Settings
from devtools.types.permissions import (
    PermissionCheckResult,
    PermissionRule,
    PermissionRuleType,
)

logger = logging.getLogger(__name__)

DENIED_REASON = "Denied by permission rule"
ASK_REASON = "Requires confirmation"


class PermissionService:
    """Holds one settings snapshot's permission rules.

    Build a fresh instance per request from freshly loaded settings; the
    rule list is owned by the instance and never shared.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._rules: list[PermissionRule] = []
        self._load(settings or {})

    def _load(self, settings: Settings) -> None:
        permissions = settings.get("permissions") or {}
        if not isinstance(permissions, dict):
            logger.warning("Ignoring non-object permissions block")
            return

        for rule_type in PermissionRuleType:
            entries = permissions.get(rule_type.value)
            if entries is None:
                continue
            if not isinstance(entries, list):
                logger.warning(
                    "Ignoring permissions.%s: expected a list, got %s",
                    rule_type.value, type(entries).__name__,
                )
                continue
            for entry in entries:
                if not isinstance(entry, str):
                    logger.warning(
                        "Skipping non-string rule in permissions.%s: %r",
                        rule_type.value, entry,
                    )
                    continue
                self._rules.append(parse_permission_rule(entry, rule_type))

    def parse_permission_rule(
        self, text: str, rule_type: PermissionRuleType | str,
    ) -> PermissionRule:
        return parse_permission_rule(text, rule_type)

    def check_permission(
        self, tool: str, args: dict[str, Any] | None = None,
    ) -> PermissionCheckResult:
        """Evaluate a tool call. First matching rule wins."""
        check_args = args or {}

        for rule in self._rules:
            if not rule_matches(rule, tool, check_args):
                continue
            match rule.type:
                case PermissionRuleType.DENY:
                    return PermissionCheckResult(
                        allowed=False, reason=DENIED_REASON, rule=rule,
                    )
                case PermissionRuleType.ASK:
                    return PermissionCheckResult(
                        allowed=True, ask=True, reason=ASK_REASON, rule=rule,
                    )
                case PermissionRuleType.ALLOW:
                    return PermissionCheckResult(allowed=True, rule=rule)

        return PermissionCheckResult(allowed=True)

    # -- rule management ---------------------------------------------------

    def get_rules(self) -> list[PermissionRule]:
        return list(self._rules)

    def add_rule(self, rule: PermissionRule) -> None:
        self._rules.append(rule)

    def remove_rule(self, original: str) -> bool:
        """Remove the first rule whose text is exactly *original*."""
        for i, rule in enumerate(self._rules):
            if rule.original == original:
                del self._rules[i]
                return True
        return False

    def clear_rules(self) -> None:
        self._rules = []

    def export_rules(self) -> dict[str, list[str]]:
        """Group rule texts by type, keeping insertion order within each group."""
        exported: dict[str, list[str]] = {t.value: [] for t in PermissionRuleType}
        for rule in self._rules:
            exported[rule.type.value].append(rule.original)
        return exported
