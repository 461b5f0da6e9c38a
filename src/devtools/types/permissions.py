"""Permission rule and check-result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PermissionRuleType(Enum):
    """Directive carried by a permission rule."""

    ALLOW = "allow"
    ASK = "ask"
    DENY = "deny"


@dataclass(frozen=True, slots=True)
class ScopedRule:
    """A rule of the form ``Tool(pattern)``, e.g. ``Bash(git:*)``."""

    type: PermissionRuleType
    tool: str
    pattern: str
    original: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "tool": self.tool,
            "pattern": self.pattern,
            "original": self.original,
        }


@dataclass(frozen=True, slots=True)
class GlobalRule:
    """A catch-all rule: any text that isn't ``Tool(pattern)``.

    Matches every tool call regardless of tool or arguments.
    """

    type: PermissionRuleType
    original: str

    @property
    def tool(self) -> None:
        return None

    @property
    def pattern(self) -> None:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "original": self.original}


PermissionRule = ScopedRule | GlobalRule


@dataclass(frozen=True, slots=True)
class PermissionCheckResult:
    """Outcome of evaluating one tool call against a rule set."""

    allowed: bool
    ask: bool | None = None
    reason: str | None = None
    rule: PermissionRule | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"allowed": self.allowed}
        if self.ask is not None:
            data["ask"] = self.ask
        if self.reason is not None:
            data["reason"] = self.reason
        if self.rule is not None:
            data["rule"] = self.rule.to_dict()
        return data
