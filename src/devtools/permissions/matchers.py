"""Tool-specific pattern matchers.

Each tool with content-level matching has an entry in :data:`MATCHERS`.
Supporting a new tool means registering one more entry; tools without an
entry match on tool name alone.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


def match_wildcard(pattern: str, value: str) -> bool:
    """Anchored match where ``*`` stands for any substring.

    A pattern without ``*`` must equal *value* exactly.
    """
    if "*" not in pattern:
        return value == pattern
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.fullmatch(regex, value) is not None


def match_bash_pattern(pattern: str, command: str) -> bool:
    """Match a Bash rule pattern against a command line.

    ``git:*`` is a prefix rule (any command starting with ``git``); other
    ``*`` wildcards match any substring; anything else is an exact match.
    """
    if pattern.endswith(":*"):
        return command.startswith(pattern[:-2])
    return match_wildcard(pattern, command)


def match_path_pattern(pattern: str, file_path: str) -> bool:
    return match_wildcard(pattern, file_path)


def match_url_pattern(pattern: str, url: str) -> bool:
    """Loose containment either way round; URLs are matched leniently."""
    return pattern in url or url in pattern


def _first_str(args: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = args.get(key)
        if value:
            return str(value)
    return ""


@dataclass(frozen=True, slots=True)
class ToolMatcher:
    """Pairs an argument extractor with the pattern test for one tool."""

    extract: Callable[[dict[str, Any]], str]
    match: Callable[[str, str], bool]

    def __call__(self, pattern: str, args: dict[str, Any]) -> bool:
        return self.match(pattern, self.extract(args))


_COMMAND = ToolMatcher(lambda a: _first_str(a, "command"), match_bash_pattern)
_FILE_PATH = ToolMatcher(
    lambda a: _first_str(a, "filePath", "path", "file_path"), match_path_pattern,
)
_URL = ToolMatcher(lambda a: _first_str(a, "url"), match_url_pattern)

MATCHERS: dict[str, ToolMatcher] = {
    "Bash": _COMMAND,
    "Read": _FILE_PATH,
    "Edit": _FILE_PATH,
    "Write": _FILE_PATH,
    "WebFetch": _URL,
}


def register_matcher(tool: str, matcher: ToolMatcher) -> None:
    """Add or replace the matcher used for *tool*."""
    MATCHERS[tool] = matcher


def pattern_matches(tool: str, pattern: str, args: dict[str, Any]) -> bool:
    """Test a rule pattern against a tool call's arguments."""
    matcher = MATCHERS.get(tool)
    if matcher is None:
        return True
    return matcher(pattern, args)
