"""Scope-aware settings loading for devtools."""

from devtools.settings.resolver import ScopeResolver
from devtools.settings.service import ConfigService

__all__ = ["ConfigService", "ScopeResolver"]
