"""Domain-specific configuration accessors."""
from __future__ import annotations

from .composition import CompositionConfig
from .logging import LoggingConfig
from .plugins import PluginsConfig

__all__ = ["CompositionConfig", "LoggingConfig", "PluginsConfig"]
