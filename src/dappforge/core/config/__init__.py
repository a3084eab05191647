"""
dappforge configuration (layered YAML with environment overrides).
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .domains import CompositionConfig, LoggingConfig, PluginsConfig
from .manager import ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "CompositionConfig",
    "LoggingConfig",
    "PluginsConfig",
    "clear_all_caches",
    "get_cached_config",
]
