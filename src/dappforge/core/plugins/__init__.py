"""Plugin contract and registry."""
from __future__ import annotations

from .base import (
    BasePlugin,
    ExecutionContext,
    NodePlugin,
    PluginDependency,
    PluginMetadata,
    PluginPort,
    PluginValidationResult,
    ValidationIssue,
    load_config_schema,
)
from .registry import PluginRegistry, create_default_registry

__all__ = [
    "BasePlugin",
    "ExecutionContext",
    "NodePlugin",
    "PluginDependency",
    "PluginMetadata",
    "PluginPort",
    "PluginRegistry",
    "PluginValidationResult",
    "ValidationIssue",
    "create_default_registry",
    "load_config_schema",
]
