"""Plugin registry with an allow-list.

Registries are plain objects owned by their caller; there is no process-wide
default instance. ``create_default_registry`` builds one configured from
``plugins.allowed`` with the built-in plugins registered.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

from dappforge.core.exceptions import (
    PluginAlreadyRegisteredError,
    PluginNotAllowedError,
    PluginNotFoundError,
)

from .base import NodePlugin, PluginCategory, PluginMetadata

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Maps plugin ids to plugin instances.

    An empty allow-list accepts any id.
    """

    def __init__(self, allowed_plugin_ids: Optional[Iterable[str]] = None) -> None:
        self._plugins: Dict[str, NodePlugin] = {}
        self._allowed: FrozenSet[str] = frozenset(allowed_plugin_ids or ())

    @property
    def allowed_plugin_ids(self) -> FrozenSet[str]:
        return self._allowed

    def is_allowed(self, plugin_id: str) -> bool:
        return not self._allowed or plugin_id in self._allowed

    def register(self, plugin: NodePlugin) -> None:
        """Add ``plugin``.

        Raises:
            PluginNotAllowedError: id outside a non-empty allow-list.
            PluginAlreadyRegisteredError: id already present.
        """
        plugin_id = plugin.metadata.id
        if not self.is_allowed(plugin_id):
            raise PluginNotAllowedError(plugin_id)
        if plugin_id in self._plugins:
            raise PluginAlreadyRegisteredError(plugin_id)
        self._plugins[plugin_id] = plugin
        logger.debug("Registered plugin %s (%s)", plugin_id, plugin.metadata.version)

    def unregister(self, plugin_id: str) -> bool:
        return self._plugins.pop(plugin_id, None) is not None

    def get(self, plugin_id: str) -> Optional[NodePlugin]:
        return self._plugins.get(plugin_id)

    def get_or_raise(self, plugin_id: str) -> NodePlugin:
        plugin = self._plugins.get(plugin_id)
        if plugin is None:
            raise PluginNotFoundError(plugin_id)
        return plugin

    def has(self, plugin_id: str) -> bool:
        return plugin_id in self._plugins

    def ids(self) -> List[str]:
        return list(self._plugins)

    def all_metadata(self) -> List[PluginMetadata]:
        return [p.metadata for p in self._plugins.values()]

    def by_category(self, category: PluginCategory) -> List[NodePlugin]:
        return [p for p in self._plugins.values() if p.metadata.category == category]

    def clear(self) -> None:
        self._plugins.clear()

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)


def create_default_registry(
    allowed_plugin_ids: Optional[Iterable[str]] = None,
    *,
    repo_root: Optional[Path] = None,
) -> PluginRegistry:
    """Build a registry holding the built-in plugins.

    The allow-list defaults to the configured ``plugins.allowed`` list.
    """
    if allowed_plugin_ids is None:
        from dappforge.core.config import PluginsConfig

        allowed_plugin_ids = PluginsConfig(repo_root=repo_root).allowed

    from dappforge.plugins import register_builtin_plugins

    registry = PluginRegistry(allowed_plugin_ids)
    register_builtin_plugins(registry)
    return registry


__all__ = ["PluginRegistry", "create_default_registry"]
