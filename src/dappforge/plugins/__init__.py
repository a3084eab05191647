"""First-party plugins."""
from __future__ import annotations

import logging
from typing import List, Type

from dappforge.core.plugins.base import NodePlugin
from dappforge.core.plugins.registry import PluginRegistry

from .frontend_scaffold import FrontendScaffoldPlugin
from .wallet_auth import WalletAuthPlugin

logger = logging.getLogger(__name__)

BUILTIN_PLUGINS: List[Type[NodePlugin]] = [FrontendScaffoldPlugin, WalletAuthPlugin]


def register_builtin_plugins(registry: PluginRegistry) -> List[str]:
    """Register every built-in plugin the registry's allow-list accepts.

    Returns the ids that were registered.
    """
    registered: List[str] = []
    for plugin_cls in BUILTIN_PLUGINS:
        plugin_id = plugin_cls.metadata.id
        if not registry.is_allowed(plugin_id):
            logger.debug("Skipping built-in plugin %s: not in the allow-list", plugin_id)
            continue
        if registry.has(plugin_id):
            continue
        registry.register(plugin_cls())
        registered.append(plugin_id)
    return registered


__all__ = ["BUILTIN_PLUGINS", "FrontendScaffoldPlugin", "WalletAuthPlugin", "register_builtin_plugins"]
