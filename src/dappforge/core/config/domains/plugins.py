"""Plugin registry configuration."""
from __future__ import annotations

from functools import cached_property
from typing import List

from ..base import BaseDomainConfig


class PluginsConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "plugins"

    @cached_property
    def allowed(self) -> List[str]:
        """Allow-listed plugin ids; empty means any id may register."""
        return [str(p) for p in self.section.get("allowed") or [] if p]


__all__ = ["PluginsConfig"]
