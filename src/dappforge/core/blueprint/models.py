"""Blueprint data model (read-only input to a composition run)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ProjectMetadata:
    name: str
    description: Optional[str] = None
    version: str = "0.1.0"
    author: Optional[str] = None
    license: str = "MIT"
    keywords: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class NetworkConfig:
    chain_id: int
    name: str
    rpc_url: Optional[str] = None
    explorer_url: Optional[str] = None
    is_testnet: bool = False


@dataclass(frozen=True)
class BlueprintConfig:
    project: ProjectMetadata
    network: Optional[NetworkConfig] = None
    generate_docs: bool = True


@dataclass(frozen=True)
class BlueprintNode:
    """A plugin instance on the canvas.

    ``type`` is the plugin identifier; ``config`` is validated by that plugin.
    """

    id: str
    type: str
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BlueprintEdge:
    """A connection meaning ``target`` consumes something ``source`` produces."""

    id: str
    source: str
    target: str
    type: str = "dependency"


@dataclass(frozen=True)
class Blueprint:
    id: str
    nodes: List[BlueprintNode]
    config: BlueprintConfig
    edges: List[BlueprintEdge] = field(default_factory=list)
    name: Optional[str] = None

    def node(self, node_id: str) -> Optional[BlueprintNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None


__all__ = [
    "ProjectMetadata",
    "NetworkConfig",
    "BlueprintConfig",
    "BlueprintNode",
    "BlueprintEdge",
    "Blueprint",
]
