"""Blueprint model, loading and node ordering."""
from __future__ import annotations

from .loader import blueprint_from_dict, load_blueprint, validate_blueprint_document
from .models import (
    Blueprint,
    BlueprintConfig,
    BlueprintEdge,
    BlueprintNode,
    NetworkConfig,
    ProjectMetadata,
)
from .ordering import order_nodes

__all__ = [
    "Blueprint",
    "BlueprintConfig",
    "BlueprintEdge",
    "BlueprintNode",
    "NetworkConfig",
    "ProjectMetadata",
    "blueprint_from_dict",
    "load_blueprint",
    "order_nodes",
    "validate_blueprint_document",
]
