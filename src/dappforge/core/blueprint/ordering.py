"""Dependency ordering of blueprint nodes.

The composition driver processes nodes in whatever order it is given; callers
acting as the orchestrator use ``order_nodes`` to put every edge's source
before its target.
"""
from __future__ import annotations

from typing import Dict, List

from dappforge.core.exceptions import BlueprintCycleError

from .models import Blueprint, BlueprintNode


def order_nodes(blueprint: Blueprint) -> List[BlueprintNode]:
    """Return nodes so that each edge source precedes its target.

    Kahn's algorithm; ties are broken by the order nodes appear in the
    blueprint, so an edge-free blueprint keeps its authored order.

    Raises:
        BlueprintCycleError: The edges form a cycle.
    """
    position: Dict[str, int] = {n.id: i for i, n in enumerate(blueprint.nodes)}
    indeg: Dict[str, int] = {n.id: 0 for n in blueprint.nodes}
    adj: Dict[str, List[str]] = {n.id: [] for n in blueprint.nodes}

    for edge in blueprint.edges:
        if edge.source not in indeg or edge.target not in indeg:
            continue
        adj[edge.source].append(edge.target)
        indeg[edge.target] += 1

    ready = [node_id for node_id, d in indeg.items() if d == 0]
    order: List[str] = []
    while ready:
        ready.sort(key=position.__getitem__)
        node_id = ready.pop(0)
        order.append(node_id)
        for nxt in adj[node_id]:
            indeg[nxt] -= 1
            if indeg[nxt] == 0:
                ready.append(nxt)

    if len(order) != len(blueprint.nodes):
        remaining = sorted((n for n, d in indeg.items() if d > 0), key=position.__getitem__)
        raise BlueprintCycleError(remaining)

    by_id = {n.id: n for n in blueprint.nodes}
    return [by_id[node_id] for node_id in order]


__all__ = ["order_nodes"]
