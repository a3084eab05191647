"""Tests for dependency ordering of blueprint nodes."""
from __future__ import annotations

import pytest

from dappforge.core.blueprint.models import BlueprintEdge
from dappforge.core.blueprint.ordering import order_nodes
from dappforge.core.exceptions import BlueprintCycleError
from helpers.plugins import make_blueprint


def _with_edges(blueprint, *pairs):
    edges = [BlueprintEdge(id=f"e{i}", source=s, target=t) for i, (s, t) in enumerate(pairs)]
    return type(blueprint)(id=blueprint.id, nodes=blueprint.nodes, config=blueprint.config, edges=edges)


def test_edge_free_blueprint_keeps_authored_order() -> None:
    blueprint = make_blueprint(("c", "x"), ("a", "x"), ("b", "x"))

    assert [n.id for n in order_nodes(blueprint)] == ["c", "a", "b"]


def test_sources_precede_targets() -> None:
    blueprint = _with_edges(
        make_blueprint(("fe", "frontend-scaffold"), ("wa", "wallet-auth"), ("rpc", "rpc-provider")),
        ("wa", "fe"),
        ("rpc", "wa"),
    )

    assert [n.id for n in order_nodes(blueprint)] == ["rpc", "wa", "fe"]


def test_ties_broken_by_authored_position() -> None:
    blueprint = _with_edges(
        make_blueprint(("a", "x"), ("b", "x"), ("c", "x"), ("d", "x")),
        ("c", "a"),
    )

    assert [n.id for n in order_nodes(blueprint)] == ["b", "c", "a", "d"]


def test_cycle_raises_with_remaining_nodes() -> None:
    blueprint = _with_edges(
        make_blueprint(("a", "x"), ("b", "x"), ("c", "x")),
        ("a", "b"),
        ("b", "a"),
    )

    with pytest.raises(BlueprintCycleError) as excinfo:
        order_nodes(blueprint)

    assert excinfo.value.node_ids == ["a", "b"]
