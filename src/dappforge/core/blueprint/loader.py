"""Load blueprints from YAML/JSON documents.

Documents use the camelCase keys of the visual editor (``chainId``,
``generateDocs``...) and are validated against ``blueprint.schema.yaml``
before being turned into the frozen model.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from dappforge.core.exceptions import BlueprintValidationError
from dappforge.core.schemas.validation import ValidationIssue, collect_issues, load_schema
from dappforge.core.utils.io import read_structured

from .models import (
    Blueprint,
    BlueprintConfig,
    BlueprintEdge,
    BlueprintNode,
    NetworkConfig,
    ProjectMetadata,
)

logger = logging.getLogger(__name__)

BLUEPRINT_SCHEMA = "blueprint.schema.yaml"


def load_blueprint(path: Path) -> Blueprint:
    """Read, validate and build a blueprint from ``path``.

    Raises:
        BlueprintValidationError: Schema or structural violations.
        FileNotFoundError: ``path`` does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Blueprint not found: {path}")
    try:
        data = read_structured(path)
    except ValueError as exc:
        raise BlueprintValidationError(str(exc), context={"path": str(path)}) from exc
    logger.debug("Loaded blueprint document %s", path)
    return blueprint_from_dict(data)


def validate_blueprint_document(data: Any) -> List[ValidationIssue]:
    """Return schema and structural issues for a raw blueprint mapping."""
    issues = collect_issues(data, load_schema(BLUEPRINT_SCHEMA))
    if issues or not isinstance(data, Mapping):
        return issues

    seen: Dict[str, int] = {}
    for index, node in enumerate(data.get("nodes") or []):
        node_id = node["id"]
        if node_id in seen:
            issues.append(
                ValidationIssue(
                    field=f"nodes.{index}.id",
                    message=f"Duplicate node id '{node_id}' (first at nodes.{seen[node_id]})",
                    code="unique",
                )
            )
        else:
            seen[node_id] = index

    for index, edge in enumerate(data.get("edges") or []):
        for end in ("source", "target"):
            if edge[end] not in seen:
                issues.append(
                    ValidationIssue(
                        field=f"edges.{index}.{end}",
                        message=f"Edge references unknown node '{edge[end]}'",
                        code="reference",
                    )
                )
    return issues


def blueprint_from_dict(data: Any) -> Blueprint:
    """Validate a raw mapping and build the blueprint model."""
    issues = validate_blueprint_document(data)
    if issues:
        raise BlueprintValidationError(
            f"Invalid blueprint: {len(issues)} issue(s)",
            issues=issues,
        )

    nodes = [
        BlueprintNode(id=str(n["id"]), type=str(n["type"]), config=dict(n.get("config") or {}))
        for n in data["nodes"]
    ]
    edges = [
        BlueprintEdge(
            id=str(e["id"]),
            source=str(e["source"]),
            target=str(e["target"]),
            type=str(e.get("type") or "dependency"),
        )
        for e in data.get("edges") or []
    ]
    return Blueprint(
        id=str(data["id"]),
        name=data.get("name"),
        nodes=nodes,
        edges=edges,
        config=_config_from_dict(data["config"]),
    )


def _config_from_dict(raw: Mapping[str, Any]) -> BlueprintConfig:
    project = raw["project"]
    network = raw.get("network")
    return BlueprintConfig(
        project=ProjectMetadata(
            name=project["name"],
            description=project.get("description"),
            version=project.get("version") or "0.1.0",
            author=project.get("author"),
            license=project.get("license") or "MIT",
            keywords=list(project.get("keywords") or []),
        ),
        network=(
            NetworkConfig(
                chain_id=int(network["chainId"]),
                name=network["name"],
                rpc_url=network.get("rpcUrl"),
                explorer_url=network.get("explorerUrl"),
                is_testnet=bool(network.get("isTestnet", False)),
            )
            if network
            else None
        ),
        generate_docs=bool(raw.get("generateDocs", True)),
    )


__all__ = [
    "BLUEPRINT_SCHEMA",
    "load_blueprint",
    "blueprint_from_dict",
    "validate_blueprint_document",
]
