"""
dappforge blueprint validate command.

SUMMARY: Validate a blueprint document and its node configurations
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List

from dappforge.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from dappforge.core.blueprint import load_blueprint
from dappforge.core.exceptions import BlueprintValidationError
from dappforge.core.plugins import create_default_registry

SUMMARY = "Validate a blueprint document and its node configurations"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Blueprint file (.yaml, .yml or .json)")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    path = Path(args.file)

    try:
        blueprint = load_blueprint(path)
    except FileNotFoundError as e:
        formatter.error(e, error_code="not_found")
        return 1
    except BlueprintValidationError as e:
        if formatter.json_mode:
            formatter.json_output({"valid": False, "issues": e.context.get("issues", []), "nodes": {}})
        else:
            formatter.text(f"❌ {e}")
            for issue in e.context.get("issues", []):
                formatter.text(f"   - {issue['field'] or '<root>'}: {issue['message']} [{issue['code']}]")
        return 1

    registry = create_default_registry(repo_root=get_repo_root(args))
    nodes: Dict[str, Dict[str, Any]] = {}
    for node in blueprint.nodes:
        plugin = registry.get(node.type)
        if plugin is None:
            nodes[node.id] = {
                "valid": False,
                "errors": [{"field": "type", "message": f'Plugin "{node.type}" not found', "code": "registry_miss"}],
                "warnings": [],
            }
            continue
        nodes[node.id] = plugin.validate(node.config or {}).to_dict()

    valid = all(n["valid"] for n in nodes.values())
    if formatter.json_mode:
        formatter.json_output({"valid": valid, "issues": [], "nodes": nodes})
        return 0 if valid else 1

    lines: List[str] = []
    for node_id, result in nodes.items():
        mark = "✅" if result["valid"] else "❌"
        lines.append(f"{mark} {node_id}")
        for err in result["errors"]:
            lines.append(f"   - {err['field'] or '<config>'}: {err['message']} [{err['code']}]")
        for warn in result["warnings"]:
            lines.append(f"   ~ {warn['field'] or '<config>'}: {warn['message']}")
    formatter.text("\n".join(lines))
    formatter.text(f"\n{'✅ Blueprint valid' if valid else '❌ Blueprint has invalid nodes'}")
    return 0 if valid else 1
