"""
dappforge plugins list command.

SUMMARY: List registered plugins
"""
from __future__ import annotations

import argparse

from dappforge.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from dappforge.core.plugins import create_default_registry

SUMMARY = "List registered plugins"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category", type=str, help="Only list plugins of this category")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    registry = create_default_registry(repo_root=get_repo_root(args))

    metadata = registry.all_metadata()
    if args.category:
        metadata = [m for m in metadata if m.category == args.category]
    metadata.sort(key=lambda m: m.id)

    if formatter.json_mode:
        formatter.json_output({"plugins": [m.to_dict() for m in metadata], "count": len(metadata)})
        return 0

    if not metadata:
        formatter.text("No plugins registered")
        return 0
    for m in metadata:
        formatter.text(f"{m.id} ({m.version}) [{m.category}]")
        formatter.text(f"  {m.description}")
    return 0
