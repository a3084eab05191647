"""
dappforge blueprint generate command.

SUMMARY: Compose a blueprint into a generated project tree
"""
from __future__ import annotations

import argparse
from pathlib import Path

from dappforge.cli import OutputFormatter, add_dry_run_flag, add_json_flag, add_repo_root_flag, get_repo_root
from dappforge.core.blueprint import load_blueprint, order_nodes
from dappforge.core.composition import CompositionDriver, GenerationWriter
from dappforge.core.exceptions import NodeValidationError
from dappforge.core.plugins import create_default_registry

SUMMARY = "Compose a blueprint into a generated project tree"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Blueprint file (.yaml, .yml or .json)")
    parser.add_argument("--output", "-o", type=str, help="Directory to write the generated project into")
    parser.add_argument("--no-env-example", action="store_true", help="Do not write .env.example")
    parser.add_argument(
        "--no-root-files",
        action="store_true",
        help="Do not write the root package.json, README.md, .gitignore and workspace file",
    )
    add_dry_run_flag(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    repo_root = get_repo_root(args)

    try:
        blueprint = load_blueprint(Path(args.file))
    except FileNotFoundError as e:
        formatter.error(e, error_code="not_found")
        return 1
    nodes = order_nodes(blueprint)

    registry = create_default_registry(repo_root=repo_root)
    driver = CompositionDriver.from_config(registry, repo_root=repo_root)

    if driver.validate_nodes:
        for node_id, result in driver.validate(blueprint).items():
            if not result.valid:
                raise NodeValidationError(node_id, result.errors)

    result = driver.compose(blueprint, nodes=nodes)

    written = []
    if args.output and not args.dry_run:
        writer = GenerationWriter(Path(args.output))
        written = writer.write(
            result,
            include_env_example=not args.no_env_example,
            include_root_files=not args.no_root_files,
        )

    if formatter.json_mode:
        formatter.json_output({**result.to_dict(), "written": [str(p) for p in written]})
        return 0

    formatter.text(f"Generated {len(result.files)} files from blueprint {blueprint.id}:")
    for entry in result.manifest():
        formatter.text_kv(str(entry["path"]), f"{entry['size']} bytes")
    if result.warnings:
        formatter.text(f"\n⚠️  Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            formatter.text(f"   - [{warning.node_id}] {warning.path}: {warning.message}")
    if written:
        formatter.text(f"\n✅ Wrote {len(written)} files to {args.output}")
    elif args.dry_run:
        formatter.text("\n(dry run: nothing written)")
    return 0
