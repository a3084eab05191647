"""Tests for the project-level files written at the root of a generated tree."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from dappforge.core.blueprint.models import ProjectMetadata
from dappforge.core.codegen.types import (
    CodegenFile,
    DocSnippet,
    EnvVarDefinition,
    InterfaceDefinition,
    ScriptDefinition,
)
from dappforge.core.composition.engine import CompositionDriver, GenerationResult
from dappforge.core.composition.paths import PathContext
from dappforge.core.composition.root_files import (
    BASE_SCRIPTS,
    build_root_files,
    build_root_package_json,
    merge_scripts,
    needs_monorepo,
)
from dappforge.core.composition.writer import GenerationWriter
from dappforge.core.plugins.registry import PluginRegistry
from helpers.plugins import StaticPlugin, make_blueprint

STANDALONE = PathContext(has_frontend=True, has_backend=False, has_contracts=True)
WORKSPACE = PathContext(has_frontend=True, has_backend=True, has_contracts=False)
PROJECT = ProjectMetadata(name="Token Swap", description="Swap tokens on Arbitrum", keywords=["defi"])


def _result(context: PathContext = STANDALONE, *, files=(), scripts=(), env_vars=(), interfaces=()):
    return GenerationResult(
        run_id="run-root",
        path_context=context,
        files={f.path: f for f in files},
        env_vars=list(env_vars),
        scripts=list(scripts),
        interfaces=list(interfaces),
        project=PROJECT,
    )


def _by_path(files):
    return {f.path: f.content for f in files}


@pytest.mark.parametrize(
    "context,expected",
    [
        (PathContext(has_frontend=True, has_backend=False, has_contracts=False), False),
        (PathContext(has_frontend=True, has_backend=False, has_contracts=True), False),
        (PathContext(has_frontend=True, has_backend=True, has_contracts=False), True),
        (PathContext(has_frontend=False, has_backend=False, has_contracts=True), True),
        (PathContext(has_frontend=False, has_backend=False, has_contracts=False), True),
    ],
)
def test_layout_follows_path_context(context: PathContext, expected: bool) -> None:
    assert needs_monorepo(context) is expected


def test_node_scripts_overlay_base_scripts() -> None:
    scripts = [
        ScriptDefinition(name="deploy", command="forge script Deploy"),
        ScriptDefinition(name="dev", command="turbo dev"),
        ScriptDefinition(name="deploy", command="hardhat deploy"),
    ]

    merged = merge_scripts(scripts)

    assert list(merged) == [*BASE_SCRIPTS, "deploy"]
    assert merged["dev"] == "turbo dev"
    assert merged["deploy"] == "hardhat deploy"


def test_package_json_from_project_metadata() -> None:
    manifest = json.loads(
        build_root_package_json(PROJECT, [ScriptDefinition(name="wallet:setup", command="echo setup")])
    )

    assert manifest["name"] == "token-swap"
    assert manifest["version"] == "0.1.0"
    assert manifest["description"] == "Swap tokens on Arbitrum"
    assert manifest["private"] is True
    assert manifest["scripts"]["wallet:setup"] == "echo setup"
    assert manifest["scripts"]["build"] == "next build"
    assert manifest["license"] == "MIT"
    assert manifest["keywords"] == ["defi"]
    assert "author" not in manifest


def test_standalone_app_has_no_workspace_file() -> None:
    files = _by_path(build_root_files(_result(STANDALONE)))

    assert sorted(files) == [".gitignore", "README.md", "package.json"]
    assert "node_modules/" in files[".gitignore"]


def test_workspace_layout_adds_pnpm_workspace() -> None:
    files = _by_path(build_root_files(_result(WORKSPACE)))

    assert yaml.safe_load(files["pnpm-workspace.yaml"]) == {"packages": ["apps/*", "packages/*", "contracts/*"]}
    assert "├── apps/api/" in files["README.md"]
    assert "├── packages/" in files["README.md"]


def test_readme_lists_project_scripts_env_and_interfaces() -> None:
    result = _result(
        scripts=[ScriptDefinition(name="wallet:setup", command="echo setup", description="Wallet setup help")],
        env_vars=[
            EnvVarDefinition(key="NEXT_PUBLIC_WC_ID", description="WalletConnect project id", required=True),
            EnvVarDefinition(key="OPTIONAL_KEY", description="Optional", required=False),
        ],
        interfaces=[InterfaceDefinition(name="TokenSwap", type="abi", content="[]")],
    )

    readme = _by_path(build_root_files(result))["README.md"]

    assert readme.startswith("# Token Swap\n\nSwap tokens on Arbitrum\n")
    assert "token-swap/" in readme
    assert "├── apps/web/" in readme
    assert "├── contracts/" in readme
    assert "- `NEXT_PUBLIC_WC_ID`: WalletConnect project id" in readme
    assert "OPTIONAL_KEY" not in readme
    assert "| `pnpm wallet:setup` | `echo setup` | Wallet setup help |" in readme
    assert "| `pnpm dev` | `next dev` |  |" in readme
    assert "- **TokenSwap** (abi)" in readme
    assert "{%" not in readme


def test_readme_without_required_env_or_interfaces() -> None:
    readme = _by_path(build_root_files(_result()))["README.md"]

    assert "No variables are required." in readme
    assert "## Interfaces" not in readme


def test_explicit_project_overrides_result_metadata() -> None:
    files = _by_path(build_root_files(_result(), ProjectMetadata(name="Other App")))

    assert json.loads(files["package.json"])["name"] == "other-app"


def test_writer_emits_root_files_with_merged_scripts(tmp_path: Path) -> None:
    registry = PluginRegistry()
    registry.register(StaticPlugin("plugin-a", [("a.ts", "a", None)], scripts=[("deploy", "forge script A")]))
    registry.register(StaticPlugin("plugin-b", [("b.ts", "b", None)], scripts=[("seed", "node seed.js")]))
    result = CompositionDriver(registry).compose(make_blueprint(("a", "plugin-a"), ("b", "plugin-b")))

    GenerationWriter(tmp_path).write(result)

    manifest = json.loads((tmp_path / "package.json").read_text(encoding="utf-8"))
    assert manifest["name"] == "test-dapp"
    assert manifest["scripts"]["deploy"] == "forge script A"
    assert manifest["scripts"]["seed"] == "node seed.js"
    assert (tmp_path / "README.md").read_text(encoding="utf-8").startswith("# Test DApp\n")
    assert (tmp_path / "pnpm-workspace.yaml").is_file()
    assert (tmp_path / ".gitignore").is_file()


def test_generated_file_wins_over_root_file(tmp_path: Path) -> None:
    result = _result(files=[CodegenFile(path="README.md", content="custom\n")])

    written = GenerationWriter(tmp_path).write(result, include_env_example=False)

    assert (tmp_path / "README.md").read_text(encoding="utf-8") == "custom\n"
    assert sorted(p.name for p in written) == [".gitignore", "README.md", "package.json"]


def test_root_files_can_be_disabled(tmp_path: Path) -> None:
    GenerationWriter(tmp_path).write(_result(), include_env_example=False, include_root_files=False)

    assert list(tmp_path.iterdir()) == []


def test_doc_snippet_at_root_path_wins_over_root_readme(tmp_path: Path) -> None:
    result = GenerationResult(
        run_id="run-doc",
        path_context=STANDALONE,
        files={},
        docs=[DocSnippet(path="README.md", title="Guide", content="From a plugin\n")],
        project=PROJECT,
    )

    GenerationWriter(tmp_path).write(result, include_env_example=False)

    assert (tmp_path / "README.md").read_text(encoding="utf-8") == "# Guide\n\nFrom a plugin\n"
    assert (tmp_path / "package.json").is_file()
