"""Project-level files written at the root of a generated tree.

The root ``package.json`` carries every node's scripts on top of a base set,
and the layout (pnpm workspace or a single frontend app) follows the path
context. ``README.md`` and ``.gitignore`` are rendered from templates.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import yaml

from dappforge.core.blueprint.models import ProjectMetadata
from dappforge.core.codegen.output import dedupe_env_vars, package_name
from dappforge.core.codegen.types import CodegenFile, ScriptDefinition
from dappforge.core.utils.templates import render_template

from .engine import GenerationResult
from .paths import PathContext

logger = logging.getLogger(__name__)

TEMPLATE_DIR = "root"

BASE_SCRIPTS: Dict[str, str] = {
    "dev": "next dev",
    "build": "next build",
    "start": "next start",
    "lint": "next lint",
}
WORKSPACE_GLOBS = ["apps/*", "packages/*", "contracts/*"]


def needs_monorepo(context: PathContext) -> bool:
    """A frontend without a backend is generated as a single app; anything else is a workspace."""
    return context.has_backend or not context.has_frontend


def merge_scripts(scripts: Iterable[ScriptDefinition]) -> Dict[str, str]:
    """Base scripts overlaid with node scripts; a later node wins on a shared name."""
    merged = dict(BASE_SCRIPTS)
    for script in scripts:
        merged[script.name] = script.command
    return merged


def build_root_package_json(project: ProjectMetadata, scripts: Iterable[ScriptDefinition]) -> str:
    manifest: Dict[str, Any] = {
        "name": package_name(project.name),
        "version": project.version,
        "description": project.description,
        "private": True,
        "scripts": merge_scripts(scripts),
        "dependencies": {},
        "devDependencies": {"typescript": "^5.3.0"},
        "packageManager": "pnpm@9.0.0",
        "author": project.author,
        "license": project.license,
        "keywords": list(project.keywords),
    }
    return json.dumps({k: v for k, v in manifest.items() if v is not None}, indent=2) + "\n"


def build_workspace_yaml() -> str:
    return yaml.safe_dump({"packages": WORKSPACE_GLOBS}, sort_keys=False)


def _script_rows(scripts: Iterable[ScriptDefinition]) -> List[Dict[str, str]]:
    described: Dict[str, Optional[str]] = {}
    for script in scripts:
        described[script.name] = script.description or described.get(script.name)
    return [
        {"name": name, "command": command, "description": described.get(name) or ""}
        for name, command in merge_scripts(scripts).items()
    ]


def build_readme(result: GenerationResult, project: ProjectMetadata) -> str:
    context = result.path_context
    return render_template(
        f"{TEMPLATE_DIR}/README.md.j2",
        {
            "project": project,
            "slug": package_name(project.name),
            "context": context,
            "monorepo": needs_monorepo(context),
            "required_env": [v for v in dedupe_env_vars(result.env_vars) if v.required],
            "scripts": _script_rows(result.scripts),
            "interfaces": list(result.interfaces),
        },
    )


def build_root_files(result: GenerationResult, project: Optional[ProjectMetadata] = None) -> List[CodegenFile]:
    """Root files for ``result``; ``project`` defaults to the result's own metadata."""
    project = project or result.project or ProjectMetadata(name="dapp")
    files = [
        CodegenFile(path="package.json", content=build_root_package_json(project, result.scripts)),
        CodegenFile(path="README.md", content=build_readme(result, project)),
        CodegenFile(path=".gitignore", content=render_template(f"{TEMPLATE_DIR}/gitignore.j2", {})),
    ]
    if needs_monorepo(result.path_context):
        files.append(CodegenFile(path="pnpm-workspace.yaml", content=build_workspace_yaml()))
    logger.debug("Built %d root files for run %s", len(files), result.run_id)
    return files


__all__ = [
    "BASE_SCRIPTS",
    "WORKSPACE_GLOBS",
    "build_readme",
    "build_root_files",
    "build_root_package_json",
    "build_workspace_yaml",
    "merge_scripts",
    "needs_monorepo",
]
