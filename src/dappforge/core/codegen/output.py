"""Post-processing of collected codegen output.

Helpers the orchestrator applies after a composition run: collapsing repeated
environment variables, rendering ``.env.example`` and listing the generated
files.
"""
from __future__ import annotations

import base64
import re
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping

from .types import CodegenFile, EnvVarDefinition

ENV_EXAMPLE_HEADER = "# Environment Variables\n# Copy this file to .env and fill in the values\n\n"


def dedupe_env_vars(env_vars: Iterable[EnvVarDefinition]) -> List[EnvVarDefinition]:
    """Collapse variables sharing a key, preserving first-seen order.

    ``required`` and ``secret`` are OR-ed across duplicates; the first non-empty
    description and default value win.
    """
    by_key: Dict[str, EnvVarDefinition] = {}
    for var in env_vars:
        existing = by_key.get(var.key)
        if existing is None:
            by_key[var.key] = replace(var)
            continue
        existing.required = existing.required or var.required
        existing.secret = existing.secret or var.secret
        if not existing.description and var.description:
            existing.description = var.description
        if not existing.default_value and var.default_value:
            existing.default_value = var.default_value
    return list(by_key.values())


def render_env_example(env_vars: Iterable[EnvVarDefinition]) -> str:
    blocks = []
    for var in dedupe_env_vars(env_vars):
        flags = (" (required)" if var.required else "") + (" [secret]" if var.secret else "")
        blocks.append(f"# {var.description}{flags}\n{var.key}={var.default_value or ''}")
    body = "\n\n".join(blocks)
    return ENV_EXAMPLE_HEADER + (body + "\n" if body else "# No environment variables required\n")


def package_name(app_name: str) -> str:
    """npm package name for an app title ("My DApp" -> "my-dapp")."""
    slug = re.sub(r"[^a-z0-9._-]+", "-", app_name.strip().lower()).strip("-")
    return slug or "dapp"


def file_size(file: CodegenFile) -> int:
    """Size in bytes of the file once written."""
    if file.encoding == "base64":
        return len(base64.b64decode(file.content))
    return len(file.content.encode("utf-8"))


def build_manifest(files: Mapping[str, CodegenFile]) -> List[Dict[str, object]]:
    """Return ``[{"path", "size"}]`` for every file, sorted by path."""
    return [{"path": path, "size": file_size(files[path])} for path in sorted(files)]


__all__ = [
    "ENV_EXAMPLE_HEADER",
    "dedupe_env_vars",
    "render_env_example",
    "package_name",
    "file_size",
    "build_manifest",
]
