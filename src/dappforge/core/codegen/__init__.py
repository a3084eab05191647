"""Codegen output model shared by plugins and the composition engine."""
from __future__ import annotations

from .output import build_manifest, dedupe_env_vars, render_env_example
from .types import (
    CategoryLike,
    CodegenFile,
    CodegenOutput,
    DocSnippet,
    EnvVarDefinition,
    InterfaceDefinition,
    PathCategory,
    ScriptDefinition,
)

__all__ = [
    "CategoryLike",
    "CodegenFile",
    "CodegenOutput",
    "DocSnippet",
    "EnvVarDefinition",
    "InterfaceDefinition",
    "PathCategory",
    "ScriptDefinition",
    "build_manifest",
    "dedupe_env_vars",
    "render_env_example",
]
