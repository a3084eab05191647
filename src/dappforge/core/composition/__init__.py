"""Composition: path resolution, same-path merging and the generation driver."""
from __future__ import annotations

from .engine import CompositionDriver, CompositionRun, GenerationResult, MergeWarning, RunState
from .paths import (
    PathContext,
    PathSettings,
    build_path_context,
    resolve_output_path,
    rewrite_output_paths,
)
from .root_files import build_root_files
from .strategies import merge_file_contents
from .writer import GenerationWriter

__all__ = [
    "CompositionDriver",
    "CompositionRun",
    "GenerationResult",
    "GenerationWriter",
    "MergeWarning",
    "PathContext",
    "PathSettings",
    "RunState",
    "build_path_context",
    "build_root_files",
    "merge_file_contents",
    "resolve_output_path",
    "rewrite_output_paths",
]
