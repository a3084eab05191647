"""Bulk files from pre-built component packages.

Some plugins ship a ready-made package (``component_path``) and/or a
directory of API route handlers (``api_routes_path``) instead of rendering
every file. These helpers read those directories and turn their files into
ordinary CodegenFiles, so the driver routes and merges them exactly like
generated output.

With ``component_path_mappings`` and a frontend present, files are routed by
category:
- ``contract-source`` matches lose a leading ``contract/`` and go to contracts
- other matches under ``src/`` lose ``src/<subdir>/`` and keep their category
- unmatched ``src/`` files land in the frontend lib under the package namespace
- top-level Markdown files become docs
Without mappings the package is copied verbatim to ``packages/<namespace>/``.
"""
from __future__ import annotations

import base64
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Pattern

from dappforge.core.codegen.types import CategoryLike, CodegenFile, PathCategory

from .paths import CATEGORY_CONFIG, PathContext

logger = logging.getLogger(__name__)

SKIPPED_DIRS = frozenset({"node_modules", "dist", "target"})


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> Pattern[str]:
    parts = []
    for chunk in re.split(r"(\*\*|\*)", pattern):
        if chunk == "**":
            parts.append(".*")
        elif chunk == "*":
            parts.append("[^/]*")
        else:
            parts.append(re.escape(chunk))
    return re.compile("^" + "".join(parts) + "$")


def match_pattern(path: str, pattern: str) -> bool:
    """Glob match where ``**`` spans directories and ``*`` does not."""
    return bool(_compile_glob(pattern).match(path.replace("\\", "/")))


def find_path_category(path: str, mappings: Mapping[str, CategoryLike]) -> Optional[PathCategory]:
    """Category of the first mapping (in insertion order) matching ``path``."""
    for pattern, category in mappings.items():
        if match_pattern(path, pattern):
            return PathCategory.parse(category)
    return None


def iter_package_files(root: Path) -> Iterator[str]:
    """Relative POSIX paths of files under ``root``, sorted, build output skipped."""
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in SKIPPED_DIRS and not d.startswith(".")]
        for name in filenames:
            if name.startswith("."):
                continue
            found.append(Path(dirpath, name).relative_to(root).as_posix())
    yield from sorted(found)


def _read_file(path: Path, rel: str, category: Optional[CategoryLike] = None) -> CodegenFile:
    raw = path.read_bytes()
    try:
        return CodegenFile(path=rel, content=raw.decode("utf-8"), category=category)
    except UnicodeDecodeError:
        return CodegenFile(
            path=rel,
            content=base64.b64encode(raw).decode("ascii"),
            category=category,
            encoding="base64",
        )


def component_namespace(plugin) -> str:
    """Directory-safe name of a component package ("@scope/pkg" -> "pkg")."""
    name = plugin.component_package or plugin.component_path or plugin.metadata.id
    return name.rstrip("/").split("/")[-1]


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if prefix and path.startswith(prefix) else path


def collect_component_files(plugin, source_root: Path, context: PathContext) -> List[CodegenFile]:
    """Files of ``plugin``'s component package, ready for path resolution."""
    if not plugin.component_path:
        return []
    root = Path(source_root) / plugin.component_path
    if not root.is_dir():
        logger.warning("Component path not found for %s: %s", plugin.metadata.id, root)
        return []

    namespace = component_namespace(plugin)
    mappings = plugin.component_path_mappings or {}
    files: List[CodegenFile] = []

    if not (mappings and context.has_frontend):
        for rel in iter_package_files(root):
            files.append(_read_file(root / rel, f"packages/{namespace}/{rel}"))
        logger.info("Copied component %s as packages/%s (%d files)", plugin.metadata.id, namespace, len(files))
        return files

    for rel in iter_package_files(root):
        category = find_path_category(rel, mappings)
        source = root / rel
        if category is PathCategory.CONTRACT_SOURCE:
            files.append(_read_file(source, _strip_prefix(rel, "contract/"), category))
        elif rel.startswith("src/"):
            inner = rel[len("src/"):]
            if category is not None:
                subdir = CATEGORY_CONFIG[category].subdir
                files.append(_read_file(source, _strip_prefix(inner, f"{subdir}/" if subdir else ""), category))
            else:
                files.append(_read_file(source, f"{namespace}/{inner}", PathCategory.FRONTEND_LIB))
        elif "/" not in rel and rel.lower().endswith(".md"):
            files.append(_read_file(source, rel, PathCategory.DOCS))
        else:
            logger.debug("Skipping unmapped component file %s/%s", namespace, rel)
    logger.info("Routed component %s through path mappings (%d files)", plugin.metadata.id, len(files))
    return files


def collect_api_route_files(plugin, source_root: Path) -> List[CodegenFile]:
    """Route handlers under ``api_routes_path`` as ``backend-routes`` files."""
    if not plugin.api_routes_path:
        return []
    root = Path(source_root) / plugin.api_routes_path
    if not root.is_dir():
        logger.warning("API routes path not found for %s: %s", plugin.metadata.id, root)
        return []
    prefix = root.name
    return [
        _read_file(root / rel, f"{prefix}/{rel}", PathCategory.BACKEND_ROUTES)
        for rel in iter_package_files(root)
    ]


__all__ = [
    "SKIPPED_DIRS",
    "collect_api_route_files",
    "collect_component_files",
    "component_namespace",
    "find_path_category",
    "iter_package_files",
    "match_pattern",
]
