"""Same-path file merge strategies.

``merge_file_contents`` picks a strategy from the file's basename:
- ``index.ts`` / ``index.tsx``: barrel exports
- ``types.ts`` / ``*.types.ts``: type declarations
- ``constants.ts`` / ``*.constants.ts``: constant declarations
Anything else is not mergeable.
"""
from __future__ import annotations

from typing import Dict

from .barrel import BarrelExportsStrategy
from .base import MergeableFileType, MergeResult, MergeStrategy
from .declarations import ConstantDeclarationsStrategy, TypeDeclarationsStrategy

_STRATEGIES: Dict[MergeableFileType, MergeStrategy] = {
    MergeableFileType.BARREL_EXPORTS: BarrelExportsStrategy(),
    MergeableFileType.TYPES: TypeDeclarationsStrategy(),
    MergeableFileType.CONSTANTS: ConstantDeclarationsStrategy(),
}


def get_mergeable_type(filename: str) -> MergeableFileType:
    basename = filename.split("/")[-1] or filename
    if basename in ("index.ts", "index.tsx"):
        return MergeableFileType.BARREL_EXPORTS
    if basename == "types.ts" or basename.endswith(".types.ts"):
        return MergeableFileType.TYPES
    if basename == "constants.ts" or basename.endswith(".constants.ts"):
        return MergeableFileType.CONSTANTS
    return MergeableFileType.NONE


def should_merge_file(filename: str) -> bool:
    return get_mergeable_type(filename) is not MergeableFileType.NONE


def get_strategy(filename: str) -> MergeStrategy | None:
    return _STRATEGIES.get(get_mergeable_type(filename))


def merge_file_contents(existing: str, incoming: str, filename: str) -> MergeResult:
    """Combine two versions of ``filename``; ``existing`` is the first writer's.

    Unsupported file types return ``success=False`` with ``existing`` unchanged.
    """
    strategy = get_strategy(filename)
    if strategy is None:
        return MergeResult(
            success=False,
            content=existing,
            warnings=[f"Cannot merge {filename}: unsupported file type"],
        )
    return strategy.merge(existing, incoming)


__all__ = [
    "BarrelExportsStrategy",
    "ConstantDeclarationsStrategy",
    "MergeResult",
    "MergeStrategy",
    "MergeableFileType",
    "TypeDeclarationsStrategy",
    "get_mergeable_type",
    "get_strategy",
    "merge_file_contents",
    "should_merge_file",
]
