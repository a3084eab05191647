"""Base classes for same-path file merge strategies.

When two plugins emit a file at the same final path, the composition driver
asks a MergeStrategy to combine them. ``existing`` is always the content that
reached the path first; ``incoming`` is the newcomer.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class MergeableFileType(str, Enum):
    BARREL_EXPORTS = "barrel-exports"
    TYPES = "types"
    CONSTANTS = "constants"
    NONE = "none"


@dataclass
class MergeResult:
    """Outcome of a merge.

    Attributes:
        success: False when the file type can't be merged
        content: Merged text (``existing`` unchanged on failure)
        warnings: Human-readable notes, e.g. skipped duplicates
    """

    success: bool
    content: str
    warnings: List[str] = field(default_factory=list)


class MergeStrategy(ABC):
    """Combines two versions of a file that share a path."""

    file_type: MergeableFileType

    @abstractmethod
    def merge(self, existing: str, incoming: str) -> MergeResult:
        ...


__all__ = ["MergeableFileType", "MergeResult", "MergeStrategy"]
