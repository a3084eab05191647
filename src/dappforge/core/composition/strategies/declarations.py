"""Merge strategies for declaration files (``types.ts``, ``constants.ts``).

Both strategies append the incoming file's declarations to the existing file,
skipping any exported declaration whose name the existing file already
declares. Skipping is done by a small line scanner with two states:

- NORMAL: lines are kept (imports dropped)
- SKIPPING(depth): lines belong to a duplicate declaration and are dropped
  until its block closes

Depth counts braces, brackets and parentheses alike, so multi-line object,
array and tuple bodies are skipped whole. Template literals spanning lines
are skipped until their closing backtick.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List, Pattern, Set, Tuple

from .base import MergeableFileType, MergeResult, MergeStrategy

_CONTINUATION_SUFFIXES = ("=", "|", "&", ",", "(", "[", "<", "=>")
_CLOSERS = ("}", "]", ")")


class ScanState(Enum):
    NORMAL = "normal"
    SKIPPING = "skipping"


def _nesting_delta(line: str) -> int:
    opened = line.count("{") + line.count("[") + line.count("(")
    closed = line.count("}") + line.count("]") + line.count(")")
    return opened - closed


def _toggles_template(line: str) -> bool:
    return line.count("`") % 2 == 1


class DeclarationScanner:
    """Drops duplicate declarations from incoming text.

    Args:
        opener: Matches a line starting an exported declaration; group 1 is its name
        block_opener: Matches openers whose body starts on a following line
            (e.g. ``export interface Foo`` with the brace on the next line)
    """

    def __init__(self, opener: Pattern[str], block_opener: Pattern[str] | None = None) -> None:
        self.opener = opener
        self.block_opener = block_opener

    def _continues(self, line: str, depth: int) -> bool:
        """Whether a declaration opened on ``line`` spans further lines."""
        if depth > 0:
            return True
        stripped = line.rstrip()
        if stripped.endswith(";") or stripped.endswith(_CLOSERS):
            return False
        if stripped.endswith(_CONTINUATION_SUFFIXES):
            return True
        return bool(self.block_opener and self.block_opener.match(line))

    @staticmethod
    def _closes(line: str, depth: int) -> bool:
        stripped = line.rstrip()
        return depth <= 0 and (any(c in stripped for c in _CLOSERS) or stripped.endswith(";"))

    def scan(self, incoming: str, known: Set[str], label: str) -> Tuple[List[str], List[str]]:
        """Return ``(kept_lines, warnings)`` for ``incoming``."""
        kept: List[str] = []
        warnings: List[str] = []
        state = ScanState.NORMAL
        depth = 0
        in_template = False

        for line in incoming.split("\n"):
            if state is ScanState.SKIPPING:
                if in_template:
                    if _toggles_template(line):
                        in_template = False
                        tail = line.rsplit("`", 1)[1]
                        depth += _nesting_delta(tail)
                        if self._closes(tail, depth):
                            state = ScanState.NORMAL
                    continue
                # A blank line or a new declaration at depth 0 ends an
                # unterminated statement; process the line normally.
                if depth <= 0 and (not line.strip() or self.opener.match(line)):
                    state = ScanState.NORMAL
                else:
                    if _toggles_template(line):
                        in_template = True
                        depth += _nesting_delta(line.split("`", 1)[0])
                    else:
                        depth += _nesting_delta(line)
                        if self._closes(line, depth):
                            state = ScanState.NORMAL
                    continue

            match = self.opener.match(line)
            if match and match.group(1) in known:
                warnings.append(f"Duplicate {label} skipped: {match.group(1)}")
                if _toggles_template(line):
                    in_template = True
                    depth = _nesting_delta(line.split("`", 1)[0])
                    state = ScanState.SKIPPING
                    continue
                depth = _nesting_delta(line)
                if self._continues(line, depth):
                    state = ScanState.SKIPPING
                continue

            if line.strip().startswith("import "):
                continue
            kept.append(line)

        return kept, warnings


class DeclarationsStrategy(MergeStrategy):
    """Shared algorithm of the types and constants strategies."""

    label: str
    separator: str
    name_pattern: Pattern[str]
    scanner: DeclarationScanner

    def declared_names(self, content: str) -> Set[str]:
        return set(self.name_pattern.findall(content))

    def merge(self, existing: str, incoming: str) -> MergeResult:
        kept, warnings = self.scanner.scan(incoming, self.declared_names(existing), self.label)

        while kept and not kept[0].strip():
            kept.pop(0)

        merged = existing.rstrip()
        addition = "\n".join(kept).strip()
        if addition:
            merged += f"\n\n{self.separator}\n{addition}"
        merged += "\n"
        return MergeResult(success=True, content=merged, warnings=warnings)


class TypeDeclarationsStrategy(DeclarationsStrategy):
    file_type = MergeableFileType.TYPES
    label = "type"
    separator = "// Additional types from merged plugins"
    name_pattern = re.compile(r"(?:export\s+)?(?:type|interface|enum)\s+(\w+)")
    scanner = DeclarationScanner(
        opener=re.compile(r"^export\s+(?:type|interface|enum)\s+(\w+)"),
        block_opener=re.compile(r"^export\s+(?:interface|enum)\s+\w+"),
    )


class ConstantDeclarationsStrategy(DeclarationsStrategy):
    file_type = MergeableFileType.CONSTANTS
    label = "constant"
    separator = "// Additional constants from merged plugins"
    name_pattern = re.compile(r"(?:export\s+)?const\s+(\w+)")
    scanner = DeclarationScanner(opener=re.compile(r"^export\s+const\s+(\w+)"))


__all__ = [
    "ConstantDeclarationsStrategy",
    "DeclarationScanner",
    "DeclarationsStrategy",
    "ScanState",
    "TypeDeclarationsStrategy",
]
