"""Merge strategy for barrel files (``index.ts`` re-export hubs)."""
from __future__ import annotations

import re
from typing import Dict, List, Optional

from .base import MergeableFileType, MergeResult, MergeStrategy

_SPECIFIER_RE = re.compile(r"""from\s+['"]([^'"]+)['"]""")
_COMMENT_PREFIXES = ("/**", "*", "*/", "//")


def statement_key(statement: str) -> str:
    """Dedup key: the quoted module specifier, else the statement itself."""
    match = _SPECIFIER_RE.search(statement)
    return match.group(1) if match else statement


def extract_statements(content: str, keyword: str) -> List[str]:
    """Collect top-level ``import``/``export`` statements.

    A statement that opens a brace without closing it continues until a line
    that both closes the brace and carries its ``from`` clause.
    """
    prefix = f"{keyword} "
    statements: List[str] = []
    pending: Optional[List[str]] = None

    for line in content.split("\n"):
        if pending is not None:
            pending.append(line)
            if "}" in line and "from" in line:
                statements.append("\n".join(pending).strip())
                pending = None
            continue
        if not line.strip().startswith(prefix):
            continue
        if "{" in line and "}" not in line:
            pending = [line]
        else:
            statements.append(line.strip())

    if pending is not None:
        # Unterminated statement at EOF; keep it rather than drop it.
        statements.append("\n".join(pending).strip())
    return statements


def extract_top_comment(content: str) -> str:
    """Return the leading comment block (blank lines inside it kept)."""
    lines: List[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith(_COMMENT_PREFIXES):
            lines.append(line)
        elif not stripped:
            if lines:
                lines.append(line)
        else:
            break
    return "\n".join(lines).strip()


def _line_count(block: str) -> int:
    return len(block.split("\n")) if block else 0


class BarrelExportsStrategy(MergeStrategy):
    """Union of imports and re-exports keyed by module specifier.

    Output layout: the longer leading comment block (ties keep the existing
    one), then imports, then exports, each group in first-seen order.
    """

    file_type = MergeableFileType.BARREL_EXPORTS

    def merge(self, existing: str, incoming: str) -> MergeResult:
        warnings: List[str] = []

        imports = self._union(
            extract_statements(existing, "import"),
            extract_statements(incoming, "import"),
            warnings,
            "import",
        )
        exports = self._union(
            extract_statements(existing, "export"),
            extract_statements(incoming, "export"),
            warnings,
            "export",
        )

        existing_comment = extract_top_comment(existing)
        incoming_comment = extract_top_comment(incoming)
        if _line_count(existing_comment) >= _line_count(incoming_comment):
            comment = existing_comment
        else:
            comment = incoming_comment

        parts: List[str] = []
        if comment:
            parts.extend([comment, ""])
        if imports:
            parts.extend(["\n".join(imports), ""])
        parts.extend(["\n".join(exports), ""])
        return MergeResult(success=True, content="\n".join(parts), warnings=warnings)

    @staticmethod
    def _union(first: List[str], second: List[str], warnings: List[str], kind: str) -> List[str]:
        by_key: Dict[str, str] = {}
        for statement in first:
            by_key.setdefault(statement_key(statement), statement)
        for statement in second:
            key = statement_key(statement)
            if key in by_key:
                warnings.append(f"Duplicate {kind} skipped: {key}")
            else:
                by_key[key] = statement
        return list(by_key.values())


__all__ = [
    "BarrelExportsStrategy",
    "extract_statements",
    "extract_top_comment",
    "statement_key",
]
