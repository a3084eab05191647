"""JSON Schema loading and validation (schemas are stored as YAML)."""
from __future__ import annotations

from .validation import (
    SchemaValidationError,
    ValidationIssue,
    collect_issues,
    load_schema,
    validate_payload,
)

__all__ = [
    "SchemaValidationError",
    "ValidationIssue",
    "collect_issues",
    "load_schema",
    "validate_payload",
]
