"""Shared schema validation utilities.

dappforge validates blueprints, node configs and its own configuration using
JSON Schema. Schemas are stored as YAML files under ``dappforge.data/schemas``
and loaded in a single, consistent way across the codebase.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional

from jsonschema import Draft202012Validator

from dappforge.core.utils.io import read_yaml
from dappforge.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""

    def __init__(self, message: str, issues: Optional[List["ValidationIssue"]] = None) -> None:
        super().__init__(message)
        self.issues = list(issues or [])


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema violation.

    Attributes:
        field: Dotted path to the offending value ("" for the document root)
        message: Human-readable description
        code: Failing JSON Schema keyword (``required``, ``enum``, ...)
    """

    field: str
    message: str
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message, "code": self.code}


@lru_cache(maxsize=32)
def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema by relative name.

    Automatically appends ``.yaml`` if no extension is present.

    Raises:
        FileNotFoundError: If the schema file doesn't exist.
        ValueError: If the schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    path = get_data_path("schemas", schema_name)
    if not path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name} (searched {path.parent})")

    schema = read_yaml(path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def collect_issues(payload: Any, schema: Mapping[str, Any]) -> List[ValidationIssue]:
    """Validate ``payload`` against ``schema`` and return every violation.

    Issues are ordered by their location so output is stable.
    """
    validator = Draft202012Validator(dict(schema))
    issues: List[ValidationIssue] = []
    for error in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path]):
        field = ".".join(str(p) for p in error.absolute_path)
        issues.append(ValidationIssue(field=field, message=error.message, code=str(error.validator)))
    return issues


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate a payload against a bundled schema.

    Raises:
        SchemaValidationError: If validation fails.
    """
    issues = collect_issues(payload, load_schema(schema_name))
    if issues:
        details = "; ".join(f"{i.field or '<root>'}: {i.message}" for i in issues)
        raise SchemaValidationError(f"Validation failed against schema '{schema_name}': {details}", issues)


__all__ = [
    "SchemaValidationError",
    "ValidationIssue",
    "collect_issues",
    "load_schema",
    "validate_payload",
]
