"""Plugin contract.

A plugin turns one blueprint node into CodegenOutput. Every plugin exposes:
- metadata (id, name, version, category...)
- a JSON Schema for its node config (``config_schema``)
- typed ports and optional dependencies on other plugins
- ``validate(config)`` and ``generate(node, context)``

``BasePlugin`` supplies schema-driven validation and output-building helpers;
concrete plugins usually only declare metadata and implement ``generate``.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Dict, List, Literal, Mapping, Optional, Union

from dappforge.core.codegen.types import CategoryLike, CodegenFile, CodegenOutput, DocSnippet, EnvVarDefinition, ScriptDefinition
from dappforge.core.schemas.validation import ValidationIssue, collect_issues, load_schema

if TYPE_CHECKING:
    from dappforge.core.blueprint.models import BlueprintConfig, BlueprintNode
    from dappforge.core.composition.paths import PathContext

PluginCategory = Literal[
    "contracts",
    "payments",
    "agents",
    "app",
    "quality",
    "telegram",
    "intelligence",
    "superposition",
    "analytics",
    "robinhood",
    "protocols",
]

PortDirection = Literal["input", "output"]


@dataclass(frozen=True)
class PluginMetadata:
    id: str
    name: str
    version: str
    description: str
    category: PluginCategory
    author: Optional[str] = None
    icon: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "category": self.category,
            "author": self.author,
            "icon": self.icon,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class PluginPort:
    id: str
    name: str
    type: PortDirection
    data_type: str
    required: bool = False


@dataclass(frozen=True)
class PluginDependency:
    """Another plugin this one can consume output from."""

    plugin_id: str
    required: bool
    data_mapping: Optional[Dict[str, str]] = None


@dataclass
class PluginValidationResult:
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass
class ExecutionContext:
    """Run-level information handed to ``generate``.

    ``node_outputs`` holds the CodegenOutput of every node generated earlier in
    the same run, keyed by node id.
    """

    blueprint_id: str
    run_id: str
    config: "BlueprintConfig"
    path_context: "PathContext"
    node_outputs: Dict[str, CodegenOutput] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("dappforge.plugins"))


GenerateResult = Union[CodegenOutput, Awaitable[CodegenOutput]]


class NodePlugin(ABC):
    """Interface every plugin implements."""

    metadata: PluginMetadata
    config_schema: Optional[Mapping[str, Any]] = None
    ports: List[PluginPort] = []
    dependencies: List[PluginDependency] = []

    # Pre-built component package copied into the output (relative to the
    # component source root), and its npm package name.
    component_path: Optional[str] = None
    component_package: Optional[str] = None
    # Glob -> category for files of the component package.
    component_path_mappings: Dict[str, CategoryLike] = {}
    # Directory of API route handlers copied into the frontend API tree.
    api_routes_path: Optional[str] = None

    @property
    def id(self) -> str:
        return self.metadata.id

    @abstractmethod
    def validate(
        self,
        config: Mapping[str, Any],
        context: Optional[ExecutionContext] = None,
    ) -> PluginValidationResult:
        ...

    @abstractmethod
    def generate(self, node: "BlueprintNode", context: ExecutionContext) -> GenerateResult:
        """Produce output for ``node``; may return an awaitable."""
        ...

    def get_default_config(self) -> Dict[str, Any]:
        return {}

    def transform_inputs(self, inputs: Dict[str, Any]) -> Dict[str, Any]:
        """Adapt outputs of upstream nodes before they reach this plugin."""
        return inputs


class BasePlugin(NodePlugin):
    """NodePlugin with JSON Schema validation and output helpers."""

    def validate(
        self,
        config: Mapping[str, Any],
        context: Optional[ExecutionContext] = None,
    ) -> PluginValidationResult:
        if self.config_schema is None:
            return PluginValidationResult(valid=True)
        errors = collect_issues(dict(config), self.config_schema)
        return PluginValidationResult(valid=not errors, errors=errors)

    def resolved_config(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """Node config layered over ``get_default_config()``."""
        return {**self.get_default_config(), **dict(config or {})}

    def create_empty_output(self) -> CodegenOutput:
        return CodegenOutput.empty()

    def add_file(
        self,
        output: CodegenOutput,
        path: str,
        content: str,
        category: Optional[CategoryLike] = None,
    ) -> CodegenFile:
        return output.add_file(path, content, category)

    def add_env_var(
        self,
        output: CodegenOutput,
        key: str,
        description: str,
        *,
        required: bool = True,
        default_value: Optional[str] = None,
        secret: bool = False,
    ) -> EnvVarDefinition:
        return output.add_env_var(
            key,
            description,
            required=required,
            default_value=default_value,
            secret=secret,
        )

    def add_script(
        self,
        output: CodegenOutput,
        name: str,
        command: str,
        description: Optional[str] = None,
    ) -> ScriptDefinition:
        return output.add_script(name, command, description)

    def add_doc(self, output: CodegenOutput, path: str, title: str, content: str) -> DocSnippet:
        return output.add_doc(path, title, content)


def load_config_schema(plugin_id: str) -> Dict[str, Any]:
    """Load ``schemas/plugins/<plugin_id>.schema.yaml``."""
    return load_schema(f"plugins/{plugin_id}.schema.yaml")


__all__ = [
    "BasePlugin",
    "ExecutionContext",
    "GenerateResult",
    "NodePlugin",
    "PluginCategory",
    "PluginDependency",
    "PluginMetadata",
    "PluginPort",
    "PluginValidationResult",
    "ValidationIssue",
    "load_config_schema",
]
