"""Codegen output model.

Plugins describe what they produce with these types:
- CodegenFile: one file, optionally tagged with a PathCategory
- EnvVarDefinition / ScriptDefinition / InterfaceDefinition / DocSnippet:
  project-level additions collected alongside files
- CodegenOutput: everything a single plugin invocation returns
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Union


class PathCategory(str, Enum):
    """Semantic role of a generated file, used to pick its final location."""

    FRONTEND_APP = "frontend-app"
    FRONTEND_COMPONENTS = "frontend-components"
    FRONTEND_HOOKS = "frontend-hooks"
    FRONTEND_LIB = "frontend-lib"
    FRONTEND_TYPES = "frontend-types"
    FRONTEND_STYLES = "frontend-styles"
    FRONTEND_PUBLIC = "frontend-public"

    BACKEND_ROUTES = "backend-routes"
    BACKEND_SERVICES = "backend-services"
    BACKEND_MIDDLEWARE = "backend-middleware"
    BACKEND_LIB = "backend-lib"
    BACKEND_TYPES = "backend-types"

    CONTRACT = "contract"
    CONTRACT_TEST = "contract-test"
    CONTRACT_SOURCE = "contract-source"
    CONTRACT_SCRIPTS = "contract-scripts"

    DOCS = "docs"
    ROOT = "root"
    SHARED_TYPES = "shared-types"

    @classmethod
    def parse(cls, value: Union["PathCategory", str, None]) -> Optional["PathCategory"]:
        """Return the matching member, or None for None/unknown tags."""
        if value is None or isinstance(value, PathCategory):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# A category as plugins may supply it; unknown strings are tolerated.
CategoryLike = Union[PathCategory, str]

FileEncoding = Literal["utf-8", "base64"]
InterfaceType = Literal["abi", "typescript", "openapi"]


@dataclass
class CodegenFile:
    """A generated file.

    Attributes:
        path: Path as emitted by the plugin (final path once resolved)
        content: File body (text, or base64 when ``encoding`` says so)
        category: Semantic role; None means ``path`` is already final
        encoding: ``utf-8`` or ``base64``
    """

    path: str
    content: str
    category: Optional[CategoryLike] = None
    encoding: FileEncoding = "utf-8"


@dataclass
class EnvVarDefinition:
    key: str
    description: str
    required: bool = True
    default_value: Optional[str] = None
    secret: bool = False


@dataclass
class ScriptDefinition:
    name: str
    command: str
    description: Optional[str] = None


@dataclass
class InterfaceDefinition:
    """A machine-readable interface (ABI, TypeScript declarations, OpenAPI)."""

    name: str
    type: InterfaceType
    content: str


@dataclass
class DocSnippet:
    path: str
    title: str
    content: str


@dataclass
class CodegenOutput:
    """Everything one plugin invocation produces."""

    files: List[CodegenFile] = field(default_factory=list)
    env_vars: List[EnvVarDefinition] = field(default_factory=list)
    scripts: List[ScriptDefinition] = field(default_factory=list)
    interfaces: List[InterfaceDefinition] = field(default_factory=list)
    docs: List[DocSnippet] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "CodegenOutput":
        return cls()

    def add_file(
        self,
        path: str,
        content: str,
        category: Optional[CategoryLike] = None,
        *,
        encoding: FileEncoding = "utf-8",
    ) -> CodegenFile:
        f = CodegenFile(path=path, content=content, category=category, encoding=encoding)
        self.files.append(f)
        return f

    def add_env_var(
        self,
        key: str,
        description: str,
        *,
        required: bool = True,
        default_value: Optional[str] = None,
        secret: bool = False,
    ) -> EnvVarDefinition:
        var = EnvVarDefinition(
            key=key,
            description=description,
            required=required,
            default_value=default_value,
            secret=secret,
        )
        self.env_vars.append(var)
        return var

    def add_script(self, name: str, command: str, description: Optional[str] = None) -> ScriptDefinition:
        script = ScriptDefinition(name=name, command=command, description=description)
        self.scripts.append(script)
        return script

    def add_interface(self, name: str, type: InterfaceType, content: str) -> InterfaceDefinition:
        iface = InterfaceDefinition(name=name, type=type, content=content)
        self.interfaces.append(iface)
        return iface

    def add_doc(self, path: str, title: str, content: str) -> DocSnippet:
        doc = DocSnippet(path=path, title=title, content=content)
        self.docs.append(doc)
        return doc


__all__ = [
    "PathCategory",
    "CategoryLike",
    "CodegenFile",
    "EnvVarDefinition",
    "ScriptDefinition",
    "InterfaceDefinition",
    "DocSnippet",
    "CodegenOutput",
]
