"""Output path resolution for generated files.

Plugins tag files with a PathCategory instead of hard-coding where they land.
``build_path_context`` inspects the blueprint once per run to learn which
project domains exist (frontend, backend, contracts); ``resolve_output_path``
then maps ``(path, category, scope)`` to the final location:

- frontend categories go under the frontend app, or ``src/`` for a bare library
- backend categories go under the backend app, or fold into the frontend
  (API routes and lib) when only a frontend exists
- contract categories go under the contracts directory
- shared categories go to fixed top-level directories

A plugin scope (the node id) keeps output of different plugins apart: frontend
and backend code is scoped vertically (``plugins/<scope>/<subdir>``), the rest
horizontally (``<base>/<scope>``).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Literal, Mapping, Optional

from dappforge.core.codegen.types import CategoryLike, CodegenFile, PathCategory

Domain = Literal["frontend", "backend", "contract", "shared"]


@dataclass(frozen=True)
class CategorySpec:
    domain: Domain
    subdir: str
    scopable: bool


CATEGORY_CONFIG: Mapping[PathCategory, CategorySpec] = {
    PathCategory.FRONTEND_APP: CategorySpec("frontend", "app", False),
    PathCategory.FRONTEND_COMPONENTS: CategorySpec("frontend", "components", True),
    PathCategory.FRONTEND_HOOKS: CategorySpec("frontend", "hooks", True),
    PathCategory.FRONTEND_LIB: CategorySpec("frontend", "lib", True),
    PathCategory.FRONTEND_TYPES: CategorySpec("frontend", "types", True),
    PathCategory.FRONTEND_STYLES: CategorySpec("frontend", "styles", False),
    PathCategory.FRONTEND_PUBLIC: CategorySpec("frontend", "public", False),
    PathCategory.BACKEND_ROUTES: CategorySpec("backend", "routes", False),
    PathCategory.BACKEND_SERVICES: CategorySpec("backend", "services", True),
    PathCategory.BACKEND_MIDDLEWARE: CategorySpec("backend", "middleware", True),
    PathCategory.BACKEND_LIB: CategorySpec("backend", "lib", True),
    PathCategory.BACKEND_TYPES: CategorySpec("backend", "types", True),
    PathCategory.CONTRACT: CategorySpec("contract", "", False),
    PathCategory.CONTRACT_TEST: CategorySpec("contract", "tests", False),
    PathCategory.CONTRACT_SOURCE: CategorySpec("contract", "", False),
    PathCategory.CONTRACT_SCRIPTS: CategorySpec("shared", "scripts", False),
    PathCategory.DOCS: CategorySpec("shared", "docs", True),
    PathCategory.ROOT: CategorySpec("shared", "", False),
    PathCategory.SHARED_TYPES: CategorySpec("shared", "shared/types", False),
}

FRONTEND_SCAFFOLD_TYPES: FrozenSet[str] = frozenset({"frontend-scaffold"})
BACKEND_SCAFFOLD_TYPES: FrozenSet[str] = frozenset()
CONTRACT_TYPES: FrozenSet[str] = frozenset(
    {
        "stylus-contract",
        "stylus-zk-contract",
        "erc20-stylus",
        "erc721-stylus",
        "erc1155-stylus",
        "eip7702-smart-eoa",
        "erc8004-agent-runtime",
    }
)


@dataclass(frozen=True)
class PathSettings:
    """Base directories and domain-marker node types (from configuration)."""

    frontend_path: str = "apps/web"
    frontend_src_path: str = "src"
    backend_path: str = "apps/api"
    backend_src_path: str = "src"
    contracts_path: str = "contracts"
    frontend_scaffold_types: FrozenSet[str] = FRONTEND_SCAFFOLD_TYPES
    backend_scaffold_types: FrozenSet[str] = BACKEND_SCAFFOLD_TYPES
    contract_types: FrozenSet[str] = CONTRACT_TYPES


@dataclass(frozen=True)
class PathContext:
    """Project-level facts derived from a blueprint's nodes."""

    has_frontend: bool
    has_backend: bool
    has_contracts: bool
    node_types: FrozenSet[str] = field(default_factory=frozenset)
    frontend_path: str = "apps/web"
    frontend_src_path: str = "src"
    backend_path: str = "apps/api"
    backend_src_path: str = "src"
    contracts_path: str = "contracts"

    @property
    def frontend_root(self) -> str:
        """Frontend path including its source directory when one is used."""
        if self.frontend_src_path:
            return f"{self.frontend_path}/{self.frontend_src_path}"
        return self.frontend_path

    @property
    def backend_root(self) -> str:
        if self.backend_src_path:
            return f"{self.backend_path}/{self.backend_src_path}"
        return self.backend_path

    def to_dict(self) -> Dict[str, object]:
        return {
            "hasFrontend": self.has_frontend,
            "hasBackend": self.has_backend,
            "hasContracts": self.has_contracts,
            "nodeTypes": sorted(self.node_types),
            "frontendPath": self.frontend_path,
            "frontendSrcPath": self.frontend_src_path,
            "backendPath": self.backend_path,
            "backendSrcPath": self.backend_src_path,
            "contractsPath": self.contracts_path,
        }


def build_path_context(nodes: Iterable, *, settings: Optional[PathSettings] = None) -> PathContext:
    """Derive the PathContext for a run from its blueprint nodes.

    Any object with ``type`` and ``config`` attributes is accepted as a node.
    Never fails: without scaffold nodes the base paths are still populated.
    """
    settings = settings or PathSettings()
    nodes = list(nodes)
    node_types = frozenset(n.type for n in nodes)

    frontend_node = next((n for n in nodes if n.type in settings.frontend_scaffold_types), None)
    frontend_config = (frontend_node.config or {}) if frontend_node is not None else {}
    use_src_directory = frontend_config.get("srcDirectory") is not False

    return PathContext(
        has_frontend=bool(node_types & settings.frontend_scaffold_types),
        has_backend=bool(node_types & settings.backend_scaffold_types),
        has_contracts=bool(node_types & settings.contract_types),
        node_types=node_types,
        frontend_path=settings.frontend_path,
        frontend_src_path=settings.frontend_src_path if use_src_directory else "",
        backend_path=settings.backend_path,
        backend_src_path=settings.backend_src_path,
        contracts_path=settings.contracts_path,
    )


def is_known_category(category: Optional[CategoryLike]) -> bool:
    return PathCategory.parse(category) is not None


def sanitize_scope(scope: str) -> str:
    """Make a scope usable as one path segment ("@org/pkg" -> "org-pkg")."""
    return scope.replace("@", "").replace("/", "-")


def _base_path(category: PathCategory, entry: CategorySpec, context: PathContext) -> str:
    if entry.domain == "frontend":
        if not context.has_frontend:
            return f"src/{entry.subdir}"
        if category is PathCategory.FRONTEND_PUBLIC:
            return f"{context.frontend_path}/public"
        return f"{context.frontend_root}/{entry.subdir}"

    if entry.domain == "backend":
        if context.has_backend:
            return f"{context.backend_root}/{entry.subdir}"
        if context.has_frontend:
            if category is PathCategory.BACKEND_ROUTES:
                return f"{context.frontend_root}/app/api"
            return f"{context.frontend_root}/lib"
        return "src/lib"

    if entry.domain == "contract":
        return context.contracts_path

    return entry.subdir


def _scoped(base: str, category: PathCategory, entry: CategorySpec, context: PathContext, scope: str) -> str:
    safe = sanitize_scope(scope)
    if entry.domain == "frontend":
        # Library layout and static assets are scoped by suffix.
        if category is PathCategory.FRONTEND_PUBLIC or not context.has_frontend:
            return f"{base}/{safe}"
        return f"{context.frontend_root}/plugins/{safe}/{entry.subdir}"
    if entry.domain == "backend" and context.has_backend:
        return f"{context.backend_root}/plugins/{safe}/{entry.subdir}"
    return f"{base}/{safe}" if base else safe


def resolve_output_path(
    original_path: str,
    category: Optional[CategoryLike],
    context: PathContext,
    *,
    scope: Optional[str] = None,
) -> str:
    """Return the final output path of a file.

    Files without a category, or with a category this resolver doesn't know,
    keep ``original_path`` unchanged.

    Example:
        >>> ctx = PathContext(has_frontend=True, has_backend=False, has_contracts=False)
        >>> resolve_output_path("useWallet.ts", "frontend-hooks", ctx)
        'apps/web/src/hooks/useWallet.ts'
        >>> resolve_output_path("useWallet.ts", "frontend-hooks", ctx, scope="wallet-1")
        'apps/web/src/plugins/wallet-1/hooks/useWallet.ts'
    """
    if not category:
        return original_path
    parsed = PathCategory.parse(category)
    if parsed is None:
        return original_path
    entry = CATEGORY_CONFIG[parsed]

    base = _base_path(parsed, entry, context)
    if scope and entry.scopable:
        base = _scoped(base, parsed, entry, context, scope)

    normalized = original_path.replace("\\", "/").lstrip("/")
    return f"{base}/{normalized}" if base else normalized


def rewrite_output_paths(
    files: Iterable[CodegenFile],
    context: PathContext,
    *,
    scope: Optional[str] = None,
) -> List[CodegenFile]:
    """Return copies of ``files`` with their paths resolved; inputs are untouched."""
    return [
        replace(f, path=resolve_output_path(f.path, f.category, context, scope=scope))
        for f in files
    ]


def categorized_path(filename: str, category: CategoryLike) -> CodegenFile:
    """Shorthand for an empty CodegenFile tagged with ``category``."""
    return CodegenFile(path=filename, content="", category=category)


__all__ = [
    "CATEGORY_CONFIG",
    "CategorySpec",
    "CONTRACT_TYPES",
    "FRONTEND_SCAFFOLD_TYPES",
    "BACKEND_SCAFFOLD_TYPES",
    "PathContext",
    "PathSettings",
    "build_path_context",
    "categorized_path",
    "is_known_category",
    "resolve_output_path",
    "rewrite_output_paths",
    "sanitize_scope",
]
