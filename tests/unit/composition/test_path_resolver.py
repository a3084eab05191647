"""Tests for path context building and output path resolution."""
from __future__ import annotations

import pytest

from dappforge.core.blueprint.models import BlueprintNode
from dappforge.core.codegen.types import CodegenFile, PathCategory
from dappforge.core.composition.paths import (
    CATEGORY_CONFIG,
    PathContext,
    PathSettings,
    build_path_context,
    is_known_category,
    resolve_output_path,
    rewrite_output_paths,
    sanitize_scope,
)

FRONTEND = PathContext(has_frontend=True, has_backend=False, has_contracts=False)
BARE = PathContext(has_frontend=False, has_backend=False, has_contracts=False)
FULL = PathContext(has_frontend=True, has_backend=True, has_contracts=True)


def _node(node_id: str, node_type: str, **config) -> BlueprintNode:
    return BlueprintNode(id=node_id, type=node_type, config=config)


class TestBuildPathContext:
    def test_detects_domains_from_node_types(self) -> None:
        ctx = build_path_context([_node("fe", "frontend-scaffold"), _node("c", "erc20-stylus")])

        assert ctx.has_frontend is True
        assert ctx.has_contracts is True
        assert ctx.has_backend is False
        assert ctx.node_types == frozenset({"frontend-scaffold", "erc20-stylus"})

    def test_empty_blueprint_still_has_base_paths(self) -> None:
        ctx = build_path_context([])

        assert not (ctx.has_frontend or ctx.has_backend or ctx.has_contracts)
        assert ctx.frontend_path == "apps/web"
        assert ctx.frontend_src_path == "src"
        assert ctx.backend_path == "apps/api"
        assert ctx.contracts_path == "contracts"

    def test_src_directory_false_drops_frontend_src(self) -> None:
        ctx = build_path_context([_node("fe", "frontend-scaffold", srcDirectory=False)])

        assert ctx.frontend_src_path == ""
        assert ctx.frontend_root == "apps/web"

    def test_src_directory_missing_defaults_to_src(self) -> None:
        ctx = build_path_context([_node("fe", "frontend-scaffold")])

        assert ctx.frontend_root == "apps/web/src"

    def test_settings_override_paths_and_marker_types(self) -> None:
        settings = PathSettings(
            frontend_path="web",
            backend_path="server",
            backend_scaffold_types=frozenset({"express-api"}),
        )
        ctx = build_path_context([_node("api", "express-api")], settings=settings)

        assert ctx.has_backend is True
        assert ctx.frontend_path == "web"
        assert ctx.backend_path == "server"

    def test_to_dict_uses_camel_case(self) -> None:
        data = build_path_context([_node("fe", "frontend-scaffold")]).to_dict()

        assert data["hasFrontend"] is True
        assert data["nodeTypes"] == ["frontend-scaffold"]
        assert data["frontendSrcPath"] == "src"


class TestResolveOutputPath:
    @pytest.mark.parametrize(
        "category,expected",
        [
            ("frontend-hooks", "apps/web/src/hooks/useX.ts"),
            ("frontend-app", "apps/web/src/app/useX.ts"),
            ("frontend-public", "apps/web/public/useX.ts"),
            ("backend-routes", "apps/web/src/app/api/useX.ts"),
            ("backend-services", "apps/web/src/lib/useX.ts"),
            ("contract", "contracts/useX.ts"),
            ("contract-test", "contracts/useX.ts"),
            ("contract-scripts", "scripts/useX.ts"),
            ("docs", "docs/useX.ts"),
            ("root", "useX.ts"),
            ("shared-types", "shared/types/useX.ts"),
        ],
    )
    def test_unscoped_with_frontend_only(self, category: str, expected: str) -> None:
        assert resolve_output_path("useX.ts", category, FRONTEND) == expected

    def test_frontend_categories_fall_back_to_library_layout(self) -> None:
        assert resolve_output_path("Button.tsx", "frontend-components", BARE) == "src/components/Button.tsx"
        assert resolve_output_path("logo.svg", "frontend-public", BARE) == "src/public/logo.svg"

    def test_backend_without_any_app_goes_to_src_lib(self) -> None:
        assert resolve_output_path("db.ts", "backend-services", BARE) == "src/lib/db.ts"

    def test_backend_with_backend_app(self) -> None:
        assert resolve_output_path("users.ts", "backend-routes", FULL) == "apps/api/src/routes/users.ts"

    def test_scoped_frontend_categories_nest_under_plugins(self) -> None:
        path = resolve_output_path("useX.ts", PathCategory.FRONTEND_HOOKS, FRONTEND, scope="wallet-1")

        assert path == "apps/web/src/plugins/wallet-1/hooks/useX.ts"

    def test_scoped_frontend_without_scaffold_stays_in_library_layout(self) -> None:
        path = resolve_output_path("Button.tsx", "frontend-components", BARE, scope="widget")

        assert path == "src/components/widget/Button.tsx"

    def test_scoped_backend_with_backend_app(self) -> None:
        path = resolve_output_path("auth.ts", "backend-middleware", FULL, scope="auth")

        assert path == "apps/api/src/plugins/auth/middleware/auth.ts"

    def test_scoped_backend_folded_into_frontend_is_horizontal(self) -> None:
        path = resolve_output_path("db.ts", "backend-lib", FRONTEND, scope="db-node")

        assert path == "apps/web/src/lib/db-node/db.ts"

    def test_scoped_docs_are_horizontal(self) -> None:
        assert resolve_output_path("README.md", "docs", FRONTEND, scope="n1") == "docs/n1/README.md"

    def test_non_scopable_category_ignores_scope(self) -> None:
        assert resolve_output_path("page.tsx", "frontend-app", FRONTEND, scope="n1") == "apps/web/src/app/page.tsx"
        assert resolve_output_path("Token.rs", "contract", FULL, scope="n1") == "contracts/Token.rs"

    def test_scope_is_sanitized(self) -> None:
        path = resolve_output_path("useX.ts", "frontend-hooks", FRONTEND, scope="@org/pkg")

        assert path == "apps/web/src/plugins/org-pkg/hooks/useX.ts"

    def test_frontend_without_src_directory(self) -> None:
        ctx = PathContext(has_frontend=True, has_backend=False, has_contracts=False, frontend_src_path="")

        assert resolve_output_path("page.tsx", "frontend-app", ctx) == "apps/web/app/page.tsx"
        assert resolve_output_path("route.ts", "backend-routes", ctx) == "apps/web/app/api/route.ts"

    def test_leading_slash_and_backslashes_normalized(self) -> None:
        assert resolve_output_path("/a\\b.ts", "frontend-lib", FRONTEND) == "apps/web/src/lib/a/b.ts"


class TestPassThrough:
    @pytest.mark.parametrize("ctx", [FRONTEND, BARE, FULL])
    @pytest.mark.parametrize("scope", [None, "node-1"])
    def test_no_category_returns_path_unchanged(self, ctx: PathContext, scope) -> None:
        assert resolve_output_path("apps/web/package.json", None, ctx, scope=scope) == "apps/web/package.json"

    def test_unknown_category_returns_path_unchanged(self) -> None:
        assert resolve_output_path("weird/file.txt", "not-a-category", FULL, scope="x") == "weird/file.txt"
        assert is_known_category("not-a-category") is False
        assert is_known_category("frontend-lib") is True


class TestResolverProperties:
    @pytest.mark.parametrize("category", [c for c in PathCategory])
    @pytest.mark.parametrize("ctx", [FRONTEND, BARE, FULL])
    def test_total_and_deterministic(self, category: PathCategory, ctx: PathContext) -> None:
        first = resolve_output_path("file.ts", category, ctx, scope="n1")
        second = resolve_output_path("file.ts", category, ctx, scope="n1")

        assert first
        assert first == second

    @pytest.mark.parametrize("category", [c for c, entry in CATEGORY_CONFIG.items() if entry.scopable])
    @pytest.mark.parametrize("ctx", [FRONTEND, BARE, FULL])
    def test_distinct_scopes_give_distinct_paths(self, category: PathCategory, ctx: PathContext) -> None:
        a = resolve_output_path("file.ts", category, ctx, scope="node-a")
        b = resolve_output_path("file.ts", category, ctx, scope="node-b")

        assert a != b


def test_rewrite_output_paths_returns_copies() -> None:
    original = CodegenFile(path="useX.ts", content="x", category="frontend-hooks")

    [rewritten] = rewrite_output_paths([original], FRONTEND, scope="n1")

    assert rewritten.path == "apps/web/src/plugins/n1/hooks/useX.ts"
    assert original.path == "useX.ts"


def test_sanitize_scope() -> None:
    assert sanitize_scope("@cradle/wallet-auth") == "cradle-wallet-auth"
    assert sanitize_scope("plain") == "plain"
    assert sanitize_scope("@org/pkg@2") == "org-pkg2"
    assert sanitize_scope("a@b@c") == "abc"
