"""Tests for the plugin contract and BasePlugin helpers."""
from __future__ import annotations

import pytest

from dappforge.core.codegen.types import CodegenOutput, PathCategory
from dappforge.core.plugins.base import BasePlugin, NodePlugin, load_config_schema
from helpers.plugins import StaticPlugin, make_metadata


class DefaultsPlugin(BasePlugin):
    metadata = make_metadata("defaults-plugin")

    def get_default_config(self):
        return {"mode": "fast", "retries": 3}

    def generate(self, node, context):
        return self.create_empty_output()


def test_node_plugin_is_abstract() -> None:
    with pytest.raises(TypeError):
        NodePlugin()  # type: ignore[abstract]


def test_no_schema_means_always_valid() -> None:
    result = StaticPlugin("schemaless").validate({"anything": object()})

    assert result.valid is True
    assert result.to_dict() == {"valid": True, "errors": [], "warnings": []}


def test_schema_errors_are_reported_per_field() -> None:
    schema = {
        "type": "object",
        "properties": {"count": {"type": "integer"}, "name": {"type": "string"}},
        "required": ["name"],
    }
    result = StaticPlugin("strict", schema=schema).validate({"count": "two"})

    assert result.valid is False
    by_code = {issue.code: issue for issue in result.errors}
    assert set(by_code) == {"required", "type"}
    assert by_code["type"].field == "count"
    assert by_code["required"].field == ""


def test_resolved_config_layers_node_config_over_defaults() -> None:
    plugin = DefaultsPlugin()

    assert plugin.resolved_config({"retries": 5}) == {"mode": "fast", "retries": 5}
    assert plugin.resolved_config({}) == {"mode": "fast", "retries": 3}


def test_transform_inputs_defaults_to_identity() -> None:
    inputs = {"upstream": CodegenOutput.empty()}

    assert DefaultsPlugin().transform_inputs(inputs) is inputs


def test_output_helpers_fill_codegen_output() -> None:
    plugin = DefaultsPlugin()
    output = plugin.create_empty_output()

    plugin.add_file(output, "useA.ts", "a", PathCategory.FRONTEND_HOOKS)
    plugin.add_env_var(output, "SECRET_KEY", "Signing key", secret=True)
    plugin.add_script(output, "test", "vitest")
    plugin.add_doc(output, "docs/a.md", "A", "body")

    assert output.files[0].category is PathCategory.FRONTEND_HOOKS
    assert output.env_vars[0].secret is True
    assert output.env_vars[0].required is True
    assert output.scripts[0].name == "test"
    assert output.docs[0].path == "docs/a.md"


def test_plugin_id_comes_from_metadata() -> None:
    plugin = DefaultsPlugin()

    assert plugin.id == "defaults-plugin"
    assert plugin.metadata.to_dict()["category"] == "app"


def test_load_config_schema_reads_bundled_schema() -> None:
    schema = load_config_schema("wallet-auth")

    assert schema["type"] == "object"
    assert "provider" in schema["properties"]


def test_load_config_schema_missing() -> None:
    with pytest.raises(FileNotFoundError):
        load_config_schema("no-such-plugin")
