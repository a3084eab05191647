"""Configurable plugin doubles and blueprint builders."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from dappforge.core.blueprint.models import Blueprint, BlueprintConfig, BlueprintNode, ProjectMetadata
from dappforge.core.codegen.types import CodegenOutput
from dappforge.core.plugins.base import BasePlugin, PluginMetadata

FileSpec = Tuple[str, str, Optional[str]]


def make_metadata(plugin_id: str, category: str = "app") -> PluginMetadata:
    return PluginMetadata(
        id=plugin_id,
        name=plugin_id.replace("-", " ").title(),
        version="0.0.1",
        description=f"Test plugin {plugin_id}",
        category=category,  # type: ignore[arg-type]
    )


class StaticPlugin(BasePlugin):
    """Emits a fixed list of ``(path, content, category)`` files."""

    def __init__(
        self,
        plugin_id: str,
        files: Sequence[FileSpec] = (),
        *,
        env: Sequence[str] = (),
        scripts: Sequence[Tuple[str, str]] = (),
        schema: Optional[Dict[str, Any]] = None,
        category: str = "app",
    ) -> None:
        self.metadata = make_metadata(plugin_id, category)
        self.files = list(files)
        self.env = list(env)
        self.scripts = list(scripts)
        self.config_schema = schema
        self.calls: List[str] = []

    def generate(self, node, context):
        self.calls.append(node.id)
        output = self.create_empty_output()
        for path, content, category in self.files:
            self.add_file(output, path, content, category)
        for key in self.env:
            self.add_env_var(output, key, f"{key} for {node.id}")
        for name, command in self.scripts:
            self.add_script(output, name, command)
        return output


class FailingPlugin(BasePlugin):
    def __init__(self, plugin_id: str, message: str = "template missing") -> None:
        self.metadata = make_metadata(plugin_id)
        self.message = message

    def generate(self, node, context):
        raise RuntimeError(self.message)


class AsyncPlugin(StaticPlugin):
    """StaticPlugin whose ``generate`` is a coroutine."""

    async def generate(self, node, context):  # type: ignore[override]
        return StaticPlugin.generate(self, node, context)


def make_blueprint(*nodes: Tuple[str, str], configs: Optional[Dict[str, Dict[str, Any]]] = None) -> Blueprint:
    """Blueprint with ``(node_id, node_type)`` nodes in the given order."""
    configs = configs or {}
    return Blueprint(
        id="bp-test",
        nodes=[BlueprintNode(id=node_id, type=node_type, config=configs.get(node_id, {})) for node_id, node_type in nodes],
        config=BlueprintConfig(project=ProjectMetadata(name="Test DApp", description="A test project")),
    )


def empty_output() -> CodegenOutput:
    return CodegenOutput.empty()
