"""Composition driver.

Runs every node of a blueprint through its plugin and folds the outputs into
a single output file map. A run moves through these states:

    pending -> resolving-plugin -> generating -> merging -> (next node) -> finalized

and ends in ``failed`` on the first unrecoverable error (registry miss,
plugin failure, or a merge conflict when conflicts are fatal). A failed run
keeps no partial output.

Nodes are processed one at a time in the order the caller supplies. The first
node to write a path owns it; later writers are merged into it, so the order
is significant.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from dappforge.core.blueprint.models import Blueprint, BlueprintNode, ProjectMetadata
from dappforge.core.codegen.output import build_manifest, dedupe_env_vars
from dappforge.core.codegen.types import (
    CodegenFile,
    CodegenOutput,
    DocSnippet,
    EnvVarDefinition,
    InterfaceDefinition,
    ScriptDefinition,
)
from dappforge.core.exceptions import (
    CompositionError,
    CompositionStateError,
    GenerationError,
    MergeConflictError,
    NodeValidationError,
    RegistryMissError,
)
from dappforge.core.plugins.base import ExecutionContext, NodePlugin, PluginValidationResult
from dappforge.core.plugins.registry import PluginRegistry

from .components import collect_api_route_files, collect_component_files
from .paths import PathContext, PathSettings, build_path_context, is_known_category, resolve_output_path
from .strategies import merge_file_contents

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    PENDING = "pending"
    RESOLVING_PLUGIN = "resolving-plugin"
    GENERATING = "generating"
    MERGING = "merging"
    FINALIZED = "finalized"
    FAILED = "failed"


_TRANSITIONS: Mapping[RunState, FrozenSet[RunState]] = {
    RunState.PENDING: frozenset({RunState.RESOLVING_PLUGIN, RunState.FINALIZED, RunState.FAILED}),
    RunState.RESOLVING_PLUGIN: frozenset({RunState.GENERATING, RunState.FAILED}),
    RunState.GENERATING: frozenset({RunState.MERGING, RunState.FAILED}),
    RunState.MERGING: frozenset({RunState.RESOLVING_PLUGIN, RunState.FINALIZED, RunState.FAILED}),
    RunState.FINALIZED: frozenset(),
    RunState.FAILED: frozenset(),
}


@dataclass(frozen=True)
class MergeWarning:
    """Advisory note attached to a run (skipped duplicate, dropped collision...)."""

    node_id: str
    path: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"nodeId": self.node_id, "path": self.path, "message": self.message}


@dataclass
class CompositionRun:
    """Mutable state of one generation run."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: RunState = RunState.PENDING
    current_node_id: Optional[str] = None
    files: Dict[str, CodegenFile] = field(default_factory=dict)
    file_owners: Dict[str, str] = field(default_factory=dict)
    env_vars: List[EnvVarDefinition] = field(default_factory=list)
    scripts: List[ScriptDefinition] = field(default_factory=list)
    interfaces: List[InterfaceDefinition] = field(default_factory=list)
    docs: List[DocSnippet] = field(default_factory=list)
    warnings: List[MergeWarning] = field(default_factory=list)
    node_outputs: Dict[str, CodegenOutput] = field(default_factory=dict)
    failed_node_id: Optional[str] = None
    failure_reason: Optional[str] = None

    def transition(self, state: RunState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise CompositionStateError(
                f"Invalid run transition {self.state.value} -> {state.value}",
                node_id=self.current_node_id,
                context={"run_id": self.run_id, "from": self.state.value, "to": state.value},
            )
        self.state = state

    def fail(self, node_id: Optional[str], reason: str) -> None:
        """Move to ``failed`` and drop everything accumulated so far."""
        self.transition(RunState.FAILED)
        self.failed_node_id = node_id
        self.failure_reason = reason
        self.files.clear()
        self.file_owners.clear()
        self.env_vars.clear()
        self.scripts.clear()
        self.interfaces.clear()
        self.docs.clear()
        self.node_outputs.clear()

    @property
    def is_terminal(self) -> bool:
        return self.state in (RunState.FINALIZED, RunState.FAILED)


@dataclass(frozen=True)
class GenerationResult:
    """Finalized output of a successful run."""

    run_id: str
    path_context: PathContext
    files: Mapping[str, CodegenFile]
    env_vars: Sequence[EnvVarDefinition] = ()
    scripts: Sequence[ScriptDefinition] = ()
    interfaces: Sequence[InterfaceDefinition] = ()
    docs: Sequence[DocSnippet] = ()
    warnings: Sequence[MergeWarning] = ()
    project: Optional[ProjectMetadata] = None

    def contents(self) -> Dict[str, str]:
        return {path: f.content for path, f in self.files.items()}

    def manifest(self) -> List[Dict[str, object]]:
        return build_manifest(self.files)

    def deduped_env_vars(self) -> List[EnvVarDefinition]:
        return dedupe_env_vars(self.env_vars)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runId": self.run_id,
            "pathContext": self.path_context.to_dict(),
            "files": self.manifest(),
            "envVars": [v.key for v in self.deduped_env_vars()],
            "scripts": [{"name": s.name, "command": s.command} for s in self.scripts],
            "interfaces": [{"name": i.name, "type": i.type} for i in self.interfaces],
            "docs": [d.path for d in self.docs],
            "warnings": [w.to_dict() for w in self.warnings],
        }


async def _await(awaitable: Awaitable[CodegenOutput]) -> CodegenOutput:
    return await awaitable


class CompositionDriver:
    """Composes blueprint nodes into one output file map.

    Args:
        registry: Plugins available to the run
        settings: Base paths and domain-marker node types
        component_root: Directory holding pre-built component packages;
            when None, plugins' component packages and API routes are ignored
        merge_failure_fatal: Raise MergeConflictError instead of keeping the
            first writer when two nodes emit the same unmergeable file
        validate_nodes: Validate each node's config before generating it
    """

    def __init__(
        self,
        registry: PluginRegistry,
        *,
        settings: Optional[PathSettings] = None,
        component_root: Optional[Path] = None,
        merge_failure_fatal: bool = False,
        validate_nodes: bool = False,
    ) -> None:
        self.registry = registry
        self.settings = settings or PathSettings()
        self.component_root = Path(component_root) if component_root else None
        self.merge_failure_fatal = merge_failure_fatal
        self.validate_nodes = validate_nodes

    @classmethod
    def from_config(cls, registry: PluginRegistry, *, repo_root: Optional[Path] = None) -> "CompositionDriver":
        from dappforge.core.config import CompositionConfig

        cfg = CompositionConfig(repo_root=repo_root)
        return cls(
            registry,
            settings=cfg.path_settings(),
            component_root=cfg.component_source_root,
            merge_failure_fatal=cfg.merge_failure_fatal,
            validate_nodes=cfg.validate_before_generate,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self, blueprint: Blueprint) -> Dict[str, PluginValidationResult]:
        """Validate every node's config against its plugin.

        Read-only; raises RegistryMissError for a node whose plugin is missing.
        """
        results: Dict[str, PluginValidationResult] = {}
        for node in blueprint.nodes:
            plugin = self._lookup(node)
            results[node.id] = plugin.validate(node.config or {})
        return results

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def compose(
        self,
        blueprint: Blueprint,
        *,
        nodes: Optional[Iterable[BlueprintNode]] = None,
        run: Optional[CompositionRun] = None,
        run_id: Optional[str] = None,
    ) -> GenerationResult:
        """Compose synchronously; coroutine-returning plugins are run to completion.

        Use ``compose_async`` from inside a running event loop.
        """
        run, context, ordered = self._start(blueprint, nodes, run, run_id)
        try:
            for node in ordered:
                plugin = self._begin_node(run, node)
                exec_ctx = self._execution_context(run, blueprint, context, plugin, node)
                output = self._generate_sync(plugin, node, exec_ctx)
                self._fold_node(run, node, plugin, output, context)
        except CompositionError as exc:
            self._abort(run, exc)
            raise
        except Exception as exc:
            error = self._generation_error(run.current_node_id or "", exc)
            self._abort(run, error)
            raise error from exc
        return self._finish(run, context, blueprint)

    async def compose_async(
        self,
        blueprint: Blueprint,
        *,
        nodes: Optional[Iterable[BlueprintNode]] = None,
        run: Optional[CompositionRun] = None,
        run_id: Optional[str] = None,
    ) -> GenerationResult:
        """Same as ``compose`` but awaits plugin coroutines on the current loop."""
        run, context, ordered = self._start(blueprint, nodes, run, run_id)
        try:
            for node in ordered:
                plugin = self._begin_node(run, node)
                exec_ctx = self._execution_context(run, blueprint, context, plugin, node)
                try:
                    result = plugin.generate(node, exec_ctx)
                    if inspect.isawaitable(result):
                        result = await result
                except Exception as exc:
                    raise self._generation_error(node.id, exc) from exc
                self._fold_node(run, node, plugin, self._check_output(node, result), context)
        except CompositionError as exc:
            self._abort(run, exc)
            raise
        except Exception as exc:
            error = self._generation_error(run.current_node_id or "", exc)
            self._abort(run, error)
            raise error from exc
        return self._finish(run, context, blueprint)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _start(
        self,
        blueprint: Blueprint,
        nodes: Optional[Iterable[BlueprintNode]],
        run: Optional[CompositionRun],
        run_id: Optional[str],
    ):
        ordered = list(nodes) if nodes is not None else list(blueprint.nodes)
        if run is None:
            run = CompositionRun(run_id=run_id) if run_id else CompositionRun()
        context = build_path_context(blueprint.nodes, settings=self.settings)
        logger.info("Composition run %s started for blueprint %s (%d nodes)", run.run_id, blueprint.id, len(ordered))
        logger.debug("Path context: %s", context.to_dict())
        return run, context, ordered

    def _lookup(self, node: BlueprintNode) -> NodePlugin:
        plugin = self.registry.get(node.type)
        if plugin is None:
            raise RegistryMissError(node.id, node.type)
        return plugin

    def _begin_node(self, run: CompositionRun, node: BlueprintNode) -> NodePlugin:
        run.current_node_id = node.id
        run.transition(RunState.RESOLVING_PLUGIN)
        logger.info("Processing node %s (%s)", node.id, node.type)
        plugin = self._lookup(node)
        if self.validate_nodes:
            try:
                validation = plugin.validate(node.config or {})
            except Exception as exc:
                raise self._generation_error(node.id, exc) from exc
            if not validation.valid:
                raise NodeValidationError(node.id, validation.errors)
        run.transition(RunState.GENERATING)
        return plugin

    def _execution_context(
        self,
        run: CompositionRun,
        blueprint: Blueprint,
        context: PathContext,
        plugin: NodePlugin,
        node: BlueprintNode,
    ) -> ExecutionContext:
        try:
            node_outputs = plugin.transform_inputs(dict(run.node_outputs))
        except Exception as exc:
            raise self._generation_error(node.id, exc) from exc
        return ExecutionContext(
            blueprint_id=blueprint.id,
            run_id=run.run_id,
            config=blueprint.config,
            path_context=context,
            node_outputs=node_outputs,
        )

    @staticmethod
    def _generation_error(node_id: str, exc: BaseException) -> GenerationError:
        return GenerationError(node_id, str(exc) or exc.__class__.__name__)

    @staticmethod
    def _check_output(node: BlueprintNode, result: Any) -> CodegenOutput:
        if not isinstance(result, CodegenOutput):
            raise GenerationError(node.id, f"plugin returned {type(result).__name__}, expected CodegenOutput")
        return result

    def _generate_sync(self, plugin: NodePlugin, node: BlueprintNode, exec_ctx: ExecutionContext) -> CodegenOutput:
        try:
            result = plugin.generate(node, exec_ctx)
        except Exception as exc:
            raise self._generation_error(node.id, exc) from exc

        if inspect.isawaitable(result):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                pass
            else:
                if inspect.iscoroutine(result):
                    result.close()
                raise GenerationError(node.id, "asynchronous plugin inside a running event loop; use compose_async")
            try:
                result = asyncio.run(_await(result))
            except Exception as exc:
                raise self._generation_error(node.id, exc) from exc
        return self._check_output(node, result)

    def _bulk_files(self, node: BlueprintNode, plugin: NodePlugin, context: PathContext) -> List[CodegenFile]:
        if self.component_root is None:
            return []
        try:
            return [
                *collect_component_files(plugin, self.component_root, context),
                *collect_api_route_files(plugin, self.component_root),
            ]
        except OSError as exc:
            raise self._generation_error(node.id, exc) from exc

    def _fold_node(
        self,
        run: CompositionRun,
        node: BlueprintNode,
        plugin: NodePlugin,
        output: CodegenOutput,
        context: PathContext,
    ) -> None:
        run.transition(RunState.MERGING)
        files = [*output.files, *self._bulk_files(node, plugin, context)]
        for file in files:
            self._fold_file(run, node.id, file, context)

        run.env_vars.extend(output.env_vars)
        run.scripts.extend(output.scripts)
        run.interfaces.extend(output.interfaces)
        run.docs.extend(output.docs)
        run.node_outputs[node.id] = output
        logger.info("Node %s produced %d files", node.id, len(files))

    def _fold_file(self, run: CompositionRun, node_id: str, file: CodegenFile, context: PathContext) -> None:
        if file.category and not is_known_category(file.category):
            self._warn(run, node_id, file.path, f'Unknown category "{file.category}"; path kept as-is')

        path = resolve_output_path(file.path, file.category, context, scope=node_id)
        resolved = CodegenFile(path=path, content=file.content, category=file.category, encoding=file.encoding)

        existing = run.files.get(path)
        if existing is None:
            run.files[path] = resolved
            run.file_owners[path] = node_id
            return

        if existing.encoding != "utf-8" or resolved.encoding != "utf-8":
            self._conflict(run, node_id, path, f"Cannot merge {path}: binary content")
            return

        result = merge_file_contents(existing.content, resolved.content, path)
        if not result.success:
            self._conflict(run, node_id, path, "; ".join(result.warnings))
            return

        logger.debug("Merged %s from node %s into output of %s", path, node_id, run.file_owners[path])
        existing.content = result.content
        for message in result.warnings:
            self._warn(run, node_id, path, message)

    def _conflict(self, run: CompositionRun, node_id: str, path: str, reason: str) -> None:
        if self.merge_failure_fatal:
            raise MergeConflictError(node_id, path, reason)
        self._warn(run, node_id, path, f"{reason}; kept output of node {run.file_owners[path]}")

    @staticmethod
    def _warn(run: CompositionRun, node_id: str, path: str, message: str) -> None:
        logger.warning("%s (node %s, %s)", message, node_id, path)
        run.warnings.append(MergeWarning(node_id=node_id, path=path, message=message))

    def _abort(self, run: CompositionRun, exc: CompositionError) -> None:
        node_id = exc.node_id or run.current_node_id
        if not run.is_terminal:
            run.fail(node_id, str(exc))
        logger.error("Composition run %s failed at node %s: %s", run.run_id, node_id, exc)

    def _finish(self, run: CompositionRun, context: PathContext, blueprint: Blueprint) -> GenerationResult:
        run.current_node_id = None
        run.transition(RunState.FINALIZED)
        logger.info(
            "Composition run %s finalized: %d files, %d warnings",
            run.run_id,
            len(run.files),
            len(run.warnings),
        )
        return GenerationResult(
            run_id=run.run_id,
            path_context=context,
            files=dict(run.files),
            env_vars=list(run.env_vars),
            scripts=list(run.scripts),
            interfaces=list(run.interfaces),
            docs=list(run.docs),
            warnings=list(run.warnings),
            project=blueprint.config.project,
        )


__all__ = [
    "CompositionDriver",
    "CompositionRun",
    "GenerationResult",
    "MergeWarning",
    "RunState",
]
