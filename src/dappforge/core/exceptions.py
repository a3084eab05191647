from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence


class DappForgeError(Exception):
    """Base exception for dappforge."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(DappForgeError, ValueError):
    """Raised when the merged configuration is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DappForgeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class BlueprintValidationError(DappForgeError, ValueError):
    """Raised when a blueprint document does not match the blueprint schema."""

    def __init__(
        self,
        message: str,
        *,
        issues: Optional[Sequence[Any]] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.issues: List[Any] = list(issues or [])
        ctx = dict(context or {})
        ctx["issues"] = [_issue_to_dict(i) for i in self.issues]
        DappForgeError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


class BlueprintCycleError(DappForgeError, ValueError):
    """Raised when dependency edges between blueprint nodes form a cycle."""

    def __init__(self, node_ids: Sequence[str]) -> None:
        self.node_ids = list(node_ids)
        message = f"Dependency cycle between nodes: {', '.join(self.node_ids)}"
        DappForgeError.__init__(self, message, context={"node_ids": self.node_ids})
        ValueError.__init__(self, message)


class OutputPathError(DappForgeError, ValueError):
    """Raised when a generated path would escape the output directory."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DappForgeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


# ---------------------------------------------------------------------------
# Plugin registry
# ---------------------------------------------------------------------------


class PluginRegistrationError(DappForgeError):
    """Base class for rejected plugin registrations."""

    def __init__(self, message: str, *, plugin_id: str) -> None:
        self.plugin_id = plugin_id
        super().__init__(message, context={"plugin_id": plugin_id})


class PluginNotAllowedError(PluginRegistrationError):
    """Raised when a plugin id is outside the registry allow-list."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(
            f'Plugin "{plugin_id}" is not in the allowed plugins list',
            plugin_id=plugin_id,
        )


class PluginAlreadyRegisteredError(PluginRegistrationError):
    """Raised when a plugin id is registered twice."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(
            f'Plugin "{plugin_id}" is already registered',
            plugin_id=plugin_id,
        )


class PluginNotFoundError(DappForgeError, LookupError):
    """Raised when a registry lookup misses."""

    def __init__(self, plugin_id: str, *, context: Mapping[str, Any] | None = None) -> None:
        self.plugin_id = plugin_id
        ctx = {"plugin_id": plugin_id, **dict(context or {})}
        message = f'Plugin "{plugin_id}" not found'
        DappForgeError.__init__(self, message, context=ctx)
        LookupError.__init__(self, message)


# ---------------------------------------------------------------------------
# Composition runs
# ---------------------------------------------------------------------------


class CompositionError(DappForgeError):
    """Base class for errors that abort a composition run."""

    def __init__(
        self,
        message: str,
        *,
        node_id: Optional[str] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.node_id = node_id
        ctx = dict(context or {})
        if node_id:
            ctx["node_id"] = node_id
        DappForgeError.__init__(self, message, context=ctx)


class RegistryMissError(CompositionError, PluginNotFoundError):
    """Raised when a blueprint node references a plugin the registry lacks."""

    def __init__(self, node_id: str, node_type: str) -> None:
        self.node_type = node_type
        self.plugin_id = node_type
        message = f'Plugin "{node_type}" not found for node "{node_id}"'
        CompositionError.__init__(
            self,
            message,
            node_id=node_id,
            context={"plugin_id": node_type, "node_type": node_type},
        )
        LookupError.__init__(self, message)


class NodeValidationError(CompositionError):
    """Raised when a node config fails its plugin's validation."""

    def __init__(self, node_id: str, issues: Sequence[Any]) -> None:
        self.issues = list(issues)
        summary = "; ".join(f"{getattr(i, 'field', '')}: {getattr(i, 'message', i)}" for i in self.issues)
        super().__init__(
            f'Invalid config for node "{node_id}": {summary}',
            node_id=node_id,
            context={"issues": [_issue_to_dict(i) for i in self.issues]},
        )


class GenerationError(CompositionError):
    """Raised when a plugin fails while generating output for a node."""

    def __init__(self, node_id: str, reason: str) -> None:
        self.reason = reason
        super().__init__(
            f'Generation failed for node "{node_id}": {reason}',
            node_id=node_id,
            context={"reason": reason},
        )


class MergeConflictError(CompositionError):
    """Raised when two nodes write the same unmergeable file and conflicts are fatal."""

    def __init__(self, node_id: str, path: str, reason: str) -> None:
        self.path = path
        super().__init__(
            f'Cannot combine "{path}" from node "{node_id}": {reason}',
            node_id=node_id,
            context={"path": path, "reason": reason},
        )


class CompositionStateError(CompositionError):
    """Raised on an illegal composition run state transition."""


def _issue_to_dict(issue: Any) -> Dict[str, Any]:
    if hasattr(issue, "to_dict"):
        return issue.to_dict()
    if isinstance(issue, Mapping):
        return dict(issue)
    return {"message": str(issue)}


__all__ = [
    "DappForgeError",
    "ConfigError",
    "BlueprintValidationError",
    "BlueprintCycleError",
    "OutputPathError",
    "PluginRegistrationError",
    "PluginNotAllowedError",
    "PluginAlreadyRegisteredError",
    "PluginNotFoundError",
    "CompositionError",
    "RegistryMissError",
    "NodeValidationError",
    "GenerationError",
    "MergeConflictError",
    "CompositionStateError",
]
