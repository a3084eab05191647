"""Composition configuration domain.

Exposes the project layout (base paths), the node types that mark a domain
as present, and composition run policy.
"""
from __future__ import annotations

from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Optional

from dappforge.core.composition.paths import PathSettings

from ..base import BaseDomainConfig


class CompositionConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "composition"

    @cached_property
    def _paths(self) -> Dict[str, Any]:
        return self.section.get("paths") or {}

    @cached_property
    def _scaffolds(self) -> Dict[str, Any]:
        return self.section.get("scaffolds") or {}

    @cached_property
    def frontend_path(self) -> str:
        return str(self._paths.get("frontend", "apps/web"))

    @cached_property
    def frontend_src_path(self) -> str:
        return str(self._paths.get("frontendSrc", "src") or "")

    @cached_property
    def backend_path(self) -> str:
        return str(self._paths.get("backend", "apps/api"))

    @cached_property
    def backend_src_path(self) -> str:
        return str(self._paths.get("backendSrc", "src") or "")

    @cached_property
    def contracts_path(self) -> str:
        return str(self._paths.get("contracts", "contracts"))

    @cached_property
    def frontend_scaffold_types(self) -> List[str]:
        return [str(t) for t in self._scaffolds.get("frontend") or []]

    @cached_property
    def backend_scaffold_types(self) -> List[str]:
        return [str(t) for t in self._scaffolds.get("backend") or []]

    @cached_property
    def contract_types(self) -> List[str]:
        return [str(t) for t in self._scaffolds.get("contracts") or []]

    @cached_property
    def component_source_root(self) -> Optional[Path]:
        """Directory holding pre-built component packages, resolved against the project root."""
        raw = self.section.get("componentSourceRoot")
        if not raw:
            return None
        path = Path(str(raw)).expanduser()
        return path if path.is_absolute() else self.repo_root / path

    @cached_property
    def merge_failure_fatal(self) -> bool:
        return bool(self.section.get("mergeFailureFatal", False))

    @cached_property
    def validate_before_generate(self) -> bool:
        return bool(self.section.get("validateBeforeGenerate", True))

    def path_settings(self) -> PathSettings:
        return PathSettings(
            frontend_path=self.frontend_path,
            frontend_src_path=self.frontend_src_path,
            backend_path=self.backend_path,
            backend_src_path=self.backend_src_path,
            contracts_path=self.contracts_path,
            frontend_scaffold_types=frozenset(self.frontend_scaffold_types),
            backend_scaffold_types=frozenset(self.backend_scaffold_types),
            contract_types=frozenset(self.contract_types),
        )


__all__ = ["CompositionConfig"]
