"""
dappforge configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from dappforge.core.exceptions import ConfigError
from dappforge.core.schemas.validation import SchemaValidationError, validate_payload
from dappforge.core.utils.io import iter_yaml_files, read_yaml
from dappforge.core.utils.merge import deep_merge
from dappforge.core.utils.paths import get_project_config_dir, resolve_project_root
from dappforge.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "DAPPFORGE_"

# Environment keys that configure the loader itself rather than the config tree.
_RESERVED_ENV_KEYS = {"DAPPFORGE_PROJECT_ROOT"}

PathSegment = Union[str, int]


class ConfigManager:
    """Load, merge, and validate dappforge configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: DAPPFORGE_*
    2. Project config: <repo>/.dappforge/config/*.yaml (alphabetical order)
    3. Bundled defaults: dappforge.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else resolve_project_root()
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        data = read_yaml(path, default={}, raise_on_error=True)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {path}",
                context={"path": str(path)},
            )
        return data

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        for path in iter_yaml_files(directory):
            cfg = deep_merge(cfg, self.load_yaml(path))
        return cfg

    # ----- environment overrides -------------------------------------------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip()):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip().lower() in {"null", "none"}:
            return None
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__") if "__" in raw else raw.split("_")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'",
                context={"key": raw},
            )
        return segs

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV_KEYS:
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                continue
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur: Dict[str, Any] = root
        for i, part in enumerate(path):
            # Match existing keys case-insensitively so FRONTENDSRC finds frontendSrc.
            existing = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key = existing.get(part.lower(), part.lower())
            if i == len(path) - 1:
                cur[key] = value
                return
            nxt = cur.get(key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[key] = nxt
            cur = nxt

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, value)

    # ----- loading ---------------------------------------------------------

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from every layer (UNCACHED)."""
        cfg: Dict[str, Any] = {}
        cfg = self._load_directory(self.core_config_dir, cfg)
        cfg = self._load_directory(self.project_config_dir, cfg)
        self.apply_env_overrides(cfg)

        if validate:
            try:
                validate_payload(cfg, "config/config.schema.yaml")
            except SchemaValidationError as exc:
                raise ConfigError(
                    str(exc),
                    context={"issues": [i.to_dict() for i in exc.issues]},
                ) from exc
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration (cached per project root and env)."""
        from .cache import get_cached_config

        return get_cached_config(repo_root=self.repo_root, validate=validate)


__all__ = ["ConfigManager", "ENV_PREFIX"]
