"""Centralized configuration caching.

All domain configs read the merged configuration through this module so a
process loads each project's YAML layers once.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dappforge.core.utils.io import iter_yaml_files
from dappforge.core.utils.paths import get_project_config_dir, resolve_project_root

_config_cache: Dict[str, Dict[str, Any]] = {}


def _cache_key(repo_root: Path, validate: bool) -> str:
    # Environment overrides and project YAML edits must invalidate the cache.
    env_items = sorted((k, v) for k, v in os.environ.items() if k.startswith("DAPPFORGE_"))
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files = []
    for p in iter_yaml_files(get_project_config_dir(repo_root) / "config"):
        st = p.stat()
        files.append((p.name, st.st_mtime_ns, st.st_size))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{repo_root}:{'v' if validate else 'nv'}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same dict instance for the same project state; treat it as
    read-only.
    """
    root = Path(repo_root).expanduser().resolve() if repo_root else resolve_project_root()
    key = _cache_key(root, validate)
    if key not in _config_cache:
        from .manager import ConfigManager

        _config_cache[key] = ConfigManager(repo_root=root)._load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Drop every cached configuration."""
    _config_cache.clear()


def is_cached(repo_root: Path, validate: bool = True) -> bool:
    root = Path(repo_root).expanduser().resolve()
    return _cache_key(root, validate) in _config_cache


__all__ = ["get_cached_config", "clear_all_caches", "is_cached"]
