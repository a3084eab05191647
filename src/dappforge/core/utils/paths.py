"""Project root and project config directory resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROJECT_ROOT_ENV = "DAPPFORGE_PROJECT_ROOT"
PROJECT_CONFIG_DIRNAME = ".dappforge"


class ProjectRootError(RuntimeError):
    """Raised when the project root cannot be determined."""


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution priority:
    1. ``DAPPFORGE_PROJECT_ROOT`` environment variable
    2. The nearest ancestor of ``start`` (default: CWD) holding ``.dappforge/``
    3. ``start`` itself
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        root = Path(env_root).expanduser().resolve()
        if not root.is_dir():
            raise ProjectRootError(f"{PROJECT_ROOT_ENV} points at missing directory: {root}")
        return root

    here = (start or Path.cwd()).expanduser().resolve()
    for candidate in (here, *here.parents):
        if (candidate / PROJECT_CONFIG_DIRNAME).is_dir():
            return candidate
    return here


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.dappforge`` (not created)."""
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME


__all__ = [
    "PROJECT_ROOT_ENV",
    "PROJECT_CONFIG_DIRNAME",
    "ProjectRootError",
    "resolve_project_root",
    "get_project_config_dir",
]
