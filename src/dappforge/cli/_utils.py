"""Shared CLI helpers."""
from __future__ import annotations

import argparse
from pathlib import Path

from dappforge.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """``--repo-root`` when given, otherwise the auto-detected project root."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


__all__ = ["get_repo_root"]
