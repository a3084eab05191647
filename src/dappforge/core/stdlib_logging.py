from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(*, level: str = "INFO", log_path: Optional[Path] = None) -> None:
    """Install the dappforge handler on the root logger.

    Logs go to ``log_path`` when given, otherwise to stderr. Calling again
    replaces the previously installed handler.
    """
    global _INSTALLED_HANDLER

    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _INSTALLED_HANDLER is not None:
        root.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(resolved, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    _INSTALLED_HANDLER = handler


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by this module."""
    global _INSTALLED_HANDLER, _JSON_MODE_NULL_HANDLER
    root = logging.getLogger()
    if _INSTALLED_HANDLER is not None:
        root.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    _INSTALLED_HANDLER = None
    if _JSON_MODE_NULL_HANDLER is not None:
        root.removeHandler(_JSON_MODE_NULL_HANDLER)
    _JSON_MODE_NULL_HANDLER = None


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib's lastResort handler from writing warnings next to JSON output.

    With no handlers configured, logging emits WARNING+ records to stderr via
    ``logging.lastResort``. A NullHandler on the root logger prevents that.
    """
    global _JSON_MODE_NULL_HANDLER

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER is not None:
        return
    _JSON_MODE_NULL_HANDLER = logging.NullHandler()
    root.addHandler(_JSON_MODE_NULL_HANDLER)


__all__ = ["configure_logging", "reset_logging_for_tests", "suppress_lastresort_in_json_mode"]
