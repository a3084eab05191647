"""Jinja2 rendering for bundled plugin templates."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from dappforge.data import get_data_path


@lru_cache(maxsize=1)
def _environment() -> Environment:
    # Templates use control blocks on their own lines; trim them so they
    # don't leave blank lines in generated sources.
    return Environment(
        loader=FileSystemLoader(str(get_data_path("templates"))),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        autoescape=False,
    )


def render_template(name: str, context: Dict[str, Any]) -> str:
    """Render ``data/templates/<name>`` with ``context``."""
    return _environment().get_template(name).render(**context)


def render_template_text(text: str, context: Dict[str, Any]) -> str:
    """Render an inline template string with the same environment settings."""
    return _environment().from_string(text).render(**context)


__all__ = ["render_template", "render_template_text"]
