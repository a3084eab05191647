"""YAML/JSON file helpers."""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

import yaml


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns ``default`` if the file is missing or invalid, unless
    ``raise_on_error`` is True.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return data if data is not None else default


def read_structured(path: Path) -> Any:
    """Read a ``.json``, ``.yaml`` or ``.yml`` document.

    Raises:
        ValueError: For unsupported extensions.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        return json.loads(path.read_text(encoding="utf-8"))
    if suffix in {".yaml", ".yml"}:
        return read_yaml(path, default=None, raise_on_error=True)
    raise ValueError(f"Unsupported document type: {path.name} (expected .json, .yaml or .yml)")


def iter_yaml_files(dir_path: Path) -> List[Path]:
    """Return YAML files in ``dir_path`` in deterministic order.

    When both ``<name>.yaml`` and ``<name>.yml`` exist only the ``.yaml``
    file is returned.
    """
    d = Path(dir_path)
    if not d.exists():
        return []
    by_stem: Dict[str, Path] = {p.stem: p for p in d.glob("*.yml")}
    by_stem.update({p.stem: p for p in d.glob("*.yaml")})
    return [by_stem[stem] for stem in sorted(by_stem)]


def ensure_parent_dir(path: Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` via a temp file in the same directory + rename."""
    path = Path(path)
    ensure_parent_dir(path)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    write_bytes_atomic(path, text.encode(encoding))


__all__ = [
    "ensure_parent_dir",
    "iter_yaml_files",
    "read_structured",
    "read_yaml",
    "write_bytes_atomic",
    "write_text_atomic",
]
