import sys
from pathlib import Path

import pytest
import yaml

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'dappforge' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from dappforge.core.config import clear_all_caches
from dappforge.core.stdlib_logging import reset_logging_for_tests


@pytest.fixture(autouse=True)
def isolated_project_env(tmp_path, monkeypatch):
    """Run every test inside an empty project rooted at ``tmp_path``.

    Clears ``DAPPFORGE_*`` overrides from the developer environment and resets
    config caches and CLI logging handlers around the test.
    """
    import os

    for key in list(os.environ):
        if key.startswith("DAPPFORGE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DAPPFORGE_PROJECT_ROOT", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    clear_all_caches()
    yield tmp_path
    clear_all_caches()
    reset_logging_for_tests()


@pytest.fixture
def project_root(isolated_project_env):
    return isolated_project_env


@pytest.fixture
def write_project_config(project_root):
    """Write ``<project>/.dappforge/config/<name>.yaml``."""

    def _write(name: str, data: dict) -> Path:
        path = project_root / ".dappforge" / "config" / f"{name}.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write
