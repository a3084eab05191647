"""Tests for shared utilities: merging, file IO, project paths and templates."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from dappforge.core.utils.io import iter_yaml_files, read_structured, read_yaml, write_bytes_atomic, write_text_atomic
from dappforge.core.utils.merge import deep_merge, merge_arrays
from dappforge.core.utils.paths import ProjectRootError, resolve_project_root
from dappforge.core.utils.templates import render_template_text


class TestDeepMerge:
    def test_nested_mappings_merge(self) -> None:
        base = {"a": {"b": 1, "c": 2}, "d": 1}

        merged = deep_merge(base, {"a": {"c": 3}})

        assert merged == {"a": {"b": 1, "c": 3}, "d": 1}
        assert base == {"a": {"b": 1, "c": 2}, "d": 1}

    def test_scalar_replaces_mapping(self) -> None:
        assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}

    @pytest.mark.parametrize(
        "base,override,expected",
        [
            (["a"], ["b"], ["b"]),
            (["a"], ["+", "b"], ["a", "b"]),
            (["a"], ["=", "b"], ["b"]),
            (["a"], [], []),
        ],
    )
    def test_merge_arrays(self, base, override, expected) -> None:
        assert merge_arrays(base, override) == expected


class TestIO:
    def test_read_yaml_defaults(self, tmp_path: Path) -> None:
        assert read_yaml(tmp_path / "missing.yaml", default={}) == {}
        (tmp_path / "empty.yaml").write_text("", encoding="utf-8")
        assert read_yaml(tmp_path / "empty.yaml", default={"x": 1}) == {"x": 1}

    def test_read_yaml_invalid_raises_when_asked(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("a: [unclosed\n", encoding="utf-8")

        assert read_yaml(bad, default="fallback") == "fallback"
        with pytest.raises(yaml.YAMLError):
            read_yaml(bad, raise_on_error=True)

    def test_read_structured_rejects_unknown_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            read_structured(tmp_path / "doc.ini")

    def test_yaml_preferred_over_yml(self, tmp_path: Path) -> None:
        for name in ("b.yml", "b.yaml", "a.yml"):
            (tmp_path / name).write_text("{}", encoding="utf-8")

        assert [p.name for p in iter_yaml_files(tmp_path)] == ["a.yml", "b.yaml"]

    def test_atomic_writes_create_parents(self, tmp_path: Path) -> None:
        text_target = tmp_path / "deep" / "dir" / "file.txt"
        bin_target = tmp_path / "bin" / "blob.bin"

        write_text_atomic(text_target, "héllo\n")
        write_bytes_atomic(bin_target, b"\x00\xff")

        assert text_target.read_text(encoding="utf-8") == "héllo\n"
        assert bin_target.read_bytes() == b"\x00\xff"
        assert sorted(p.name for p in text_target.parent.iterdir()) == ["file.txt"]


class TestProjectRoot:
    def test_env_variable_wins(self, tmp_path: Path) -> None:
        assert resolve_project_root() == tmp_path.resolve()

    def test_missing_env_directory(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("DAPPFORGE_PROJECT_ROOT", str(tmp_path / "gone"))

        with pytest.raises(ProjectRootError):
            resolve_project_root()

    def test_marker_directory_found_from_subdir(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.delenv("DAPPFORGE_PROJECT_ROOT")
        (tmp_path / ".dappforge").mkdir()
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert resolve_project_root(nested) == tmp_path.resolve()


def test_inline_template_keeps_trailing_newline() -> None:
    text = render_template_text("{% if on %}\nvalue: {{ v }}\n{% endif %}\n", {"on": True, "v": 1})

    assert text == "value: 1\n"
