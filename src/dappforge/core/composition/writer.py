"""Materialize a GenerationResult as a file tree."""
from __future__ import annotations

import base64
import logging
from pathlib import Path, PurePosixPath
from typing import List

from dappforge.core.codegen.output import render_env_example
from dappforge.core.exceptions import OutputPathError
from dappforge.core.utils.io import write_bytes_atomic, write_text_atomic

from .engine import GenerationResult
from .root_files import build_root_files

logger = logging.getLogger(__name__)

ENV_EXAMPLE_PATH = ".env.example"


class GenerationWriter:
    """Writes generated files below ``base_dir``.

    Paths must be relative and stay inside ``base_dir``.
    """

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def target_for(self, rel_path: str) -> Path:
        pure = PurePosixPath(rel_path.replace("\\", "/"))
        if not rel_path or pure.is_absolute() or ".." in pure.parts:
            raise OutputPathError(
                f"Refusing to write outside the output directory: {rel_path!r}",
                context={"path": rel_path, "base_dir": str(self.base_dir)},
            )
        return self.base_dir.joinpath(*pure.parts)

    def write(
        self,
        result: GenerationResult,
        *,
        include_env_example: bool = True,
        include_docs: bool = True,
        include_root_files: bool = True,
    ) -> List[Path]:
        """Write every file of ``result`` and return the written paths.

        Doc snippets never replace a generated file, and root files replace
        neither; both are skipped when their path is taken.
        """
        # Validate all paths before touching the filesystem.
        targets = {path: self.target_for(path) for path in result.files}
        docs = []
        if include_docs:
            docs = [(doc, self.target_for(doc.path)) for doc in result.docs if doc.path not in result.files]
        owned = set(result.files) | {doc.path for doc, _ in docs}
        root_files = []
        if include_root_files:
            for file in build_root_files(result):
                if file.path in owned:
                    logger.debug("Root file %s already written by a node; keeping it", file.path)
                    continue
                root_files.append((file, self.target_for(file.path)))

        written: List[Path] = []
        for path, file in result.files.items():
            target = targets[path]
            if file.encoding == "base64":
                write_bytes_atomic(target, base64.b64decode(file.content))
            else:
                write_text_atomic(target, file.content)
            written.append(target)

        for doc, target in docs:
            write_text_atomic(target, f"# {doc.title}\n\n{doc.content}")
            written.append(target)

        for file, target in root_files:
            write_text_atomic(target, file.content)
            written.append(target)

        if include_env_example:
            target = self.target_for(ENV_EXAMPLE_PATH)
            write_text_atomic(target, render_env_example(result.env_vars))
            written.append(target)

        logger.info("Wrote %d files to %s", len(written), self.base_dir)
        return written


__all__ = ["ENV_EXAMPLE_PATH", "GenerationWriter"]
