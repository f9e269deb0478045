from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from javac_pipeline.core.errors import ArtifactError
from javac_pipeline.core.fs import relpath_posix


@dataclass(frozen=True, slots=True)
class Artifact:
    """
    One file flowing through a stage.

    `base` is the root the file was found under and `relative` is the POSIX
    path from `base` to `path`. Archivers receive artifacts grouped by `base`.
    """

    path: Path
    base: Path
    relative: str

    @classmethod
    def from_path(
        cls, path: os.PathLike[str] | str, base: os.PathLike[str] | str | None = None
    ) -> Artifact:
        p = Path(os.path.abspath(path))
        b = Path(os.path.abspath(base)) if base is not None else p.parent
        try:
            rel = relpath_posix(p, b)
        except ValueError as e:
            raise ArtifactError(f"{p} is not under base {b}") from e
        if rel in ("", "."):
            raise ArtifactError(f"Artifact path equals its base: {p}")
        return cls(path=p, base=b, relative=rel)

    def __str__(self) -> str:
        return str(self.path)
