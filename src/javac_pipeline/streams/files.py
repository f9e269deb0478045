from __future__ import annotations

import glob
import os
import re
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Sequence

from javac_pipeline.core.fs import copy_or_hardlink

from .artifact import Artifact

_MAGIC = re.compile(r"[*?\[]")


def glob_base(pattern: str) -> Path:
    """
    Static directory prefix of a glob pattern.

    `test/**/*.java` -> `test`; a pattern without wildcards names a file and
    its parent directory is the base.
    """
    parts = Path(pattern).parts
    static: list[str] = []
    for part in parts:
        if _MAGIC.search(part):
            break
        static.append(part)
    else:
        static = static[:-1]
    if not static:
        return Path(".")
    return Path(*static)


def _split(patterns: str | Sequence[str]) -> tuple[list[str], list[str]]:
    if isinstance(patterns, str):
        patterns = [patterns]
    includes = [p for p in patterns if not p.startswith("!")]
    excludes = [p[1:] for p in patterns if p.startswith("!")]
    return includes, excludes


def _expand(pattern: str, cwd: Path) -> list[Path]:
    full = pattern if os.path.isabs(pattern) else str(cwd / pattern)
    return [Path(os.path.abspath(p)) for p in sorted(glob.glob(full, recursive=True))]


async def src(
    patterns: str | Sequence[str],
    *,
    base: os.PathLike[str] | str | None = None,
    cwd: os.PathLike[str] | str | None = None,
) -> AsyncIterator[Artifact]:
    """
    Yield an Artifact for every file matching `patterns`.

    Patterns starting with `!` exclude matches. Each file is yielded once,
    in pattern order then sorted path order. Without an explicit `base`
    each pattern's static prefix directory is used.
    """
    root = Path(cwd) if cwd is not None else Path.cwd()
    includes, excludes = _split(patterns)

    excluded: set[Path] = set()
    for pattern in excludes:
        excluded.update(_expand(pattern, root))

    seen: set[Path] = set()
    for pattern in includes:
        pattern_base = Path(base) if base is not None else root / glob_base(pattern)
        for path in _expand(pattern, root):
            if path in seen or path in excluded or not path.is_file():
                continue
            seen.add(path)
            yield Artifact.from_path(path, pattern_base)


async def dest(
    stream: AsyncIterable[Artifact], out_dir: os.PathLike[str] | str
) -> list[Path]:
    """
    Copy each artifact to `out_dir/<relative>`; returns the written paths.
    """
    target_root = Path(out_dir)
    written: list[Path] = []
    async for artifact in stream:
        target = target_root / artifact.relative
        copy_or_hardlink(artifact.path, target)
        written.append(target)
    return written
