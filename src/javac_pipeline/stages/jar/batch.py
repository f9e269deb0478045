from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from javac_pipeline.streams import Artifact

from .options import JarOptions


def group_by_base(artifacts: Iterable[Artifact]) -> tuple[tuple[Path, tuple[str, ...]], ...]:
    """
    Group relative paths by base, dropping duplicates. Bases and paths are
    sorted so the result does not depend on arrival order.
    """
    groups: dict[Path, set[str]] = {}
    for artifact in artifacts:
        groups.setdefault(artifact.base, set()).add(artifact.relative)
    return tuple((base, tuple(sorted(groups[base]))) for base in sorted(groups))


@dataclass(frozen=True, slots=True)
class JarBatch:
    jar_path: Path
    groups: tuple[tuple[Path, tuple[str, ...]], ...]
    options: JarOptions

    @property
    def entries(self) -> int:
        return sum(len(rels) for _, rels in self.groups)

    def arguments(self) -> list[str]:
        opts = self.options
        args = [f"-J{flag}" for flag in opts.jar_compiler_flags]
        args.append(opts.mode_flags())
        args.append(str(self.jar_path))
        if opts.entrypoint:
            args.append(opts.entrypoint)
        for base, relatives in self.groups:
            for rel in relatives:
                args.extend(["-C", str(base), rel])
        return args
