from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from javac_pipeline.core import DependencyStreamError, ILogger, StageStateError
from javac_pipeline.streams import Artifact

from .events import EventType

PathLike = Union[str, "os.PathLike[str]"]
LibrarySource = Union[PathLike, Sequence[PathLike], AsyncIterable[Artifact]]


@dataclass(slots=True)
class _PendingSource:
    index: int
    label: str
    paths: list[Path] = field(default_factory=list)
    done: bool = False
    task: asyncio.Task[None] | None = None


class DependencyAggregator:
    """
    Wait-group over library sources attached after the stage was built.

    Readiness is the join of "input ended" and "every attached source ended".
    Library paths keep attachment order, then arrival order within a source.
    Once `wait()` has been entered the aggregator is sealed: later `attach`
    calls raise StageStateError.
    """

    def __init__(self, *, logger: ILogger, stage: str | None = None) -> None:
        self.log = logger
        self.stage = stage
        self._sources: list[_PendingSource] = []
        self._pending = 0
        self._input_ended = False
        self._sealed = False
        self._error: DependencyStreamError | None = None
        self._ready = asyncio.Event()

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def library_paths(self) -> tuple[Path, ...]:
        return tuple(p for source in self._sources for p in source.paths)

    def attach(self, source: LibrarySource) -> None:
        if self._sealed:
            raise StageStateError(
                f"{self.stage}: libraries must be attached before input ends"
            )

        static: list[Path] | None
        if isinstance(source, (str, os.PathLike)):
            static = [_resolve(source)]
        elif isinstance(source, AsyncIterable):
            static = None
        elif isinstance(source, Sequence):
            static = [_resolve(p) for p in source]
        else:
            raise TypeError(
                f"Unsupported library source {type(source).__name__}; expected "
                "a path, a sequence of paths or an async iterable of artifacts"
            )

        entry = _PendingSource(index=len(self._sources), label=_label(source))
        self._sources.append(entry)
        self._pending += 1
        self.log.debug(
            EventType.LIBRARY_ATTACH.value, source=entry.label, index=entry.index
        )

        if static is None:
            entry.task = asyncio.get_running_loop().create_task(
                self._consume(entry, source), name=f"{self.stage}.library.{entry.index}"
            )
        else:
            self._add_static(entry, static)

    def _add_static(self, entry: _PendingSource, paths: list[Path]) -> None:
        for p in paths:
            entry.paths.append(p)
            self.log.debug(EventType.LIBRARY_ADD.value, path=str(entry.paths[-1]))
        self._source_ended(entry)

    async def _consume(
        self, entry: _PendingSource, source: AsyncIterable[Artifact]
    ) -> None:
        try:
            async for artifact in source:
                entry.paths.append(artifact.path)
                self.log.debug(EventType.LIBRARY_ADD.value, path=str(artifact.path))
        except Exception as e:
            self.log.error(
                EventType.LIBRARY_FAILED.value, source=entry.label, error=str(e)
            )
            if self._error is None:
                err = DependencyStreamError(
                    f"library source {entry.label} failed: {e}", stage=self.stage
                )
                err.__cause__ = e
                self._error = err
                self._ready.set()
            return
        self._source_ended(entry)

    def _source_ended(self, entry: _PendingSource) -> None:
        entry.done = True
        self._pending -= 1
        self.log.debug(
            EventType.LIBRARY_END.value, source=entry.label, paths=len(entry.paths)
        )
        self._check_ready()

    def input_ended(self) -> None:
        self._input_ended = True
        self._check_ready()

    def _check_ready(self) -> None:
        if self._input_ended and self._pending == 0:
            self._ready.set()

    async def wait(self) -> tuple[Path, ...]:
        """
        Resolve once input has ended and every attached source has ended.
        Returns the ordered library paths; raises DependencyStreamError if a
        source failed.
        """
        self._sealed = True
        await self._ready.wait()
        if self._error is not None:
            raise self._error
        return self.library_paths

    async def aclose(self) -> None:
        for source in self._sources:
            if source.task is not None and not source.task.done():
                source.task.cancel()
                await asyncio.gather(source.task, return_exceptions=True)


def _label(source: object) -> str:
    if isinstance(source, (str, os.PathLike)):
        return str(source)
    return type(source).__name__


def _resolve(path: object) -> Path:
    if not isinstance(path, (str, os.PathLike)):
        raise TypeError(
            f"Library paths must be str or os.PathLike, not {type(path).__name__}"
        )
    return Path(os.path.abspath(path))
