from __future__ import annotations

import asyncio
from typing import AsyncIterator

from javac_pipeline.core.errors import ChannelError

from .artifact import Artifact

_END = object()


class ArtifactChannel:
    """
    One-directional, unbounded artifact stream.

    The writing side calls `write()` any number of times and then exactly one
    of `close()` (normal end-of-stream) or `fail()` (terminal failure). The
    reading side iterates once; a failure is raised from the iteration after
    every artifact written before it has been delivered.
    """

    def __init__(self, name: str = "channel") -> None:
        self.name = name
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._ended = False
        self._error: BaseException | None = None
        self._iterated = False
        self.written = 0

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def error(self) -> BaseException | None:
        return self._error

    def write(self, artifact: Artifact) -> None:
        if self._ended:
            raise ChannelError(f"{self.name}: write after end of stream")
        self._queue.put_nowait(artifact)
        self.written += 1

    def close(self) -> None:
        if self._ended:
            return
        self._ended = True
        self._queue.put_nowait(_END)

    def fail(self, exc: BaseException) -> None:
        if self._ended:
            return
        self._error = exc
        self._ended = True
        self._queue.put_nowait(_END)

    def __aiter__(self) -> AsyncIterator[Artifact]:
        if self._iterated:
            raise ChannelError(f"{self.name}: stream can only be consumed once")
        self._iterated = True
        return self._drain()

    async def _drain(self) -> AsyncIterator[Artifact]:
        while True:
            item = await self._queue.get()
            if item is _END:
                if self._error is not None:
                    raise self._error
                return
            yield item  # type: ignore[misc]

    async def collect(self) -> list[Artifact]:
        return [a async for a in self]
