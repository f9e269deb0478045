from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterator, Sequence

from javac_pipeline.core import (
    ILogger,
    StageFailure,
    StageStateError,
    ToolInvocationError,
    default_logger,
    format_duration_ms,
    monotonic_ms,
    remove_tree,
)
from javac_pipeline.streams import Artifact, ArtifactChannel, forward
from javac_pipeline.tools import ProcessResult, ToolRunner, run_tool

from .events import EventType, StageState

_TERMINAL = (StageState.DONE, StageState.FAILED)


class Stage(ABC):
    """
    A unit with a write-end (`write`, `close`) and a read-end (async
    iteration). One internal task joins the two; it starts on first use from
    inside a running event loop.

    Subclasses implement `run()`: drain `self.input`, write results into
    `self.output`. Returning ends the output; raising fails it.
    """

    stage_id: str = "stage"

    def __init__(self, *, logger: ILogger | None = None) -> None:
        self.log: ILogger = (logger or default_logger()).bind(stage=self.stage_id)
        self.input = ArtifactChannel(f"{self.stage_id}.input")
        self.output = ArtifactChannel(f"{self.stage_id}.output")
        self.state = StageState.COLLECTING
        self._task: asyncio.Task[None] | None = None
        self._feed_task: asyncio.Task[int] | None = None
        self._upstream: Stage | None = None
        self._temp_paths: list[Path] = []
        self.emit(EventType.STAGE_BUILT)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.stage_id} state={self.state.value}>"

    def emit(self, event: EventType | str, **kw: object) -> None:
        # Keep lifecycle chatter at debug level to leave console logs readable.
        event_value = event.value if isinstance(event, EventType) else str(event)
        self.log.debug(event_value, event_type=event_value, **kw)

    def _set_state(self, state: StageState) -> None:
        if self.state in _TERMINAL:
            return
        self.emit(EventType.STAGE_STATE, previous=self.state.value, state=state.value)
        self.state = state

    # write-end

    def write(self, artifact: Artifact) -> None:
        self.start()
        self.emit(EventType.STAGE_INPUT, path=str(artifact.path))
        self.input.write(artifact)

    def write_all(self, artifacts: Sequence[Artifact]) -> None:
        for artifact in artifacts:
            self.write(artifact)
        self.close()

    def close(self) -> None:
        self.start()
        self.input.close()

    # read-end

    def __aiter__(self) -> AsyncIterator[Artifact]:
        self.start()
        return self.output.__aiter__()

    async def collect(self) -> list[Artifact]:
        return [a async for a in self]

    # wiring

    def pipe(self, downstream: Stage) -> Stage:
        """
        Feed this stage's output into `downstream`'s write-end. End-of-stream
        and failure propagate. Returns `downstream` for chaining.
        """
        downstream._set_upstream(self)
        return downstream

    def _set_upstream(self, upstream: Stage) -> None:
        if self._upstream is not None:
            raise StageStateError(f"{self.stage_id}: already fed by {self._upstream}")
        if self._task is not None:
            raise StageStateError(f"{self.stage_id}: cannot pipe into a started stage")
        self._upstream = upstream

    def start(self) -> None:
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self.emit(EventType.STAGE_START)
        if self._upstream is not None:
            self._feed_task = loop.create_task(
                forward(self._upstream, self.input),
                name=f"{self.stage_id}.feed",
            )
        self._task = loop.create_task(self._main(), name=self.stage_id)

    async def _main(self) -> None:
        t0 = monotonic_ms()
        try:
            await self.run()
        except Exception as e:
            duration = monotonic_ms() - t0
            failure = self._as_failure(e)
            self._record_failure(failure, duration)
            self.output.fail(failure)
        else:
            duration = monotonic_ms() - t0
            self._set_state(StageState.DONE)
            self.emit(EventType.STAGE_SUCCESS, duration_ms=duration)
            self.log.info(
                "Stage succeeded",
                outputs=self.output.written,
                duration_ms=duration,
                duration=format_duration_ms(duration),
            )
            self.output.close()
        finally:
            if self._feed_task is not None:
                # Errors from the feed already reached us through self.input.
                await asyncio.gather(self._feed_task, return_exceptions=True)

    def _record_failure(self, failure: StageFailure, duration: int) -> None:
        self._set_state(StageState.FAILED)
        self.emit(
            EventType.STAGE_FAILED,
            exc_type=type(failure).__name__,
            message=str(failure),
        )
        self.log.error(
            "Stage failed",
            error=str(failure),
            duration_ms=duration,
            duration=format_duration_ms(duration),
        )

    def _as_failure(self, exc: Exception) -> StageFailure:
        if isinstance(exc, StageFailure):
            if exc.stage is None:
                exc.stage = self.stage_id
            return exc
        failure = StageFailure(f"{self.stage_id}: {exc}", stage=self.stage_id)
        failure.__cause__ = exc
        return failure

    @abstractmethod
    async def run(self) -> None: ...

    # resources

    def track_temp(self, path: Path) -> Path:
        self._temp_paths.append(path)
        return path

    async def aclose(self) -> None:
        """
        Stop the stage task if it is still running and release the temp
        directories it owns. Call after downstream consumers have read them.
        """
        for task in (self._feed_task, self._task):
            if task is not None and not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
        for path in self._temp_paths:
            remove_tree(path)
        self._temp_paths.clear()

    async def __aenter__(self) -> Stage:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class ToolStage(Stage):
    """
    Stage backed by one external tool invocation per batch.
    """

    tool_name: str = "tool"

    def __init__(
        self, *, logger: ILogger | None = None, runner: ToolRunner | None = None
    ) -> None:
        super().__init__(logger=logger)
        self.runner: ToolRunner = runner or run_tool

    async def invoke(self, executable: str, args: Sequence[str]) -> ProcessResult:
        self._set_state(StageState.EXECUTING)
        self.emit(EventType.TOOL_EXEC, executable=executable, args=list(args))
        try:
            result = await self.runner(
                executable, args, name=self.tool_name, logger=self.log
            )
        except ToolInvocationError as e:
            e.stage = self.stage_id
            raise

        self.emit(EventType.TOOL_EXIT, exit_code=result.exit_code)
        if result.exit_code != 0:
            raise ToolInvocationError(
                f"{self.tool_name} failed with exit code {result.exit_code}",
                tool=self.tool_name,
                exit_code=result.exit_code,
                result=result,
                stage=self.stage_id,
            )
        return result
