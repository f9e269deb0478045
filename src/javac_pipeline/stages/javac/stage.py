from __future__ import annotations

import asyncio
from pathlib import Path

from javac_pipeline.core import ILogger, make_tmp_dir, remove_tree, walk_files
from javac_pipeline.streams import Artifact
from javac_pipeline.tools import ToolRunner

from ..base import ToolStage
from ..dependencies import DependencyAggregator, LibrarySource
from ..events import EventType, StageState
from .batch import JavacBatch
from .options import JavacOptions


class JavacStage(ToolStage):
    """
    Compile every source written to the stage with a single javac run.

    Sources are buffered until the write-end is closed and every library
    source attached through `add_libraries` has ended. The class files javac
    writes into a fresh output directory are then streamed out, with that
    directory as their base. Nothing is emitted before javac exits; a
    non-zero exit fails the stage with no output.
    """

    stage_id = "javac"
    tool_name = "javac"

    def __init__(
        self,
        options: JavacOptions | None = None,
        *,
        logger: ILogger | None = None,
        runner: ToolRunner | None = None,
    ) -> None:
        super().__init__(logger=logger, runner=runner)
        self.options = options or JavacOptions()
        self.dependencies = DependencyAggregator(logger=self.log, stage=self.stage_id)
        self.out_dir: Path | None = None
        self.batch: JavacBatch | None = None
        self.log.debug("Building javac task", options=self.options.to_dict())

    def add_libraries(self, source: LibrarySource) -> None:
        """
        Add classpath entries: a path, a sequence of paths, or an async
        iterable of artifacts (another stage, a channel, `src(...)`).
        """
        self.dependencies.attach(source)

    async def run(self) -> None:
        sources: list[Path] = []
        async for artifact in self.input:
            sources.append(artifact.path)
        self.emit(EventType.STAGE_INPUT_END, sources=len(sources))

        self._set_state(StageState.WAITING)
        self.dependencies.input_ended()
        libraries = await self.dependencies.wait()
        self.log.debug(
            "All source and library streams complete",
            sources=len(sources),
            libraries=len(libraries),
        )

        if not sources:
            self.log.warning("No source files; javac not run")
            return

        out_dir = self.track_temp(make_tmp_dir("javac-out"))
        self.out_dir = out_dir
        self.batch = JavacBatch(
            sources=tuple(sources),
            libraries=libraries,
            out_dir=out_dir,
            options=self.options,
        )

        args_dir = make_tmp_dir("javac-args")
        try:
            argfile, sourcefile = self.batch.write_argument_files(args_dir)
            self.log.debug(
                "Argument files written",
                argfile=str(argfile),
                sourcefile=str(sourcefile),
            )
            await self.invoke(
                self.options.javac_tool_path, [f"@{argfile}", f"@{sourcefile}"]
            )
        finally:
            remove_tree(args_dir)

        self._set_state(StageState.STREAMING)
        produced = await asyncio.to_thread(lambda: list(walk_files(out_dir)))
        for path in produced:
            artifact = Artifact.from_path(path, out_dir)
            self.emit(EventType.STAGE_OUTPUT, path=artifact.relative)
            self.output.write(artifact)

    async def aclose(self) -> None:
        await self.dependencies.aclose()
        await super().aclose()
