from __future__ import annotations

from javac_pipeline.core import ILogger, ToolInvocationError, ensure_parent, make_tmp_dir
from javac_pipeline.streams import Artifact
from javac_pipeline.tools import ToolRunner

from ..base import ToolStage
from ..events import EventType, StageState
from .batch import JarBatch, group_by_base
from .options import JarOptions, validate_jar_name


class JarStage(ToolStage):
    """
    Package every artifact written to the stage into one jar.

    Artifacts keep their base/relative split: each is added as
    `-C <base> <relative>`. The archive is created by a single jar run once
    the write-end is closed and is then emitted as the only output artifact.
    """

    stage_id = "jar"
    tool_name = "jar"

    def __init__(
        self,
        jar_name: str,
        options: JarOptions | None = None,
        *,
        logger: ILogger | None = None,
        runner: ToolRunner | None = None,
    ) -> None:
        super().__init__(logger=logger, runner=runner)
        self.jar_name = validate_jar_name(jar_name)
        self.options = options or JarOptions()
        self.batch: JarBatch | None = None
        self.log.debug("Building jar task", jar=self.jar_name, options=self.options.to_dict())

    async def run(self) -> None:
        received: list[Artifact] = []
        async for artifact in self.input:
            received.append(artifact)
        self.emit(EventType.STAGE_INPUT_END, files=len(received))

        groups = group_by_base(received)
        if not groups:
            self.log.warning("No input files; jar not run", jar=self.jar_name)
            return

        archive_dir = self.track_temp(make_tmp_dir("jar"))
        jar_path = archive_dir / self.jar_name
        ensure_parent(jar_path)

        self.batch = JarBatch(jar_path=jar_path, groups=groups, options=self.options)
        self.log.debug(
            "Packaging",
            jar=self.jar_name,
            bases=len(groups),
            entries=self.batch.entries,
        )
        await self.invoke(self.options.jar_tool_path, self.batch.arguments())

        if not jar_path.is_file():
            raise ToolInvocationError(
                f"jar exited cleanly but did not produce {jar_path}",
                tool=self.tool_name,
                exit_code=0,
                stage=self.stage_id,
            )

        self._set_state(StageState.STREAMING)
        artifact = Artifact.from_path(jar_path, archive_dir)
        self.emit(EventType.STAGE_OUTPUT, path=artifact.relative)
        self.output.write(artifact)
