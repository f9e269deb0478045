from __future__ import annotations

from pathlib import Path

from javac_pipeline.core import ILogger
from javac_pipeline.tools import ToolRunner

from .compose import EncapsulatedStage
from .dependencies import DependencyAggregator, LibrarySource
from .jar import JarOptions, JarStage
from .javac import JavacOptions, JavacStage


class JavacJarStage(EncapsulatedStage):
    """
    javac followed by jar, usable wherever a single stage is expected.
    Library attachment goes to the javac half only.
    """

    stage_id = "compile"

    def __init__(
        self,
        javac: JavacStage,
        jar: JarStage,
        *,
        logger: ILogger | None = None,
    ) -> None:
        super().__init__(javac, jar, logger=logger)
        self.javac = javac
        self.jar = jar

    @property
    def dependencies(self) -> DependencyAggregator:
        return self.javac.dependencies

    @property
    def out_dir(self) -> Path | None:
        return self.javac.out_dir

    def add_libraries(self, source: LibrarySource) -> None:
        self.javac.add_libraries(source)


def compile_jar(
    jar_name: str,
    javac_options: JavacOptions | None = None,
    jar_options: JarOptions | None = None,
    *,
    logger: ILogger | None = None,
    runner: ToolRunner | None = None,
) -> JavacJarStage:
    """
    Build the javac -> jar pipeline. Sources go in, one jar comes out.
    """
    javac = JavacStage(javac_options, logger=logger, runner=runner)
    jar = JarStage(jar_name, jar_options, logger=logger, runner=runner)
    javac.pipe(jar)
    return JavacJarStage(javac, jar, logger=logger)
