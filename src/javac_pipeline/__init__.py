from .core import (
    DependencyStreamError,
    JavacPipelineError,
    OptionsError,
    StageFailure,
    ToolInvocationError,
    ToolSpawnError,
)
from .stages import (
    DependencyAggregator,
    EncapsulatedStage,
    JarOptions,
    JarStage,
    JavacJarStage,
    JavacOptions,
    JavacStage,
    Stage,
    StageState,
    compile_jar,
    encapsulate,
)
from .streams import Artifact, ArtifactChannel, dest, forward, src
from .tools import ProcessResult, run_tool

__version__ = "0.1.0"

__all__ = [
    "Artifact",
    "ArtifactChannel",
    "DependencyAggregator",
    "DependencyStreamError",
    "EncapsulatedStage",
    "JarOptions",
    "JarStage",
    "JavacJarStage",
    "JavacOptions",
    "JavacPipelineError",
    "JavacStage",
    "OptionsError",
    "ProcessResult",
    "Stage",
    "StageFailure",
    "StageState",
    "ToolInvocationError",
    "ToolSpawnError",
    "compile_jar",
    "dest",
    "encapsulate",
    "forward",
    "run_tool",
    "src",
]
