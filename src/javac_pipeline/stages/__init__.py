from .base import Stage, ToolStage
from .compose import EncapsulatedStage, encapsulate
from .dependencies import DependencyAggregator, LibrarySource
from .events import EventType, StageState
from .jar import JarOptions, JarStage
from .javac import JavacOptions, JavacStage
from .pipeline import JavacJarStage, compile_jar

__all__ = [
    "DependencyAggregator",
    "EncapsulatedStage",
    "EventType",
    "JarOptions",
    "JarStage",
    "JavacJarStage",
    "JavacOptions",
    "JavacStage",
    "LibrarySource",
    "Stage",
    "StageState",
    "ToolStage",
    "compile_jar",
    "encapsulate",
]
