from .batch import JarBatch, group_by_base
from .options import JarOptions, validate_jar_name
from .stage import JarStage

__all__ = [
    "JarBatch",
    "JarOptions",
    "JarStage",
    "group_by_base",
    "validate_jar_name",
]
