from .batch import JavacBatch, quote
from .options import JavacOptions, normalize_debugging_information
from .stage import JavacStage

__all__ = [
    "JavacBatch",
    "JavacOptions",
    "JavacStage",
    "normalize_debugging_information",
    "quote",
]
