from .artifact import Artifact
from .channel import ArtifactChannel
from .files import dest, glob_base, src
from .forward import forward

__all__ = [
    "Artifact",
    "ArtifactChannel",
    "dest",
    "forward",
    "glob_base",
    "src",
]
