from __future__ import annotations

from typing import AsyncIterable

from .artifact import Artifact
from .channel import ArtifactChannel


async def forward(source: AsyncIterable[Artifact], destination: ArtifactChannel) -> int:
    """
    Copy every artifact of `source` into `destination`, then end it.

    A failure of `source` fails `destination` and is re-raised to the caller.
    Returns the number of artifacts forwarded.
    """
    count = 0
    try:
        async for artifact in source:
            destination.write(artifact)
            count += 1
    except Exception as exc:
        destination.fail(exc)
        raise
    destination.close()
    return count
