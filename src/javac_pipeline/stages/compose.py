from __future__ import annotations

from javac_pipeline.core import ILogger
from javac_pipeline.streams import forward

from .base import Stage


class EncapsulatedStage(Stage):
    """
    Present `first -> ... -> last` as one stage.

    Writes and close go to `first`; the read-end forwards `last`'s output.
    The caller wires `first` into `last` (usually with `first.pipe(last)`)
    before handing them over.
    """

    stage_id = "encapsulated"

    def __init__(self, first: Stage, last: Stage, *, logger: ILogger | None = None) -> None:
        super().__init__(logger=logger)
        self.first = first
        self.last = last
        self.input = first.input

    def start(self) -> None:
        super().start()
        self.first.start()

    async def run(self) -> None:
        count = await forward(self.last, self.output)
        self.log.debug("Forwarded composite output", artifacts=count)

    async def aclose(self) -> None:
        await self.last.aclose()
        await self.first.aclose()
        await super().aclose()


def encapsulate(first: Stage, last: Stage, *, logger: ILogger | None = None) -> EncapsulatedStage:
    return EncapsulatedStage(first, last, logger=logger)
