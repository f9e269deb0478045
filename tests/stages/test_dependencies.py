from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from javac_pipeline.core import DependencyStreamError, ILogger, StageStateError
from javac_pipeline.stages import DependencyAggregator
from javac_pipeline.streams import Artifact
from tests.helpers import from_list


def _jars(root: Path, *names: str) -> list[Artifact]:
    return [Artifact.from_path(root / name, root) for name in names]


def test_library_order_is_attachment_then_arrival(tmp_path: Path, logger: ILogger) -> None:
    slow = _jars(tmp_path, "slow1.jar", "slow2.jar")
    fast = _jars(tmp_path, "fast.jar")

    async def go() -> tuple[Path, ...]:
        agg = DependencyAggregator(logger=logger, stage="javac")
        agg.attach(str(tmp_path / "first.jar"))
        agg.attach(from_list(slow, delay=0.02))
        agg.attach(from_list(fast))
        agg.attach([tmp_path / "static1.jar", tmp_path / "static2.jar"])
        agg.input_ended()
        return await agg.wait()

    paths = asyncio.run(go())
    assert [p.name for p in paths] == [
        "first.jar",
        "slow1.jar",
        "slow2.jar",
        "fast.jar",
        "static1.jar",
        "static2.jar",
    ]


def test_wait_needs_input_end_and_every_source(tmp_path: Path, logger: ILogger) -> None:
    async def go() -> None:
        agg = DependencyAggregator(logger=logger, stage="javac")
        gate = asyncio.Event()

        async def held():
            await gate.wait()
            yield Artifact.from_path(tmp_path / "held.jar")

        agg.attach(held())
        agg.attach(from_list(_jars(tmp_path, "quick.jar")))
        waiter = asyncio.create_task(agg.wait())

        await asyncio.sleep(0.01)
        assert not waiter.done()
        assert agg.pending == 1

        agg.input_ended()
        await asyncio.sleep(0.01)
        assert not waiter.done()

        gate.set()
        paths = await waiter
        assert [p.name for p in paths] == ["held.jar", "quick.jar"]
        assert agg.pending == 0

    asyncio.run(go())


def test_no_sources_ready_on_input_end(logger: ILogger) -> None:
    async def go() -> tuple[Path, ...]:
        agg = DependencyAggregator(logger=logger)
        agg.input_ended()
        return await agg.wait()

    assert asyncio.run(go()) == ()


def test_attach_after_wait_is_rejected(tmp_path: Path, logger: ILogger) -> None:
    async def go() -> None:
        agg = DependencyAggregator(logger=logger, stage="javac")
        agg.input_ended()
        await agg.wait()
        assert agg.sealed
        with pytest.raises(StageStateError):
            agg.attach(str(tmp_path / "late.jar"))

    asyncio.run(go())


def test_failing_source_fails_wait(tmp_path: Path, logger: ILogger) -> None:
    async def broken():
        yield Artifact.from_path(tmp_path / "ok.jar")
        raise OSError("network share vanished")

    async def go() -> None:
        agg = DependencyAggregator(logger=logger, stage="javac")
        agg.attach(broken())
        agg.input_ended()
        with pytest.raises(DependencyStreamError) as info:
            await agg.wait()
        assert info.value.stage == "javac"
        assert isinstance(info.value.__cause__, OSError)

    asyncio.run(go())


def test_unsupported_source_type(logger: ILogger) -> None:
    agg = DependencyAggregator(logger=logger)
    with pytest.raises(TypeError):
        agg.attach(42)  # type: ignore[arg-type]
    assert agg.pending == 0


def test_bad_item_in_sequence_leaves_aggregator_usable(tmp_path: Path, logger: ILogger) -> None:
    async def go() -> tuple[Path, ...]:
        agg = DependencyAggregator(logger=logger, stage="javac")
        with pytest.raises(TypeError):
            agg.attach([tmp_path / "ok.jar", *_jars(tmp_path, "artifact.jar")])
        assert agg.pending == 0
        assert agg.library_paths == ()

        agg.attach([tmp_path / "ok.jar"])
        agg.input_ended()
        return await asyncio.wait_for(agg.wait(), timeout=1)

    paths = asyncio.run(go())
    assert [p.name for p in paths] == ["ok.jar"]
