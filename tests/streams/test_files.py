from __future__ import annotations

import asyncio
from pathlib import Path

from javac_pipeline.streams import dest, glob_base, src
from tests.helpers import from_list, write_java


def test_glob_base() -> None:
    assert glob_base("test/**/*.java") == Path("test")
    assert glob_base("simple/**/*") == Path("simple")
    assert glob_base("lib/foo.jar") == Path("lib")
    assert glob_base("*.java") == Path(".")


def test_src_expands_globs_with_exclusions(tmp_path: Path) -> None:
    root = tmp_path / "test"
    write_java(root, "test_package/TestClass.java")
    write_java(root, "test_package/-Broken.java")
    write_java(root, "Top.java", package=None)

    async def go():
        return [a async for a in src(["test/**/*.java", "!test/**/-*"], cwd=tmp_path)]

    got = asyncio.run(go())
    assert sorted(a.relative for a in got) == ["Top.java", "test_package/TestClass.java"]
    assert {a.base for a in got} == {root}


def test_src_explicit_base_and_dedup(tmp_path: Path) -> None:
    write_java(tmp_path / "classes", "p/A.java")

    async def go():
        return [
            a
            async for a in src(
                ["classes/p/*.java", "classes/**/*.java"],
                base=tmp_path,
                cwd=tmp_path,
            )
        ]

    got = asyncio.run(go())
    assert [a.relative for a in got] == ["classes/p/A.java"]


def test_dest_copies_relative_layout(tmp_path: Path) -> None:
    items = [
        write_java(tmp_path / "in", "p/A.java"),
        write_java(tmp_path / "in", "p/q/B.java"),
    ]
    out = tmp_path / "out"

    written = asyncio.run(dest(from_list(items), out))
    assert written == [out / "p" / "A.java", out / "p" / "q" / "B.java"]
    assert (out / "p" / "q" / "B.java").read_text() == items[1].path.read_text()
