from __future__ import annotations

import asyncio
import os
import re
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from javac_pipeline.core import ILogger, monotonic_ms
from javac_pipeline.streams import Artifact
from javac_pipeline.tools import ProcessResult

_PACKAGE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)


def _unquote(value: str) -> str:
    value = value.strip()
    if value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value.replace('\\"', '"').replace("\\\\", "\\")


@dataclass
class JavacCall:
    executable: str
    args: list[str]
    arg_lines: list[str]
    source_lines: list[str]
    at_ms: int

    @property
    def out_dir(self) -> Path:
        assert self.arg_lines[0].startswith("-d ")
        return Path(_unquote(self.arg_lines[0][3:]))

    @property
    def sources(self) -> list[Path]:
        return [Path(_unquote(line)) for line in self.source_lines]

    @property
    def classpath(self) -> list[str]:
        for line in self.arg_lines:
            if line.startswith("-classpath "):
                return _unquote(line[len("-classpath "):]).split(os.pathsep)
        return []


@dataclass
class FakeJavac:
    """
    Stands in for javac: records the @-files and writes one .class per
    source, placed by its `package` declaration.
    """

    exit_code: int = 0
    calls: list[JavacCall] = field(default_factory=list)

    async def __call__(
        self, executable: str, args: Sequence[str], *, name: str, logger: ILogger
    ) -> ProcessResult:
        await asyncio.sleep(0)
        argfile = Path(args[0][1:])
        sourcefile = Path(args[1][1:])
        call = JavacCall(
            executable=executable,
            args=list(args),
            arg_lines=argfile.read_text(encoding="utf-8").splitlines(),
            source_lines=sourcefile.read_text(encoding="utf-8").splitlines(),
            at_ms=monotonic_ms(),
        )
        self.calls.append(call)
        if self.exit_code != 0:
            logger.info("error: cannot find symbol", stream="stderr")
            return ProcessResult(self.exit_code, (), ("error: cannot find symbol",))

        for source in call.sources:
            match = _PACKAGE.search(source.read_text(encoding="utf-8"))
            pkg_dir = call.out_dir.joinpath(*match.group(1).split(".")) if match else call.out_dir
            pkg_dir.mkdir(parents=True, exist_ok=True)
            (pkg_dir / f"{source.stem}.class").write_bytes(b"\xca\xfe\xba\xbe" + source.stem.encode())
        return ProcessResult(0, (), ())


@dataclass
class JarCall:
    executable: str
    args: list[str]


@dataclass
class FakeJar:
    """
    Stands in for jar: understands `c`/`f`/`v`/`M`/`e` and `-C base rel`
    and writes a real zip so membership can be inspected.
    """

    exit_code: int = 0
    calls: list[JarCall] = field(default_factory=list)

    async def __call__(
        self, executable: str, args: Sequence[str], *, name: str, logger: ILogger
    ) -> ProcessResult:
        await asyncio.sleep(0)
        self.calls.append(JarCall(executable=executable, args=list(args)))
        if self.exit_code != 0:
            return ProcessResult(self.exit_code, (), ("jar: bad things",))

        rest = [a for a in args if not a.startswith("-J")]
        mode, jar_path, rest = rest[0], Path(rest[1]), rest[2:]
        entrypoint = None
        if "e" in mode:
            entrypoint, rest = rest[0], rest[1:]

        with zipfile.ZipFile(jar_path, "w") as zf:
            if "M" not in mode:
                manifest = "Manifest-Version: 1.0\n"
                if entrypoint:
                    manifest += f"Main-Class: {entrypoint}\n"
                zf.writestr("META-INF/MANIFEST.MF", manifest)
            while rest:
                assert rest[0] == "-C", rest
                base, rel, rest = Path(rest[1]), rest[2], rest[3:]
                zf.write(base / rel, arcname=rel)
        return ProcessResult(0, (), ())


def class_entries(jar_path: Path) -> list[str]:
    with zipfile.ZipFile(jar_path) as zf:
        return [n for n in zf.namelist() if not n.startswith("META-INF/")]


def write_java(root: Path, rel: str, package: str | None = "test_package") -> Artifact:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    header = f"package {package};\n\n" if package else ""
    path.write_text(f"{header}public class {path.stem} {{}}\n", encoding="utf-8")
    return Artifact.from_path(path, root)


async def from_list(artifacts: Sequence[Artifact], *, delay: float = 0.0):
    for artifact in artifacts:
        if delay:
            await asyncio.sleep(delay)
        yield artifact


class RecordingLogger:
    """ILogger that keeps (event, fields) pairs, bound fields included."""

    def __init__(self, records: list[tuple[str, dict]] | None = None, **bound: object) -> None:
        self.records = records if records is not None else []
        self.bound = bound

    def _log(self, event: str, **kw: object) -> None:
        self.records.append((event, {**self.bound, **kw}))

    debug = info = warning = error = exception = _log

    def bind(self, **kw: object) -> "RecordingLogger":
        return RecordingLogger(self.records, **{**self.bound, **kw})

    def events(self, **match: object) -> list[str]:
        return [
            event
            for event, kw in self.records
            if all(kw.get(k) == v for k, v in match.items())
        ]
