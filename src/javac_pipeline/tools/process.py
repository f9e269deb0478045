from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import Protocol, Sequence

from javac_pipeline.core.errors import ToolSpawnError
from javac_pipeline.core.logging import ILogger


@dataclass(frozen=True, slots=True)
class ProcessResult:
    exit_code: int
    stdout_lines: tuple[str, ...] = ()
    stderr_lines: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ToolRunner(Protocol):
    async def __call__(
        self,
        executable: str,
        args: Sequence[str],
        *,
        name: str,
        logger: ILogger,
    ) -> ProcessResult: ...


_CHUNK_SIZE = 64 * 1024


async def _pump(
    stream: asyncio.StreamReader | None, label: str, log: ILogger
) -> tuple[str, ...]:
    # Lines are split by hand; readline() fails past the StreamReader limit.
    lines: list[str] = []
    if stream is None:
        return ()

    def emit(raw: bytes) -> None:
        line = raw.decode("utf-8", errors="replace").rstrip("\r")
        lines.append(line)
        log.info(line, stream=label)

    pending = bytearray()
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        pending += chunk
        if b"\n" not in chunk:
            continue
        *complete, rest = bytes(pending).split(b"\n")
        for raw in complete:
            emit(raw)
        pending = bytearray(rest)
    if pending:
        emit(bytes(pending))
    return tuple(lines)


async def run_tool(
    executable: str,
    args: Sequence[str],
    *,
    name: str,
    logger: ILogger,
    cwd: os.PathLike[str] | str | None = None,
) -> ProcessResult:
    """
    Run an external tool to completion.

    Every stdout/stderr line is passed to `logger` as it arrives, tagged with
    `tool=<name>`. Raises ToolSpawnError when the binary cannot be started;
    a non-zero exit is reported through the result, not raised.
    """
    log = logger.bind(tool=name)
    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            cwd=cwd,
        )
    except OSError as e:
        raise ToolSpawnError(
            f"{name}: cannot start {executable!r}: {e}", tool=name
        ) from e

    log.debug("Process started", executable=executable, pid=proc.pid)
    try:
        stdout_lines, stderr_lines = await asyncio.gather(
            _pump(proc.stdout, "stdout", log),
            _pump(proc.stderr, "stderr", log),
        )
        exit_code = await proc.wait()
    except BaseException:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
        raise

    log.debug("Process exited", exit_code=exit_code)
    return ProcessResult(
        exit_code=exit_code,
        stdout_lines=stdout_lines,
        stderr_lines=stderr_lines,
    )
