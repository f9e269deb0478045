from __future__ import annotations

import argparse
import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from javac_pipeline.core import (
    ILogger,
    JavacPipelineError,
    Settings,
    bind,
    clear_bindings,
    configure_logging,
    format_duration_ms,
    get_logger,
    load_settings,
    monotonic_ms,
    stage_error_from_exc,
    utc_now_iso,
)
from javac_pipeline.stages import (
    JarOptions,
    JarStage,
    JavacOptions,
    JavacStage,
    Stage,
    compile_jar,
)
from javac_pipeline.streams import dest, forward, src

console = Console()


@dataclass(frozen=True, slots=True)
class _CommonArgs:
    cmd: str
    sources: list[str]
    libraries: list[str]
    base: str | None
    out_dir: Path
    jar_name: str | None


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--src",
        action="append",
        dest="sources",
        required=True,
        help="Glob of input files (repeatable). Prefix with '!' to exclude.",
    )
    p.add_argument(
        "--base",
        default=None,
        help="Root the inputs are relative to (default: static prefix of each glob).",
    )
    p.add_argument("--out", default=None, help="Output directory (default: settings out_dir)")
    p.add_argument("-v", "--verbose", action="store_true", help="Ask the tools for verbose output")
    p.add_argument(
        "-J",
        "--launcher-flag",
        action="append",
        dest="launcher_flags",
        default=[],
        help="Option for the java launcher started by the tool (repeatable).",
    )
    p.add_argument("--log-level", default=None, help="Override settings log_level")


def _add_javac_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--lib",
        action="append",
        dest="libraries",
        default=[],
        help="Glob of classpath entries (repeatable, order preserved).",
    )
    p.add_argument(
        "--debug",
        default="lines,source",
        help="Debug info: comma list of lines,source,var; '*' for all; 'none'.",
    )
    p.add_argument("--java-version", default=None, help="Value for -source/-target")
    p.add_argument("--fail-on-warning", action="store_true", help="Pass -Werror")
    p.add_argument("--no-warnings", action="store_true", help="Pass -nowarn")


def _add_jar_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("jar_name", help="Archive to create, relative to the output directory")
    p.add_argument("--entrypoint", default=None, help="Main-Class for the manifest")
    p.add_argument("--omit-manifest", action="store_true", help="Do not write a manifest")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="javac-pipeline")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("compile", help="Compile sources into class files")
    _add_common_args(sp)
    _add_javac_args(sp)

    sp = sub.add_parser("jar", help="Package existing files into a jar")
    _add_common_args(sp)
    _add_jar_args(sp)

    sp = sub.add_parser("build", help="Compile sources and package them into a jar")
    _add_common_args(sp)
    _add_javac_args(sp)
    _add_jar_args(sp)

    return p


def _common(args: argparse.Namespace, settings: Settings) -> _CommonArgs:
    return _CommonArgs(
        cmd=str(args.cmd),
        sources=list(args.sources),
        libraries=list(getattr(args, "libraries", None) or []),
        base=(str(args.base) if args.base else None),
        out_dir=Path(args.out) if args.out else Path(settings.out_dir),
        jar_name=getattr(args, "jar_name", None),
    )


def _javac_options(args: argparse.Namespace, settings: Settings) -> JavacOptions:
    return JavacOptions(
        debugging_information=args.debug,
        java_version=args.java_version,
        fail_on_warning=args.fail_on_warning,
        no_warnings=args.no_warnings,
        javac_tool_path=settings.javac_path,
        verbose=args.verbose,
        javac_compiler_flags=tuple(args.launcher_flags),
    )


def _jar_options(args: argparse.Namespace, settings: Settings) -> JarOptions:
    return JarOptions(
        omit_manifest=args.omit_manifest,
        entrypoint=args.entrypoint,
        jar_tool_path=settings.jar_path,
        verbose=args.verbose,
        jar_compiler_flags=tuple(args.launcher_flags),
    )


def build_stage(args: argparse.Namespace, settings: Settings, logger: ILogger) -> Stage:
    if args.cmd == "compile":
        return JavacStage(_javac_options(args, settings), logger=logger)
    if args.cmd == "jar":
        return JarStage(args.jar_name, _jar_options(args, settings), logger=logger)
    return compile_jar(
        args.jar_name,
        _javac_options(args, settings),
        _jar_options(args, settings),
        logger=logger,
    )


async def execute(stage: Stage, common: _CommonArgs) -> list[Path]:
    """
    Feed the globbed inputs into `stage`, attach libraries, and copy its
    output into the output directory.
    """
    async with stage:
        add_libraries = getattr(stage, "add_libraries", None)
        for pattern in common.libraries:
            if add_libraries is not None:
                add_libraries(src(pattern))

        feeder = asyncio.create_task(
            forward(src(common.sources, base=common.base), stage.input)
        )
        try:
            return await dest(stage, common.out_dir)
        finally:
            # A feed failure has already failed the stage's input.
            await asyncio.gather(feeder, return_exceptions=True)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    s = load_settings()
    configure_logging(level=args.log_level or s.log_level, fmt=s.log_format)
    log = get_logger("javac_pipeline")

    run_id = uuid.uuid4().hex
    bind(run_id=run_id, command=args.cmd)
    common = _common(args, s)

    console.print(
        Panel.fit(
            Text(
                f"javac-pipeline - {common.cmd}\nrun_id={run_id}\nout={common.out_dir}",
                style="bold",
            ),
            title="Run",
        )
    )

    started_at = utc_now_iso()
    t0 = monotonic_ms()
    written: list[Path] = []
    error = None
    try:
        stage = build_stage(args, s, log)
        written = asyncio.run(execute(stage, common))
    except JavacPipelineError as e:
        error = stage_error_from_exc(e)
        log.error("Run failed", exc_type=error.exc_type, error=error.message)
    finally:
        clear_bindings()
    duration = monotonic_ms() - t0

    tbl = Table(title="Result", show_header=True, box=None)
    tbl.add_row("status", "[green]ok[/green]" if error is None else "[red]failed[/red]")
    tbl.add_row("started_at", started_at)
    tbl.add_row("duration", format_duration_ms(duration))
    if error is None:
        tbl.add_row("files", str(len(written)))
        for path in written[:10]:
            tbl.add_row("", str(path))
    else:
        tbl.add_row("error", f"{error.exc_type}: {error.message}")
    console.print(tbl)

    return 0 if error is None else 1


if __name__ == "__main__":
    raise SystemExit(main())
