from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from javac_pipeline.core import write_lines

from .options import JavacOptions


def quote(path: Path | str) -> str:
    """Quote a path for a javac @-file."""
    escaped = str(path).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True, slots=True)
class JavacBatch:
    """
    Everything one javac invocation needs.
    """

    sources: tuple[Path, ...]
    libraries: tuple[Path, ...]
    out_dir: Path
    options: JavacOptions

    def argument_lines(self) -> list[str]:
        opts = self.options
        lines = [f"-d {quote(self.out_dir)}"]
        lines.extend(f"-J{flag}" for flag in opts.javac_compiler_flags)
        lines.append(opts.debug_flag())
        if opts.verbose:
            lines.append("-verbose")
        if opts.no_warnings:
            lines.append("-nowarn")
        if opts.fail_on_warning:
            lines.append("-Werror")
        if opts.java_version:
            lines.append(f"-source {opts.java_version}")
            lines.append(f"-target {opts.java_version}")
        if self.libraries:
            # javac honours only the last -classpath, so all entries share one.
            classpath = os.pathsep.join(str(p) for p in self.libraries)
            lines.append(f"-classpath {quote(classpath)}")
        return lines

    def source_lines(self) -> list[str]:
        return [quote(p) for p in self.sources]

    def write_argument_files(self, directory: Path) -> tuple[Path, Path]:
        """
        Write the argument file and the source file into `directory`.
        Returns (argfile, sourcefile).
        """
        argfile = Path(directory) / "javac.args"
        sourcefile = Path(directory) / "javac.sources"
        write_lines(argfile, self.argument_lines())
        write_lines(sourcefile, self.source_lines())
        return argfile, sourcefile
