from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from javac_pipeline.core import OptionsError


def validate_jar_name(jar_name: str) -> str:
    """
    Archive names are relative paths, optionally with sub-directories.
    """
    name = str(jar_name).replace("\\", "/").strip()
    if not name or name.endswith("/"):
        raise OptionsError(f"Invalid jar name: {jar_name!r}")
    p = PurePosixPath(name)
    if p.is_absolute() or ".." in p.parts:
        raise OptionsError(f"Jar name must be a relative path inside the output: {jar_name!r}")
    return p.as_posix()


@dataclass(frozen=True, slots=True)
class JarOptions:
    omit_manifest: bool = False
    entrypoint: str | None = None
    jar_tool_path: str = "jar"
    verbose: bool = False
    # Options for the java launcher run by jar.
    jar_compiler_flags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.jar_compiler_flags, str):
            raise OptionsError("jar_compiler_flags must be a sequence of flags")
        object.__setattr__(self, "jar_compiler_flags", tuple(self.jar_compiler_flags))

        if not self.jar_tool_path:
            raise OptionsError("jar_tool_path must not be empty")
        if self.entrypoint is not None and not self.entrypoint.strip():
            raise OptionsError("entrypoint must not be blank")
        if self.entrypoint and self.omit_manifest:
            raise OptionsError("entrypoint needs a manifest; omit_manifest must be False")

    def mode_flags(self) -> str:
        flags = ["c", "f"]
        if self.verbose:
            flags.append("v")
        if self.omit_manifest:
            flags.append("M")
        if self.entrypoint:
            flags.append("e")
        return "".join(flags)

    def to_dict(self) -> dict[str, object]:
        return {
            "omit_manifest": self.omit_manifest,
            "entrypoint": self.entrypoint,
            "jar_tool_path": self.jar_tool_path,
            "verbose": self.verbose,
            "jar_compiler_flags": list(self.jar_compiler_flags),
        }
