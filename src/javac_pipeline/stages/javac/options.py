from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from javac_pipeline.core import OptionsError

DEBUG_KINDS = ("lines", "source", "var")
DEBUG_ALL = ("*", "all")
DEBUG_NONE = "none"

DebugInformation = Union[str, Sequence[str], None]


def normalize_debugging_information(value: DebugInformation) -> tuple[str, ...]:
    """
    Canonical form of the debug-info option.

    Returns `("*",)` for everything, `()` for none, otherwise the distinct
    requested kinds in the order given.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        raw = [v.strip() for v in value.split(",")]
    else:
        raw = [str(v).strip() for v in value]
    items = [v for v in raw if v]

    if not items or items == [DEBUG_NONE]:
        return ()
    if any(v in DEBUG_ALL for v in items):
        if len(items) > 1:
            raise OptionsError(f"'*' cannot be combined with other debug kinds: {items}")
        return ("*",)

    unknown = [v for v in items if v not in DEBUG_KINDS]
    if unknown:
        raise OptionsError(
            f"Unknown debugging information {unknown}; valid values: "
            f"{', '.join(DEBUG_KINDS)}, '*' or 'none'"
        )
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True, slots=True)
class JavacOptions:
    """
    Options for the compile stage.

    debugging_information: comma list, sequence of lines/source/var, "*" (or
        "all") for everything, "none" for nothing (default: lines, source).
    java_version: language level for -source/-target (default: javac's own).
    fail_on_warning: treat warnings as errors.
    no_warnings: suppress warning messages.
    javac_tool_path: compiler binary (default: javac on $PATH).
    verbose: ask javac for verbose output.
    javac_compiler_flags: options for the java launcher run by javac.
    """

    debugging_information: DebugInformation = ("lines", "source")
    java_version: str | None = None
    fail_on_warning: bool = False
    no_warnings: bool = False
    javac_tool_path: str = "javac"
    verbose: bool = False
    javac_compiler_flags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "debugging_information",
            normalize_debugging_information(self.debugging_information),
        )
        if isinstance(self.javac_compiler_flags, str):
            raise OptionsError("javac_compiler_flags must be a sequence of flags")
        object.__setattr__(self, "javac_compiler_flags", tuple(self.javac_compiler_flags))

        if not self.javac_tool_path:
            raise OptionsError("javac_tool_path must not be empty")
        if self.java_version is not None and not str(self.java_version).strip():
            raise OptionsError("java_version must not be blank")

    def debug_flag(self) -> str:
        kinds = self.debugging_information
        if kinds == ("*",):
            return "-g"
        if not kinds:
            return "-g:none"
        return "-g:" + ",".join(kinds)

    def to_dict(self) -> dict[str, object]:
        return {
            "debugging_information": list(self.debugging_information),  # type: ignore[arg-type]
            "java_version": self.java_version,
            "fail_on_warning": self.fail_on_warning,
            "no_warnings": self.no_warnings,
            "javac_tool_path": self.javac_tool_path,
            "verbose": self.verbose,
            "javac_compiler_flags": list(self.javac_compiler_flags),
        }
