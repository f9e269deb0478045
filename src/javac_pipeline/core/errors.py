from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from javac_pipeline.tools.process import ProcessResult


class JavacPipelineError(RuntimeError):
    """Base error"""


@dataclass(frozen=True, slots=True)
class StageError:
    """
    A normalized error record for stage failures.
    """

    exc_type: str
    message: str
    traceback: str


def stage_error_from_exc(exc: BaseException) -> StageError:
    return StageError(
        exc_type=type(exc).__name__,
        message=str(exc),
        traceback="".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
    )


class OptionsError(JavacPipelineError, ValueError):
    """Stage options are invalid or contradict each other"""


class ArtifactError(JavacPipelineError):
    """Artifact path does not live under its base directory"""


class ChannelError(JavacPipelineError):
    """
    Misuse of an artifact channel: writing after end-of-stream, or reading
    a read-end a second time.
    """


class StageStateError(JavacPipelineError):
    """Operation not allowed in the stage's current state"""


class StageFailure(JavacPipelineError):
    """
    Terminal failure of a stage instance. Raised from the consumer side of
    the stage's output, never retried.
    """

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage


class ToolInvocationError(StageFailure):
    """External tool exited non-zero"""

    def __init__(
        self,
        message: str,
        *,
        tool: str,
        exit_code: int | None = None,
        result: ProcessResult | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message, stage=stage)
        self.tool = tool
        self.exit_code = exit_code
        self.result = result


class ToolSpawnError(ToolInvocationError):
    """
    External tool could not be started (binary missing, not executable).
    Handled exactly like a non-zero exit.
    """


class DependencyStreamError(StageFailure):
    """An attached library source raised before reaching its end"""
