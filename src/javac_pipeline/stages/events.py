from __future__ import annotations

from enum import Enum


class StageState(str, Enum):
    COLLECTING = "collecting"
    WAITING = "waiting"
    EXECUTING = "executing"
    STREAMING = "streaming"
    DONE = "done"
    FAILED = "failed"


class EventType(str, Enum):
    STAGE_BUILT = "stage.built"
    STAGE_START = "stage.start"
    STAGE_STATE = "stage.state"
    STAGE_INPUT = "stage.input"
    STAGE_INPUT_END = "stage.input.end"
    STAGE_OUTPUT = "stage.output"
    STAGE_SUCCESS = "stage.success"
    STAGE_FAILED = "stage.failed"

    LIBRARY_ATTACH = "library.attach"
    LIBRARY_ADD = "library.add"
    LIBRARY_END = "library.end"
    LIBRARY_FAILED = "library.failed"

    TOOL_EXEC = "tool.exec"
    TOOL_EXIT = "tool.exit"
