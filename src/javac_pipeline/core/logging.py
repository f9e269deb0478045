from __future__ import annotations

import logging
import sys
from typing import Any, Protocol, runtime_checkable

import structlog
from rich.logging import RichHandler
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

_CONFIGURED = False


@runtime_checkable
class ILogger(Protocol):
    def debug(self, event: str, **kw: Any) -> Any: ...
    def info(self, event: str, **kw: Any) -> Any: ...
    def warning(self, event: str, **kw: Any) -> Any: ...
    def error(self, event: str, **kw: Any) -> Any: ...
    def exception(self, event: str, **kw: Any) -> Any: ...
    def bind(self, **kw: Any) -> "ILogger": ...


def _shared_processors() -> list[Any]:
    return [
        merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def prefix_tool_output(
    _logger: Any, _method: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Console processor: render a forwarded tool line as `[javac:stderr] <line>`
    so compiler diagnostics read like the tool printed them.
    """
    if "tool" in event_dict and "stream" in event_dict:
        tool = event_dict.pop("tool")
        stream = event_dict.pop("stream")
        event_dict["event"] = f"[{tool}:{stream}] {event_dict.get('event', '')}"
    return event_dict


def configure_logging(*, level: str = "INFO", fmt: str = "console") -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    processors = _shared_processors()
    if fmt == "console":
        handler: logging.Handler = RichHandler(
            rich_tracebacks=True,
            markup=False,
            show_time=False,
            show_path=False,
            log_time_format="%H:%M:%S",
            console=None,
        )
        processors.append(prefix_tool_output)
        processors.append(
            structlog.processors.KeyValueRenderer(
                key_order=["event"], sort_keys=True, drop_missing=True
            )
        )
    else:
        handler = logging.StreamHandler(stream=sys.stdout)
        processors.append(structlog.processors.JSONRenderer())

    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level.upper())
    root.addHandler(handler)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level.upper()),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def get_logger(name: str = "javac_pipeline") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def default_logger() -> ILogger:
    """
    Structlog logger used by stages that were not handed one explicitly.
    """
    configure_logging()
    return get_logger("javac_pipeline.stages")


def bind(**values: Any) -> None:
    bind_contextvars(**values)


def clear_bindings() -> None:
    clear_contextvars()
