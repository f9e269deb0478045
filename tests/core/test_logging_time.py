from __future__ import annotations

from datetime import datetime

from javac_pipeline.core.logging import prefix_tool_output
from javac_pipeline.core.time import utc_now_iso


def test_tool_line_is_prefixed_with_tool_and_stream() -> None:
    out = prefix_tool_output(
        None, "info", {"event": "Foo.java:3: error", "tool": "javac", "stream": "stderr", "run_id": "r"}
    )
    assert out == {"event": "[javac:stderr] Foo.java:3: error", "run_id": "r"}


def test_non_tool_events_pass_through() -> None:
    event = {"event": "Stage succeeded", "tool": "javac"}
    assert prefix_tool_output(None, "info", dict(event)) == event


def test_utc_now_iso_is_zulu() -> None:
    stamp = utc_now_iso()
    assert stamp.endswith("Z")
    assert datetime.fromisoformat(stamp[:-1]).year >= 2024
