from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from javac_pipeline.core import ILogger
from javac_pipeline.streams import Artifact
from tests.helpers import FakeJar, FakeJavac, write_java


@pytest.fixture
def logger() -> ILogger:
    return structlog.get_logger("tests")


@pytest.fixture
def fake_javac() -> FakeJavac:
    return FakeJavac()


@pytest.fixture
def fake_jar() -> FakeJar:
    return FakeJar()


@pytest.fixture
def sources(tmp_path: Path) -> list[Artifact]:
    root = tmp_path / "src"
    return [
        write_java(root, "test_package/TestClass.java"),
        write_java(root, "test_package/Helper.java"),
        write_java(root, "other/Util.java", package="other"),
    ]
