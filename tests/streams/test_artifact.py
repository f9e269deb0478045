from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from javac_pipeline.core import ArtifactError
from javac_pipeline.streams import Artifact


def test_relative_is_path_minus_base(tmp_path: Path) -> None:
    a = Artifact.from_path(tmp_path / "pkg" / "A.class", tmp_path)
    assert a.base == tmp_path
    assert a.relative == "pkg/A.class"
    assert a.path == tmp_path / "pkg" / "A.class"


def test_default_base_is_parent(tmp_path: Path) -> None:
    a = Artifact.from_path(tmp_path / "lib.jar")
    assert a.base == tmp_path
    assert a.relative == "lib.jar"


def test_path_outside_base_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ArtifactError):
        Artifact.from_path(tmp_path / "x" / "A.java", tmp_path / "y")
    with pytest.raises(ArtifactError):
        Artifact.from_path(tmp_path, tmp_path)


def test_artifact_is_immutable(tmp_path: Path) -> None:
    a = Artifact.from_path(tmp_path / "A.java", tmp_path)
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.relative = "B.java"  # type: ignore[misc]
