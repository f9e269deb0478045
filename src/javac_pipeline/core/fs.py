import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterator


def ensure_parent(path: Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def safe_unlink(path: os.PathLike[str] | str) -> None:
    try:
        Path(path).unlink(missing_ok=True)
    except OSError:
        return


def relpath_posix(path: Path, base_dir: Path) -> str:
    return Path(path).relative_to(base_dir).as_posix()


def make_tmp_dir(prefix: str) -> Path:
    """
    Create a fresh, exclusively owned temp directory.
    """
    return Path(tempfile.mkdtemp(prefix=f"javac_pipeline.{prefix}."))


def remove_tree(path: Path) -> None:
    """
    Best-effort recursive removal; temp leakage is acceptable, a crash in
    cleanup is not.
    """
    shutil.rmtree(path, ignore_errors=True)


def walk_files(root: Path) -> Iterator[Path]:
    """
    Yield every regular file below `root`, depth first, in sorted order.
    """
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            p = Path(dirpath) / name
            if p.is_file():
                yield p


def write_lines(path: Path, lines: list[str], *, encoding: str = "utf-8") -> None:
    """
    Write newline-terminated lines, fsync'd so a child process sees them.
    """
    with Path(path).open("w", encoding=encoding, newline="\n") as f:
        for line in lines:
            f.write(line)
            f.write("\n")
        f.flush()
        os.fsync(f.fileno())


def copy_or_hardlink(src: Path, dst: Path) -> None:
    """
    Prefer hardlink (O(1), no extra disk), fallback to copy2. An existing
    destination is replaced.
    """
    src = Path(src)
    dst = Path(dst)
    ensure_parent(dst)
    safe_unlink(dst)
    try:
        os.link(src, dst)
    except OSError:
        shutil.copy2(src, dst)
