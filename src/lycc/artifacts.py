"""
Artifact writing.

Artifacts are fully rendered before anything is written. Every file of a
run is first written to a temporary sibling; only once all of them are on
disk are they moved into place, so a failed run never leaves a truncated
artifact, nor a mix of new and stale artifacts, behind.
"""

from pathlib import Path
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


def _stage(path: Path, text: str) -> str:
    """Write text to a temporary file next to path and return its name."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return tmp_name


def write_artifact(path, text: str) -> None:
    """Atomically replace path with text."""
    write_artifacts({path: text})


def write_artifacts(artifacts: dict) -> None:
    """
    Write a {path: text} mapping.

    All temporary files are staged before the first one replaces its
    target. If staging fails, no target is touched.
    """
    staged: list[tuple[str, Path, int]] = []
    try:
        for path, text in artifacts.items():
            path = Path(path)
            staged.append((_stage(path, text), path, len(text)))
    except BaseException:
        for tmp_name, _, _ in staged:
            Path(tmp_name).unlink(missing_ok=True)
        raise

    for index, (tmp_name, path, size) in enumerate(staged):
        try:
            os.replace(tmp_name, path)
        except BaseException:
            for leftover, _, _ in staged[index:]:
                Path(leftover).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", size, path)
