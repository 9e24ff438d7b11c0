"""Scratch directory and self-cleaning handles for generated audio."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
import weakref
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "notifyd-"
_SCRATCH_PATTERN = re.compile(rf"^{re.escape(SCRATCH_PREFIX)}(\d+)-")


def _remove_artifact(path: Path, text: str) -> None:
    logger.info("Removing data for %s: %r", path.name, text)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("Artifact %s was already gone", path)
    except OSError as exc:
        logger.warning("Failed to delete artifact %s: %s", path, exc)


class ScratchDirectory:
    """Process-private directory holding every generated artifact.

    The directory name embeds the owning pid so that a later daemon can
    recognise leftovers from a crashed run (see :func:`sweep_stale_scratch_dirs`).
    """

    def __init__(self, *, parent: str | Path | None = None) -> None:
        self._path = Path(
            tempfile.mkdtemp(prefix=f"{SCRATCH_PREFIX}{os.getpid()}-", dir=parent)
        ).resolve()
        self._finalizer = weakref.finalize(
            self, shutil.rmtree, str(self._path), ignore_errors=True
        )
        logger.debug("Created scratch directory %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def resolve(self, name: str) -> Path | None:
        """Resolve *name* inside the directory; ``None`` if it would escape."""

        if not name:
            return None
        try:
            candidate = (self._path / name).resolve()
        except (OSError, ValueError):
            return None
        if candidate == self._path or not candidate.is_relative_to(self._path):
            return None
        return candidate

    def cleanup(self) -> None:
        if self._finalizer.alive:
            logger.debug("Removing scratch directory %s", self._path)
            self._finalizer()

    def __enter__(self) -> "ScratchDirectory":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()


class SpeechArtifact:
    """Owned handle to one generated audio file.

    The file exists for exactly the lifetime of the handle: :meth:`release`,
    leaving a ``with`` block, or garbage collection deletes it, and the
    deletion runs at most once. Deletion problems are logged, never raised.
    """

    def __init__(self, path: Path, text: str, scratch: ScratchDirectory) -> None:
        self.path = path
        self.text = text
        self.scratch = scratch
        self._finalizer = weakref.finalize(self, _remove_artifact, path, text)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def release(self) -> None:
        self._finalizer()

    def __enter__(self) -> "SpeechArtifact":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"SpeechArtifact({self.path.name!r}, {state})"


def sweep_stale_scratch_dirs(parent: str | Path | None = None) -> int:
    """Remove scratch directories whose owning daemon is no longer running."""

    base = Path(parent or tempfile.gettempdir())
    removed = 0
    try:
        entries = list(base.iterdir())
    except OSError as exc:
        logger.warning("Cannot scan %s for stale scratch directories: %s", base, exc)
        return 0

    for entry in entries:
        match = _SCRATCH_PATTERN.match(entry.name)
        if not match or not entry.is_dir():
            continue
        pid = int(match.group(1))
        if pid == os.getpid() or psutil.pid_exists(pid):
            continue
        try:
            shutil.rmtree(entry)
            removed += 1
            logger.debug("Deleted stale scratch directory %s", entry)
        except OSError as exc:
            logger.warning("Failed to delete %s: %s", entry, exc)

    if removed:
        logger.info("Cleaned up %d stale scratch director(ies)", removed)
    return removed


__all__ = [
    "SCRATCH_PREFIX",
    "ScratchDirectory",
    "SpeechArtifact",
    "sweep_stale_scratch_dirs",
]
