"""Resolve the output sink for a report: a file path or a binary stream."""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

STDOUT_MARKERS = {"", "-"}


def is_stdout(path: str | Path | None) -> bool:
    """Return True when *path* designates standard output."""
    return path is None or str(path) in STDOUT_MARKERS


def _report_mode(target: Path) -> int:
    """Return the existing mode of *target*, or 0666 minus the umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@contextmanager
def open_output(
    path: str | Path | None,
    *,
    stream: IO[bytes] | None = None,
) -> Iterator[IO[bytes]]:
    """Open the report sink for binary writing.

    File targets are written to a temporary sibling that replaces the
    target only once the block exits cleanly, so a failed write never
    leaves a truncated report behind.

    Args:
        path: Output file, or None / ``""`` / ``"-"`` for *stream*.
        stream: Stream used for standard output (default ``sys.stdout``).
    """
    if is_stdout(path):
        sink = stream if stream is not None else sys.stdout.buffer
        yield sink
        sink.flush()
        return

    target = Path(str(path))
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
        # mkstemp creates 0600; give the report the mode a plain open() would.
        os.chmod(tmp_name, _report_mode(target))
        os.replace(tmp_name, target)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
    logger.debug("Replaced %s", target)
