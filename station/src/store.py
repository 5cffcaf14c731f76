"""
Append-only flat-file log store for station readings.

The store owns one text file holding one encoded reading per line. Lines are
never rewritten or reordered: corrections are new lines.

Operations:
- append(line): Write ``line + "\\n"`` under an exclusive ``flock`` held only
  for that single write, then fsync.
- read_last(limit): Return up to *limit* most recent valid readings,
  newest-first. Reads backward from the end of the file in fixed-size
  chunks and stops as soon as enough rows are decoded. Falls back to a full
  read when backward seeking is unavailable.

Readers never take the lock. Only newline-terminated lines are considered,
so a line that is still being written is invisible to a concurrent reader
rather than returned half-complete. Both read strategies share this rule
and therefore return identical rows for the same file contents.

A missing, unreadable or empty file reads as zero rows, never as an error.

CHANGELOG:
- 2026-10-15: Ignore unterminated trailing fragment on both read paths
- 2026-10-13: Add chunked backward reader with full-scan fallback
- 2026-10-11: Initial creation

TODO:
- None
"""

from __future__ import annotations

import fcntl
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from station.src.codec import LineCodec, Reading

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 8192

STRATEGY_BACKWARD = "backward"
STRATEGY_FULL_SCAN = "full_scan"
STRATEGY_MISSING = "missing"
STRATEGY_UNREADABLE = "unreadable"


class LogWriteError(RuntimeError):
    """Raised when a line could not be durably appended to the log."""


@dataclass(slots=True)
class RowWindow:
    """Newest-first readings returned by :meth:`LogStore.read_last`.

    Attributes:
        rows: Decoded readings, newest first.
        skipped: Number of non-blank lines examined that failed to decode.
        strategy: How the rows were obtained (``backward``, ``full_scan``,
            ``missing`` or ``unreadable``).
    """

    rows: list[Reading] = field(default_factory=list)
    skipped: int = 0
    strategy: str = STRATEGY_BACKWARD

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self.rows)


def _iter_lines_backward(fh: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    """Yield newline-terminated lines of *fh* from last to first.

    Bytes after the final newline (a line still being written) are never
    yielded. Memory use is bounded by the longest line plus one chunk.
    """
    fh.seek(0, os.SEEK_END)
    position = fh.tell()
    buffer = b""
    seen_newline = False

    while position > 0:
        size = min(chunk_size, position)
        position -= size
        fh.seek(position)
        buffer = fh.read(size) + buffer
        parts = buffer.split(b"\n")
        if not seen_newline:
            if len(parts) == 1:
                continue
            # Drop the unterminated tail after the last newline.
            parts.pop()
            seen_newline = True
        buffer = parts[0]
        for line in reversed(parts[1:]):
            yield line

    if seen_newline:
        yield buffer


class LogStore:
    """Flat append-only log file of encoded readings.

    Args:
        path: Filesystem path of the log file. Accepts ``str`` or
            ``pathlib.Path``.
        codec: Codec used to decode lines on read.
        chunk_size: Bytes read per backward step.

    Usage::

        store = LogStore("/data/sensor_log.txt", LineCodec())
        store.append(codec.encode(reading))
        window = store.read_last(10)
    """

    def __init__(
        self,
        path: str | Path,
        codec: LineCodec,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        self._path = Path(path)
        self._codec = codec
        self._chunk_size = chunk_size

    @property
    def path(self) -> Path:
        """Filesystem path of the log file."""
        return self._path

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def append(self, line: str) -> None:
        """Append one encoded line durably.

        The exclusive lock is held only around the single write, flush and
        fsync of this line so concurrent appenders never interleave.

        Args:
            line: Encoded log line without a trailing newline.

        Raises:
            ValueError: If *line* contains a newline.
            LogWriteError: If the file cannot be opened, locked or written.
        """
        if "\n" in line or "\r" in line:
            raise ValueError("Log line must not contain newline characters")

        data = (line + "\n").encode("utf-8")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("ab") as fh:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
                try:
                    fh.write(data)
                    fh.flush()
                    os.fsync(fh.fileno())
                finally:
                    fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        except OSError as exc:
            logger.error("Failed to append to log %s", self._path, exc_info=True)
            raise LogWriteError(f"Failed to write to log file: {exc}") from exc

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_last(self, limit: int) -> RowWindow:
        """Return up to *limit* most recent valid readings, newest-first.

        Blank lines and lines that fail to decode are skipped and do not
        count toward *limit*. Never raises for a missing or unreadable log.
        """
        if not self._path.is_file():
            return RowWindow(strategy=STRATEGY_MISSING)
        if limit < 1:
            return RowWindow()

        try:
            return self._read_backward(limit)
        except (OSError, ValueError):
            logger.warning(
                "Backward read of %s failed, falling back to full scan",
                self._path,
                exc_info=True,
            )

        try:
            return self._read_full_scan(limit)
        except OSError:
            logger.warning("Log %s is unreadable", self._path, exc_info=True)
            return RowWindow(strategy=STRATEGY_UNREADABLE)

    def _read_backward(self, limit: int) -> RowWindow:
        """Fast path: walk the file backward chunk by chunk."""
        with self._path.open("rb") as fh:
            return self._collect(
                _iter_lines_backward(fh, self._chunk_size),
                limit,
                STRATEGY_BACKWARD,
            )

    def _read_full_scan(self, limit: int) -> RowWindow:
        """Fallback: read the whole file, then walk its lines in reverse."""
        parts = self._path.read_bytes().split(b"\n")
        # Last element is the unterminated tail (b"" for a well-formed file).
        parts.pop()
        return self._collect(reversed(parts), limit, STRATEGY_FULL_SCAN)

    def _collect(self, lines: Iterator[bytes], limit: int, strategy: str) -> RowWindow:
        window = RowWindow(strategy=strategy)
        for raw in lines:
            text = raw.decode("utf-8", errors="replace")
            if not text.strip():
                continue
            reading = self._codec.decode(text)
            if reading is None:
                window.skipped += 1
                continue
            window.rows.append(reading)
            if len(window.rows) >= limit:
                break

        logger.debug(
            "Read %d rows from %s (strategy=%s, skipped=%d)",
            len(window.rows),
            self._path,
            strategy,
            window.skipped,
        )
        return window
