"""
Seekable reader wrapper that records every IO call into a tracker.
"""

import io
import logging
from typing import BinaryIO, Optional

from .record import SeekFrom
from .report import DEFAULT_CHUNK, Report
from .tracker import Tracker, TrackerView

logger = logging.getLogger(__name__)


class TrackedReader:
    """
    A pass-through reader that tracks which byte ranges were accessed.

    Every read and seek is forwarded to the wrapped stream and its outcome is
    logged into a Tracker before being handed back to the caller unchanged.
    Errors are recorded and re-raised as-is; nothing is retried or buffered.
    """

    def __init__(self, stream: BinaryIO, record_seek_errors: bool = False):
        """
        Initialize a TrackedReader. This rewinds the passed-in stream.

        Args:
            stream: Readable, seekable binary stream; the reader takes
                ownership of it
            record_seek_errors: Also log failed seeks as error entries

        Raises:
            Whatever the stream raises when rewound
        """
        stream.seek(0)
        self._stream = stream
        self._tracker = Tracker(record_seek_errors=record_seek_errors)

    @property
    def tracker(self) -> TrackerView:
        """
        Read-only view of the tracker, for reporting.

        Only the reader records into its tracker; the view exposes pos(),
        sz() and records.
        """
        return self._tracker.view()

    def report(self, chunk: int = DEFAULT_CHUNK) -> Report:
        """Build a report from the current state of the tracker."""
        return Report.create(self._tracker, chunk)

    def readinto(self, buffer) -> Optional[int]:
        """
        Read into a caller-provided buffer.

        Returns:
            Number of bytes read (0 at end of stream), or None if a
            non-blocking stream had no data available
        """
        try:
            n = self._stream.readinto(buffer)
        except Exception as e:
            self._tracker.read_error(e)
            raise
        if n is None:
            self._tracker.read_error(BlockingIOError())
            return None
        return self._tracker.read(n)

    def read(self, size: int = -1) -> Optional[bytes]:
        """
        Read up to size bytes, or until end of stream if size is negative.

        Returns:
            Bytes read (empty at end of stream), or None if a non-blocking
            stream had no data available
        """
        try:
            data = self._stream.read(size)
        except Exception as e:
            self._tracker.read_error(e)
            raise
        if data is None:
            self._tracker.read_error(BlockingIOError())
            return None
        self._tracker.read(len(data))
        return data

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Change the stream position.

        A whence other than io.SEEK_SET/SEEK_CUR/SEEK_END raises ValueError
        before the stream is reached; such argument errors are never tracked.

        Returns:
            The new absolute position
        """
        return self.seek_from(SeekFrom.from_whence(offset, whence))

    def seek_from(self, origin: SeekFrom) -> int:
        """Change the stream position to ``origin``."""
        try:
            pos = self._stream.seek(origin.offset, int(origin.whence))
        except Exception as e:
            self._tracker.seek_error(origin, e)
            raise
        return self._tracker.seek(origin, pos)

    def tell(self) -> int:
        """Current stream position, queried as a tracked zero-length seek."""
        return self.seek(0, io.SEEK_CUR)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def close(self) -> None:
        """Close the wrapped stream."""
        self._stream.close()

    def __enter__(self) -> 'TrackedReader':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"TrackedReader({self._stream!r}, {self._tracker!r})"
