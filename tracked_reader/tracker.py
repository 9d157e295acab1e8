"""
Bookkeeping for IO calls made through a tracked stream.
"""

import logging
from typing import List, Optional, Tuple

from .record import OperationRecord, SeekFrom, Whence, error_kind

logger = logging.getLogger(__name__)


class Tracker:
    """
    Append-only log of IO call outcomes, plus the cursor and the stream size
    derived from them.

    The tracker performs no IO itself: the owning reader forwards each call to
    the stream and hands the outcome over here. Not thread-safe.
    """

    def __init__(self, record_seek_errors: bool = False):
        """
        Create an empty tracker.

        Args:
            record_seek_errors: Also log failed seeks as error entries.
                By default only failed reads are logged.
        """
        self._records: List[OperationRecord] = []
        self._pos = 0
        # only known after the first successful end-relative seek
        self._sz: Optional[int] = None
        self.record_seek_errors = record_seek_errors

    def read(self, length: int) -> int:
        """
        Track a successful read of ``length`` bytes at the cursor.

        A zero-length read is logged as well, as it witnesses the end of the
        stream at the current position.

        Returns:
            The same length
        """
        begin = self._pos
        end = begin + length
        self._records.append(OperationRecord.entry(begin, end))
        self._pos = end
        logger.debug(f"Tracked read [{begin}, {end})")
        return length

    def read_error(self, exc: BaseException) -> None:
        """Track a failed read. Cursor and size are left untouched."""
        kind = error_kind(exc)
        self._records.append(OperationRecord.error(kind))
        logger.debug(f"Tracked read error {kind} at position {self._pos}")

    def seek(self, origin: SeekFrom, position: int) -> int:
        """
        Track a successful seek that landed on ``position``.

        An end-relative seek also refreshes the known stream size, replacing
        any earlier value.

        Returns:
            The same position
        """
        self._pos = position
        if origin.whence is Whence.END:
            # sz + offset == pos
            self._sz = position - origin.offset
            logger.debug(f"Stream size inferred as {self._sz} from seek {origin}")
        return position

    def seek_error(self, origin: SeekFrom, exc: BaseException) -> None:
        """Track a failed seek. Logged only when record_seek_errors is set."""
        if self.record_seek_errors:
            self._records.append(OperationRecord.error(error_kind(exc)))
        logger.debug(f"Seek {origin} failed: {exc!r}")

    def pos(self) -> int:
        """Current cursor position."""
        return self._pos

    def sz(self) -> Optional[int]:
        """Last perceived stream size, or None before any end-relative seek."""
        return self._sz

    @property
    def records(self) -> Tuple[OperationRecord, ...]:
        """Snapshot of the log, in call order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Tracker(records={len(self._records)}, pos={self._pos}, sz={self._sz})"

    def view(self) -> 'TrackerView':
        """Read-only handle on this tracker."""
        return TrackerView(self)


class TrackerView:
    """
    Read-only view of a live Tracker: cursor, size and log snapshots, but none
    of the recording methods.
    """

    __slots__ = ('_tracker',)

    def __init__(self, tracker: Tracker):
        self._tracker = tracker

    def pos(self) -> int:
        return self._tracker.pos()

    def sz(self) -> Optional[int]:
        return self._tracker.sz()

    @property
    def records(self) -> Tuple[OperationRecord, ...]:
        return self._tracker.records

    def __len__(self) -> int:
        return len(self._tracker)

    def __repr__(self) -> str:
        return repr(self._tracker)
