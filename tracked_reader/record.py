"""
Log entry and seek origin types for tracked streams.
"""

import errno
import io
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class RecordKind(Enum):
    """Discriminator of an OperationRecord."""
    ENTRY = "entry"
    ERROR = "error"


@dataclass(frozen=True)
class OperationRecord:
    """
    A single tracker entry: either a successful IO operation over the
    half-open byte range ``span``, or a failure with its error kind.

    Only the field matching ``kind`` is set; use the ``entry`` and
    ``error`` constructors rather than building records by hand.
    """

    kind: RecordKind
    span: Optional[range] = None
    error_kind: Optional[str] = None

    @classmethod
    def entry(cls, start: int, end: int) -> 'OperationRecord':
        """Record a successful operation over [start, end)."""
        return cls(RecordKind.ENTRY, span=range(start, end))

    @classmethod
    def error(cls, kind: str) -> 'OperationRecord':
        """Record a failed operation."""
        return cls(RecordKind.ERROR, error_kind=kind)

    @property
    def ok(self) -> bool:
        return self.kind is RecordKind.ENTRY

    def __str__(self) -> str:
        if self.ok:
            return f"[{self.span.start}, {self.span.stop})"
        return f"error({self.error_kind})"


class Whence(IntEnum):
    """Seek origins, numerically equal to io.SEEK_*."""
    START = io.SEEK_SET
    CURRENT = io.SEEK_CUR
    END = io.SEEK_END


@dataclass(frozen=True)
class SeekFrom:
    """
    Origin of a seek call.

    ``START`` offsets are absolute and non-negative; ``CURRENT`` and ``END``
    offsets are signed.
    """

    whence: Whence
    offset: int

    @classmethod
    def start(cls, offset: int) -> 'SeekFrom':
        if offset < 0:
            raise ValueError(f"Absolute seek offset must be non-negative, got {offset}")
        return cls(Whence.START, offset)

    @classmethod
    def current(cls, offset: int) -> 'SeekFrom':
        return cls(Whence.CURRENT, offset)

    @classmethod
    def end(cls, offset: int) -> 'SeekFrom':
        return cls(Whence.END, offset)

    @classmethod
    def from_whence(cls, offset: int, whence: int = io.SEEK_SET) -> 'SeekFrom':
        """
        Build an origin from the ``seek(offset, whence)`` calling convention.

        Raises:
            ValueError: If whence is not one of io.SEEK_SET/SEEK_CUR/SEEK_END
        """
        try:
            w = Whence(whence)
        except ValueError:
            raise ValueError(f"Invalid whence ({whence}, should be 0, 1 or 2)") from None
        # negative absolute offsets are left for the stream to reject
        return cls(w, offset)

    def __str__(self) -> str:
        return f"{self.whence.name.capitalize()}({self.offset})"


def error_kind(exc: BaseException) -> str:
    """
    Classify an exception into an opaque error-kind label.

    OSErrors carrying an errno are labelled with its symbolic name
    (e.g. ``EIO``); anything else by its class name.
    """
    if isinstance(exc, OSError) and exc.errno is not None:
        name = errno.errorcode.get(exc.errno)
        if name:
            return name
    return type(exc).__name__
