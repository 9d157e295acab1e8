"""tracked_reader - Track which byte ranges of a seekable stream get accessed."""

from .record import OperationRecord, RecordKind, SeekFrom, Whence, error_kind
from .tracker import Tracker, TrackerView
from .report import DEFAULT_CHUNK, Report
from .reader import TrackedReader
from .sources import open_source

__all__ = [
    'OperationRecord', 'RecordKind', 'SeekFrom', 'Whence', 'error_kind',
    'Tracker', 'TrackerView', 'Report', 'DEFAULT_CHUNK', 'TrackedReader', 'open_source',
]

# GCS integration (optional, requires google-cloud-storage)
try:
    from .gcs import GCSSource
    __all__.append('GCSSource')
except ImportError:
    pass

__version__ = "0.1.0"
