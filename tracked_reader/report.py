"""
Chunk-bucketed summaries of a tracker's log.
"""

import json
import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .record import RecordKind
from .tracker import Tracker, TrackerView

logger = logging.getLogger(__name__)


DEFAULT_CHUNK = 64


class Report:
    """
    Point-in-time summary of a tracker.

    Successful operations are bucketed by the ``chunk``-aligned windows they
    overlap; a range spanning several windows is counted under each of them.
    Failed operations are counted per error kind. The report keeps no
    reference to the tracker it was built from.
    """

    def __init__(
        self,
        ops: Dict[int, Counter],
        errs: Counter,
        meta: Tuple[int, Optional[int]],
        chunk: int = DEFAULT_CHUNK
    ):
        self.chunk = chunk
        # chunk start -> Counter of ranges touching it
        self._ops = ops
        # error kind -> occurrences
        self._errs = errs
        # cursor and perceived stream size at snapshot time
        self._meta = meta

    @classmethod
    def create(cls, tracker: Union[Tracker, TrackerView], chunk: int = DEFAULT_CHUNK) -> 'Report':
        """
        Create a report from an existing tracker.

        Args:
            tracker: Source tracker or a view of one; only read from
            chunk: Bucket size in bytes, a positive integer

        Raises:
            ValueError: If chunk is not a positive integer
        """
        if isinstance(chunk, bool) or not isinstance(chunk, int) or chunk <= 0:
            raise ValueError(f"Chunk size must be a positive integer, got {chunk!r}")

        records = tracker.records
        ops: Dict[int, Counter] = {}
        errs: Counter = Counter()

        for rec in records:
            if rec.kind is RecordKind.ERROR:
                errs[rec.error_kind] += 1
            else:
                cls._record_op(ops, rec.span, chunk)

        logger.debug(f"Built report over {len(records)} records, {len(ops)} chunks touched")
        return cls(ops, errs, (tracker.pos(), tracker.sz()), chunk)

    @staticmethod
    def _record_op(ops: Dict[int, Counter], span: range, chunk: int) -> None:
        """Record a single IO operation under every chunk it overlaps."""
        # start: floor to a multiple; end: ceil to a multiple
        start = span.start // chunk * chunk
        end = -(-span.stop // chunk) * chunk
        for bucket in range(start, end, chunk):
            ops.setdefault(bucket, Counter())[span] += 1

    @property
    def position(self) -> int:
        return self._meta[0]

    @property
    def estimated_size(self) -> Optional[int]:
        return self._meta[1]

    def chunks(self) -> List[int]:
        """Start offsets of every chunk touched by a successful operation."""
        return sorted(self._ops)

    def ranges(self, chunk: int) -> Dict[range, int]:
        """Ranges recorded under the chunk starting at ``chunk``, with counts."""
        return dict(self._ops.get(chunk, {}))

    def errors(self) -> Dict[str, int]:
        """Failed operations counted per error kind."""
        return dict(self._errs)

    def serialize(self) -> Dict[str, Any]:
        """Dump into plain containers, ready for YAML or JSON encoding."""
        pos, sz = self._meta
        return {
            "metadata": {
                "current_position": pos,
                "estimated_size": sz,
            },
            "io_operations": {
                bucket: sum(self._ops[bucket].values()) for bucket in sorted(self._ops)
            },
            "io_errors": dict(self._errs),
        }

    def render(self) -> str:
        """Human-readable YAML rendering of serialize()."""
        return yaml.safe_dump(self.serialize(), sort_keys=False, default_flow_style=False)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """JSON rendering of serialize(); chunk keys become strings."""
        return json.dumps(self.serialize(), indent=indent)

    def __str__(self) -> str:
        return self.render()
