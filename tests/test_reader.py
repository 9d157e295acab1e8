import errno
import io
from unittest.mock import Mock

import pytest

from tracked_reader import OperationRecord, Report, SeekFrom, TrackedReader


class TestConstruction:

    def test_rewinds_stream(self, data):
        stream = io.BytesIO(data)
        stream.seek(50)
        r = TrackedReader(stream)
        assert stream.tell() == 0
        assert r.tracker.pos() == 0
        assert len(r.tracker) == 0

    def test_rewind_failure_propagates(self):
        stream = Mock()
        stream.seek.side_effect = OSError(errno.ESPIPE, "Illegal seek")
        with pytest.raises(OSError) as exc_info:
            TrackedReader(stream)
        assert exc_info.value.errno == errno.ESPIPE


class TestPassThrough:

    def test_readinto(self, reader, data):
        buf = bytearray(8)
        assert reader.readinto(buf) == 8
        assert bytes(buf) == data[:8]
        assert reader.tracker.pos() == 8
        assert reader.tracker.records == (OperationRecord.entry(0, 8),)

    def test_read(self, reader, data):
        assert reader.read(4) == data[:4]
        assert reader.read() == data[4:]
        assert reader.read() == b""
        assert reader.tracker.records == (
            OperationRecord.entry(0, 4),
            OperationRecord.entry(4, 100),
            OperationRecord.entry(100, 100),
        )

    def test_short_read_at_end(self, reader):
        reader.seek(95)
        assert len(reader.read(10)) == 5
        assert reader.tracker.pos() == 100

    def test_seek_returns_stream_position(self, reader):
        assert reader.seek(14) == 14
        assert reader.seek(-2, io.SEEK_CUR) == 12
        assert reader.seek_from(SeekFrom.end(-10)) == 90
        assert reader.tracker.pos() == 90
        assert reader.tracker.sz() == 100

    def test_tell_is_tracked_seek(self, reader):
        reader.read(3)
        assert reader.tell() == 3
        assert reader.tracker.pos() == 3
        assert reader.tracker.sz() is None

    def test_report(self, reader):
        reader.read(10)
        assert reader.report().serialize()["io_operations"] == {0: 1}
        assert isinstance(reader.report(4), Report)
        assert reader.report(4).chunks() == [0, 4, 8]


class TestErrors:

    def make_reader(self, **kwargs):
        stream = Mock()
        stream.seek.return_value = 0
        return stream, TrackedReader(stream, **kwargs)

    def test_read_error_recorded_and_reraised(self):
        stream, r = self.make_reader()
        err = OSError(errno.EIO, "Input/output error")
        stream.readinto.side_effect = err
        with pytest.raises(OSError) as exc_info:
            r.readinto(bytearray(4))
        assert exc_info.value is err
        assert r.tracker.records == (OperationRecord.error("EIO"),)
        assert r.tracker.pos() == 0

    def test_read_error_keeps_cursor(self):
        stream, r = self.make_reader()
        stream.read.side_effect = [b"abcd", ValueError("I/O operation on closed file.")]
        r.read(4)
        with pytest.raises(ValueError):
            r.read(4)
        assert r.tracker.pos() == 4
        assert len(r.tracker) == 2

    def test_seek_error_reraised_not_recorded(self):
        stream, r = self.make_reader()
        stream.seek.side_effect = OSError(errno.EINVAL, "Invalid argument")
        with pytest.raises(OSError):
            r.seek(-5, io.SEEK_END)
        assert r.tracker.sz() is None
        assert len(r.tracker) == 0

    def test_seek_error_recorded_when_enabled(self):
        stream, r = self.make_reader(record_seek_errors=True)
        stream.seek.side_effect = OSError(errno.EINVAL, "Invalid argument")
        with pytest.raises(OSError):
            r.seek(3)
        assert r.tracker.records == (OperationRecord.error("EINVAL"),)
        assert r.tracker.pos() == 0

    def test_would_block(self):
        stream, r = self.make_reader()
        stream.readinto.return_value = None
        assert r.readinto(bytearray(4)) is None
        assert r.tracker.records == (OperationRecord.error("BlockingIOError"),)

    def test_bad_whence_never_reaches_stream(self):
        stream, r = self.make_reader(record_seek_errors=True)
        stream.seek.reset_mock()
        with pytest.raises(ValueError):
            r.seek(0, 7)
        stream.seek.assert_not_called()
        assert len(r.tracker) == 0


class TestOwnership:

    def test_close_closes_stream(self, data):
        stream = io.BytesIO(data)
        r = TrackedReader(stream)
        r.close()
        assert stream.closed
        assert r.closed

    def test_context_manager(self, data):
        stream = io.BytesIO(data)
        with TrackedReader(stream) as r:
            r.read(1)
        assert stream.closed


class TestWalkThrough:

    def test_head_field_and_tail(self, reader, data):
        L, p, k = len(data), 14, 10

        assert reader.read(8) == data[:8]
        assert reader.tracker.pos() == 8
        assert reader.report().chunks() == [0]

        assert reader.seek(p) == p
        assert reader.read(2) == data[p:p + 2]
        assert reader.tracker.pos() == p + 2

        assert reader.seek(-2, io.SEEK_CUR) == p
        assert reader.tracker.sz() is None

        assert reader.seek(-k, io.SEEK_END) == L - k
        assert reader.tracker.sz() == L

        assert reader.read(k) == data[L - k:]
        t = reader.tracker
        assert t.pos() == L
        assert t.pos() == t.sz()

        assert reader.report(4).serialize() == {
            "metadata": {"current_position": 100, "estimated_size": 100},
            "io_operations": {0: 1, 4: 1, 12: 1, 88: 1, 92: 1, 96: 1},
            "io_errors": {},
        }


class TestTrackerView:

    def test_view_is_read_only(self, reader):
        view = reader.tracker
        for name in ("read", "read_error", "seek", "seek_error"):
            assert not hasattr(view, name)
        with pytest.raises(AttributeError):
            view._pos = 5

    def test_view_follows_reader(self, reader):
        view = reader.tracker
        reader.seek(-10, io.SEEK_END)
        reader.read(4)
        assert view.pos() == 94
        assert view.sz() == 100
        assert view.records == (OperationRecord.entry(90, 94),)
        assert Report.create(view).serialize() == reader.report().serialize()
