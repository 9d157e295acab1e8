import io
import pytest

from tracked_reader import TrackedReader


@pytest.fixture
def data():
    return bytes(range(100))


@pytest.fixture
def reader(data):
    return TrackedReader(io.BytesIO(data))
