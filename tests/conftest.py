import pytest

from memory.session import MemorySession


class FailingList(list):
    """List whose structural writes fail as if the host ran out of memory."""

    def __setitem__(self, key, value):
        raise MemoryError


@pytest.fixture
def session():
    return MemorySession(100, check=True)


@pytest.fixture
def fragmented():
    """Free holes of 20, 50 and 10 bytes at ascending addresses."""
    s = MemorySession(100, check=True)
    for owner, size in [("x1", 20), ("a", 5), ("x2", 50), ("b", 5), ("x3", 10), ("c", 10)]:
        s.allocate(owner, size, "first")
    for owner in ("x1", "x2", "x3"):
        s.release(owner)
    return s


def layout(session):
    """Compact (start, size, owner) view of a session; owner None for free."""
    return [(b.start, b.size, b.owner) for b in session.snapshot()]
