import random

import pytest

from memory.allocator import BlockHandle, ReleasedBlock
from memory.errors import AllocatorError
from memory.session import MemorySession

from conftest import layout


class TestScenario:
    def test_end_to_end(self):
        s = MemorySession(100, check=True)
        assert s.allocate("P1", 20, "first") == BlockHandle(0, 20, "P1")
        assert s.allocate("P2", 30, "best") == BlockHandle(20, 30, "P2")
        assert layout(s) == [(0, 20, "P1"), (20, 30, "P2"), (50, 50, None)]
        assert s.release("P1") == ReleasedBlock(0, 20, "P1")
        assert layout(s) == [(0, 20, None), (20, 30, "P2"), (50, 50, None)]
        s.compact()
        assert layout(s) == [(0, 30, "P2"), (30, 70, None)]

    @pytest.mark.parametrize("strategy", ["first", "best", "worst"])
    def test_round_trip_restores_enclosing_block(self, fragmented, strategy):
        before = layout(fragmented)
        fragmented.allocate("rt", 7, strategy)
        fragmented.release("rt")
        assert layout(fragmented) == before


class TestStats:
    def test_counts_successes_and_failures(self, session):
        session.allocate("A", 10, "first")
        with pytest.raises(AllocatorError):
            session.allocate("B", 1000, "first")
        session.release("A")
        with pytest.raises(AllocatorError):
            session.release("A")
        session.compact()
        st = session.stats
        assert (st.allocations, st.failed_allocations) == (1, 1)
        assert (st.releases, st.failed_releases) == (1, 1)
        assert st.compactions == 1

    def test_metrics(self, fragmented):
        m = fragmented.metrics()
        assert m.total_free == 80
        assert m.lfe == 50
        assert m.hole_count == 3
        assert m.utilization == pytest.approx(0.2)


class TestRandomOperations:
    @pytest.mark.parametrize("seed", range(5))
    def test_invariants_hold(self, seed):
        rng = random.Random(seed)
        s = MemorySession(512, check=True)
        owners = [f"p{i}" for i in range(12)]
        for _ in range(400):
            op = rng.random()
            before = layout(s)
            try:
                if op < 0.55:
                    s.allocate(rng.choice(owners), rng.randint(1, 96),
                               rng.choice(["first", "best", "worst"]))
                elif op < 0.9:
                    s.release(rng.choice(owners))
                else:
                    allocated = [(b.size, b.owner) for b in s.snapshot() if b.allocated]
                    s.compact()
                    after = [(b.size, b.owner) for b in s.snapshot() if b.allocated]
                    assert after == allocated
                    assert sum(1 for b in s.snapshot() if not b.allocated) <= 1
            except AllocatorError:
                assert layout(s) == before
            assert sum(b.size for b in s.snapshot()) == 512
