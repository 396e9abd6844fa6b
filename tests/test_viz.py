from memory.blocks import BlockDescriptor
from memory.fragmentation import compute_metrics
from viz.ascii_map import render_map
from viz.status import render_status


def test_status_single_free_block():
    snap = (BlockDescriptor(0, 64, False, None),)
    assert render_status(snap, 64) == [
        "Memory Status:",
        "Address [0 - 63] Size: 64 bytes, Status: Free",
        "Total memory: 64 bytes",
    ]


def test_map_marks_owner_initials():
    snap = (BlockDescriptor(0, 25, True, "alpha"),
            BlockDescriptor(25, 50, False, None),
            BlockDescriptor(75, 25, True, "beta"))
    assert render_map(snap, 100, width=8) == "AA....BB"


def test_map_gives_tiny_blocks_a_cell():
    snap = (BlockDescriptor(0, 1, True, "x"), BlockDescriptor(1, 999, False, None))
    assert render_map(snap, 1000, width=10) == "X" + "." * 9


class TestMetrics:
    def test_no_free_space(self):
        m = compute_metrics([], total_size=10)
        assert (m.total_free, m.lfe, m.hole_count) == (0, 0, 0)
        assert m.external_frag == 0.0 and m.entropy == 0.0
        assert m.utilization == 1.0

    def test_single_hole(self):
        m = compute_metrics([(10, 90)])
        assert m.external_frag == 0.0
        assert m.entropy == 0.0
        assert m.utilization is None

    def test_equal_holes(self):
        m = compute_metrics([(0, 10), (20, 10)], total_size=40)
        assert m.external_frag == 0.5
        assert m.entropy == 1.0
        assert m.utilization == 0.5
        assert "LFE=10 holes=2" in m.summary()
