import pytest

from memory.blocks import BlockList
from memory.errors import InvalidStrategy
from policy.fit import Strategy, best_fit, first_fit, parse_strategy, select, worst_fit


class TestParseStrategy:
    @pytest.mark.parametrize("tag,expected", [
        ("F", Strategy.FIRST), ("B", Strategy.BEST), ("W", Strategy.WORST),
        ("first", Strategy.FIRST), ("best", Strategy.BEST), ("worst", Strategy.WORST),
        (Strategy.BEST, Strategy.BEST),
    ])
    def test_known_tags(self, tag, expected):
        assert parse_strategy(tag) is expected

    @pytest.mark.parametrize("tag", ["X", "f", "next", "", None, 1])
    def test_unknown_tags(self, tag):
        with pytest.raises(InvalidStrategy):
            parse_strategy(tag)


class TestSelectors:
    def test_pick_per_strategy(self, fragmented):
        blocks = fragmented.blocks
        assert blocks[first_fit(blocks, 10)].size == 20
        assert blocks[best_fit(blocks, 10)].size == 10
        assert blocks[worst_fit(blocks, 10)].size == 50

    def test_none_when_nothing_fits(self, fragmented):
        for strategy in Strategy:
            assert select(strategy, fragmented.blocks, 51) is None

    def test_ties_go_to_lowest_address(self):
        bl = BlockList(30)
        bl.split_at(0, 10)
        bl.split_at(1, 10)
        bl.mark_allocated(1, "mid")
        # free [0,10) and [20,30), same size
        assert best_fit(bl, 10) == 0
        assert worst_fit(bl, 5) == 0
        assert first_fit(bl, 5) == 0

    def test_skips_allocated_blocks(self):
        bl = BlockList(100)
        bl.split_at(0, 60)
        bl.mark_allocated(0, "big")
        assert first_fit(bl, 10) == 1
        assert worst_fit(bl, 40) == 1
        assert best_fit(bl, 41) is None
