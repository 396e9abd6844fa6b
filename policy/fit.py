from __future__ import annotations
from enum import Enum
from typing import Callable, Dict, Optional

from memory.blocks import BlockList
from memory.errors import InvalidStrategy


class Strategy(Enum):
    FIRST = "first"
    BEST = "best"
    WORST = "worst"


# single-letter tags used by the RQ command
TAGS = {"F": Strategy.FIRST, "B": Strategy.BEST, "W": Strategy.WORST}


def parse_strategy(tag) -> Strategy:
    if isinstance(tag, Strategy):
        return tag
    if isinstance(tag, str):
        if tag in TAGS:
            return TAGS[tag]
        try:
            return Strategy(tag)
        except ValueError:
            pass
    raise InvalidStrategy(tag)


def first_fit(blocks: BlockList, request: int) -> Optional[int]:
    for i, b in blocks.free_blocks():
        if b.size >= request:
            return i
    return None


def best_fit(blocks: BlockList, request: int) -> Optional[int]:
    best, best_diff = None, None
    for i, b in blocks.free_blocks():
        if b.size >= request:
            diff = b.size - request
            # strict < keeps the lowest address on ties
            if best_diff is None or diff < best_diff:
                best, best_diff = i, diff
    return best


def worst_fit(blocks: BlockList, request: int) -> Optional[int]:
    worst, worst_size = None, -1
    for i, b in blocks.free_blocks():
        if b.size >= request and b.size > worst_size:
            worst, worst_size = i, b.size
    return worst


SELECTORS: Dict[Strategy, Callable[[BlockList, int], Optional[int]]] = {
    Strategy.FIRST: first_fit,
    Strategy.BEST: best_fit,
    Strategy.WORST: worst_fit,
}


def select(strategy: Strategy, blocks: BlockList, request: int) -> Optional[int]:
    """Index of the free block `strategy` picks for `request` bytes, or None."""
    return SELECTORS[strategy](blocks, request)
