from __future__ import annotations
import logging
from dataclasses import dataclass

from memory.blocks import BlockList, validate_owner
from memory.errors import AllocationMetadataFailure, InvalidRequest, NotFound, OutOfMemory
from policy.fit import parse_strategy, select

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockHandle:
    start: int
    size: int
    owner: str


@dataclass(frozen=True)
class ReleasedBlock:
    start: int
    size: int
    owner: str


class Allocator:
    def __init__(self, blocks: BlockList):
        self.blocks = blocks

    def allocate(self, owner: str, size: int, strategy) -> BlockHandle:
        strat = parse_strategy(strategy)
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise InvalidRequest(f"Invalid allocation size {size!r}")
        validate_owner(owner)

        index = select(strat, self.blocks, size)
        if index is None:
            raise OutOfMemory(owner, size)
        candidate = self.blocks[index]
        logger.debug("%s-fit picked [%d,%d) for %s/%d",
                     strat.value, candidate.start, candidate.end, owner, size)

        if candidate.size > size:
            # remainder stays free right after the allocated head
            self.blocks.split_at(index, size)
        block = self.blocks.mark_allocated(index, owner)
        return BlockHandle(block.start, block.size, owner)


class Deallocator:
    def __init__(self, blocks: BlockList):
        self.blocks = blocks

    def release(self, owner: str) -> ReleasedBlock:
        """Free the lowest-addressed block held by `owner` and merge free neighbours."""
        for i, b in enumerate(self.blocks):
            if b.allocated and b.owner == owner:
                released = ReleasedBlock(b.start, b.size, owner)
                self.blocks.mark_free(i)
                try:
                    merged = self.blocks.coalesce_around(i)
                except AllocationMetadataFailure:
                    self.blocks.mark_allocated(i, owner)
                    raise
                logger.debug("released %s [%d,%d), free run now [%d,%d)",
                             owner, released.start, released.start + released.size,
                             merged.start, merged.end)
                return released
        raise NotFound(owner)
