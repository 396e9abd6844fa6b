from __future__ import annotations
import logging

from memory.blocks import BlockList

logger = logging.getLogger(__name__)


class Compactor:
    def __init__(self, blocks: BlockList):
        self.blocks = blocks

    def compact(self) -> int:
        """Slide every allocated block to the front, keeping their order.

        Returns the number of bytes whose address changed.
        """
        live = self.blocks.allocated_blocks()
        moved = 0
        cursor = 0
        for b in live:
            if b.start != cursor:
                moved += b.size
            cursor += b.size
        self.blocks.rebuild(live)
        logger.debug("compacted %d block(s), moved %d bytes", len(live), moved)
        return moved
