from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple

from memory.allocator import Allocator, BlockHandle, Deallocator, ReleasedBlock
from memory.blocks import BlockDescriptor, BlockList
from memory.compactor import Compactor
from memory.errors import AllocatorError
from memory.fragmentation import FragMetrics, compute_metrics

logger = logging.getLogger(__name__)


@dataclass
class SessionStats:
    allocations: int = 0
    failed_allocations: int = 0
    releases: int = 0
    failed_releases: int = 0
    compactions: int = 0
    failed_compactions: int = 0
    bytes_moved: int = 0


class MemorySession:
    """One simulated address space and the operations a caller may run on it.

    With `check=True` the block-list invariants are verified after every
    mutating call.
    """

    def __init__(self, total_size: int, check: bool = False):
        self.blocks = BlockList(total_size)
        self.check = check
        self.stats = SessionStats()
        self._allocator = Allocator(self.blocks)
        self._deallocator = Deallocator(self.blocks)
        self._compactor = Compactor(self.blocks)

    @property
    def total_size(self) -> int:
        return self.blocks.total_size

    def allocate(self, owner: str, size: int, strategy) -> BlockHandle:
        try:
            handle = self._allocator.allocate(owner, size, strategy)
        except AllocatorError as e:
            self.stats.failed_allocations += 1
            logger.debug("allocate(%r, %r, %r) failed: %s", owner, size, strategy, e.kind)
            raise
        self.stats.allocations += 1
        self._verify()
        return handle

    def release(self, owner: str) -> ReleasedBlock:
        try:
            released = self._deallocator.release(owner)
        except AllocatorError as e:
            self.stats.failed_releases += 1
            logger.debug("release(%r) failed: %s", owner, e.kind)
            raise
        self.stats.releases += 1
        self._verify()
        return released

    def compact(self):
        """Raises AllocationMetadataFailure, with the layout untouched, if the
        rebuilt block list cannot be committed."""
        try:
            moved = self._compactor.compact()
        except AllocatorError as e:
            self.stats.failed_compactions += 1
            logger.debug("compact() failed: %s", e.kind)
            raise
        self.stats.compactions += 1
        self.stats.bytes_moved += moved
        self._verify()

    def snapshot(self) -> Tuple[BlockDescriptor, ...]:
        return self.blocks.snapshot()

    def used(self) -> int:
        return self.blocks.used()

    def free_bytes(self) -> int:
        return self.blocks.free_bytes()

    def metrics(self) -> FragMetrics:
        return compute_metrics(self.blocks.free_extents(), self.total_size)

    def _verify(self):
        if self.check:
            self.blocks.check_invariants()
