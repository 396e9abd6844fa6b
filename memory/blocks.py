from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from memory.errors import AllocationMetadataFailure, InvalidOwner, InvariantViolation

logger = logging.getLogger(__name__)

MAX_OWNER_LEN = 9


@dataclass(frozen=True)
class BlockDescriptor:
    start: int
    size: int
    allocated: bool
    owner: Optional[str]


@dataclass
class MemoryBlock:
    start: int
    size: int
    allocated: bool = False
    owner: Optional[str] = None

    @property
    def end(self) -> int:
        return self.start + self.size

    def is_free(self) -> bool:
        return not self.allocated

    def describe(self) -> BlockDescriptor:
        return BlockDescriptor(self.start, self.size, self.allocated, self.owner)


def validate_owner(owner) -> str:
    """Return `owner` unchanged if it is a usable identifier, else raise InvalidOwner.

    Identifiers are 1..MAX_OWNER_LEN characters with no whitespace. Over-long
    ids are rejected rather than truncated.
    """
    if not isinstance(owner, str) or not owner:
        raise InvalidOwner(f"Invalid process id {owner!r}")
    if len(owner) > MAX_OWNER_LEN:
        raise InvalidOwner(f"Process id '{owner}' exceeds {MAX_OWNER_LEN} characters")
    if any(ch.isspace() for ch in owner):
        raise InvalidOwner(f"Process id {owner!r} contains whitespace")
    return owner


class BlockList:
    """Address-ordered blocks covering [0, total_size) with no gaps or overlaps.

    Structural changes go through `_commit`, which swaps a prepared run of
    blocks in with one slice assignment, so a failing mutation leaves the
    list as it was.
    """

    def __init__(self, total_size: int):
        if isinstance(total_size, bool) or not isinstance(total_size, int) or total_size <= 0:
            raise ValueError(f"Invalid memory size: {total_size!r}")
        self.total_size = total_size
        self._blocks: List[MemoryBlock] = [MemoryBlock(0, total_size)]

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[MemoryBlock]:
        return iter(self._blocks)

    def __getitem__(self, index: int) -> MemoryBlock:
        return self._blocks[index]

    def __repr__(self) -> str:
        body = " ".join(
            f"[{'A' if b.allocated else 'F'}|{b.start}|{b.size}]" for b in self._blocks
        )
        return f"BlockList({self.total_size}: {body})"

    def index_of(self, block: MemoryBlock) -> int:
        for i, b in enumerate(self._blocks):
            if b is block:
                return i
        raise ValueError(f"{block!r} is not in this block list")

    # ------------------------------------------------------------------
    # mutation primitives
    # ------------------------------------------------------------------
    def _commit(self, lo: int, hi: int, replacement: Sequence[MemoryBlock]):
        try:
            self._blocks[lo:hi] = replacement
        except MemoryError as e:
            raise AllocationMetadataFailure(
                "Failed to allocate memory block metadata"
            ) from e

    def split_at(self, index: int, offset: int) -> Tuple[MemoryBlock, MemoryBlock]:
        """Split the block at `index` into [start, start+offset) and the remainder.

        Both halves inherit the original's allocation state.
        """
        block = self._blocks[index]
        if not 0 < offset < block.size:
            raise ValueError(f"split offset {offset} outside (0, {block.size})")
        head = MemoryBlock(block.start, offset, block.allocated, block.owner)
        tail = MemoryBlock(block.start + offset, block.size - offset, block.allocated, block.owner)
        self._commit(index, index + 1, [head, tail])
        logger.debug("split [%d,%d) at +%d", block.start, block.end, offset)
        return head, tail

    def mark_allocated(self, index: int, owner: str) -> MemoryBlock:
        block = self._blocks[index]
        block.allocated = True
        block.owner = owner
        return block

    def mark_free(self, index: int) -> MemoryBlock:
        block = self._blocks[index]
        block.allocated = False
        block.owner = None
        return block

    def coalesce_adjacent(self) -> int:
        """Merge every run of consecutive free blocks. Returns the number of merges."""
        merged: List[MemoryBlock] = []
        merges = 0
        for b in self._blocks:
            if merged and b.is_free() and merged[-1].is_free():
                prev = merged[-1]
                merged[-1] = MemoryBlock(prev.start, prev.size + b.size)
                merges += 1
            else:
                merged.append(b)
        if merges:
            self._commit(0, len(self._blocks), merged)
            logger.debug("coalesced %d free pair(s)", merges)
        return merges

    def coalesce_around(self, index: int) -> MemoryBlock:
        """Merge the free block at `index` with its free immediate neighbours.

        Same effect as `coalesce_adjacent` when only that block just became free.
        """
        lo, hi = index, index + 1
        if lo > 0 and self._blocks[lo - 1].is_free():
            lo -= 1
        if hi < len(self._blocks) and self._blocks[hi].is_free():
            hi += 1
        if hi - lo == 1:
            return self._blocks[index]
        run = self._blocks[lo:hi]
        merged = MemoryBlock(run[0].start, sum(b.size for b in run))
        self._commit(lo, hi, [merged])
        logger.debug("coalesced %d blocks into [%d,%d)", len(run), merged.start, merged.end)
        return merged

    def rebuild(self, ordered_allocated: Sequence[MemoryBlock], total_size: Optional[int] = None):
        """Lay `ordered_allocated` back-to-back from 0 and close with one free block.

        The address space size is fixed; `total_size`, if given, must match it.
        """
        total = self.total_size
        if total_size is not None and total_size != total:
            raise ValueError(f"address space is {total} bytes, cannot rebuild as {total_size}")
        fresh: List[MemoryBlock] = []
        cursor = 0
        for b in ordered_allocated:
            if not b.allocated or not b.owner:
                raise ValueError(f"rebuild expects owned allocated blocks, got {b!r}")
            fresh.append(MemoryBlock(cursor, b.size, True, b.owner))
            cursor += b.size
        if cursor > total:
            raise ValueError(f"allocated blocks need {cursor} bytes, only {total} available")
        if cursor < total:
            fresh.append(MemoryBlock(cursor, total - cursor))
        self._commit(0, len(self._blocks), fresh)
        logger.debug("rebuilt %d allocated block(s), %d free", len(ordered_allocated), total - cursor)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def free_blocks(self) -> List[Tuple[int, MemoryBlock]]:
        return [(i, b) for i, b in enumerate(self._blocks) if b.is_free()]

    def allocated_blocks(self) -> List[MemoryBlock]:
        return [b for b in self._blocks if b.allocated]

    def free_extents(self) -> List[Tuple[int, int]]:
        return [(b.start, b.size) for b in self._blocks if b.is_free()]

    def used(self) -> int:
        return sum(b.size for b in self._blocks if b.allocated)

    def free_bytes(self) -> int:
        return self.total_size - self.used()

    def largest_free_extent(self) -> int:
        return max((s for _, s in self.free_extents()), default=0)

    def snapshot(self) -> Tuple[BlockDescriptor, ...]:
        return tuple(b.describe() for b in self._blocks)

    def check_invariants(self):
        blocks = self._blocks
        if not blocks:
            raise InvariantViolation("block list is empty")
        if blocks[0].start != 0:
            raise InvariantViolation(f"first block starts at {blocks[0].start}")
        for b in blocks:
            if b.size <= 0:
                raise InvariantViolation(f"non-positive size in {b!r}")
            if b.allocated and not b.owner:
                raise InvariantViolation(f"allocated block without owner: {b!r}")
            if not b.allocated and b.owner:
                raise InvariantViolation(f"free block with owner: {b!r}")
        for a, b in zip(blocks, blocks[1:]):
            if a.end != b.start:
                raise InvariantViolation(f"gap or overlap between {a!r} and {b!r}")
            if a.is_free() and b.is_free():
                raise InvariantViolation(f"adjacent free blocks {a!r} and {b!r}")
        total = sum(b.size for b in blocks)
        if total != self.total_size:
            raise InvariantViolation(f"sizes sum to {total}, expected {self.total_size}")
