from __future__ import annotations


class AllocatorError(Exception):
    """Base for every recoverable error raised by the block-list engine.

    A raising operation leaves the block list exactly as it found it.
    """
    kind = "AllocatorError"


class InvalidStrategy(AllocatorError):
    kind = "InvalidStrategy"

    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Invalid allocation strategy '{tag}'")


class InvalidRequest(AllocatorError):
    kind = "InvalidRequest"


class InvalidOwner(InvalidRequest):
    kind = "InvalidOwner"


class OutOfMemory(AllocatorError):
    kind = "OutOfMemory"

    def __init__(self, owner: str, size: int):
        self.owner = owner
        self.size = size
        super().__init__(f"Not enough memory to allocate {size} bytes for process {owner}")


class NotFound(AllocatorError):
    kind = "NotFound"

    def __init__(self, owner: str):
        self.owner = owner
        super().__init__(f"Process {owner} not found or has no allocated memory.")


class AllocationMetadataFailure(AllocatorError):
    kind = "AllocationMetadataFailure"


class InvariantViolation(AllocatorError):
    kind = "InvariantViolation"
