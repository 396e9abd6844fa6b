from __future__ import annotations
from typing import List, Sequence

from memory.blocks import BlockDescriptor


def render_status(snapshot: Sequence[BlockDescriptor], total_size: int) -> List[str]:
    lines = ["Memory Status:"]
    last = len(snapshot) - 1
    for i, b in enumerate(snapshot):
        status = b.owner if b.allocated else "Free"
        arrow = " -> " if i < last else ""
        lines.append(f"Address [{b.start} - {b.start + b.size - 1}] "
                     f"Size: {b.size} bytes, Status: {status}{arrow}")
    lines.append(f"Total memory: {total_size} bytes")
    return lines
