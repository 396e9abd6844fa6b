from __future__ import annotations
from typing import Sequence

from memory.blocks import BlockDescriptor

def render_map(snapshot: Sequence[BlockDescriptor], total_size: int, width: int=80) -> str:
    """One character per address bin: owner initial where allocated, '.' where free."""
    buf=['.']*width
    for b in snapshot:
        if not b.allocated:
            continue
        s=int((b.start/total_size)*width)
        e=int(((b.start+b.size)/total_size)*width)
        ch=b.owner[0].upper()
        # tiny blocks still get one cell
        for i in range(max(0,s), min(width, max(s+1,e))):
            buf[i]=ch
    return ''.join(buf)
