from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import math

@dataclass
class FragMetrics:
    total_free: int
    lfe: int              # largest free extent
    external_frag: float
    entropy: float
    hole_count: int
    utilization: Optional[float] = None

    def summary(self) -> str:
        line = (f"LFE={self.lfe} holes={self.hole_count} "
                f"external_frag={self.external_frag:.3f} entropy={self.entropy:.3f}")
        if self.utilization is not None:
            line += f" utilization={self.utilization:.3f}"
        return line

def _entropy(hole_sizes: List[int]) -> float:
    """Shannon entropy (bits) of how the free bytes are spread across holes."""
    free = sum(hole_sizes)
    if free <= 0:
        return 0.0
    h = 0.0
    for s in hole_sizes:
        p = s / free
        h -= p * math.log2(p)
    return max(0.0, h)

def compute_metrics(free_extents: Iterable[Tuple[int, int]],
                    total_size: Optional[int] = None) -> FragMetrics:
    holes = [size for _, size in free_extents if size > 0]
    free = sum(holes)
    lfe = max(holes, default=0)
    external = 0.0 if free == 0 else 1.0 - lfe / free
    util = None if not total_size else (total_size - free) / total_size
    return FragMetrics(free, lfe, external, _entropy(holes), len(holes), util)
