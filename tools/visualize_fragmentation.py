"""
Contiguous Allocation Simulator — Visualizer

Replays a command trace (RQ / RL / C lines) and draws a Matplotlib heatmap of
address-space occupancy over time. Compaction steps are marked with
horizontal lines.

How to run (recommended, from repo root):
    python -m tools.visualize_fragmentation 1000 --trace traces/fragmentation_stressor.txt --out out_fragmentation.png
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

# Ensure repo root is on sys.path when running as a script:
# (python -m tools.visualize_fragmentation already works without this,
#  but this makes `python tools/visualize_fragmentation.py ...` work too.)
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from control.commands import Command, run_commands
from memory.blocks import BlockDescriptor
from memory.session import MemorySession


def render_state(snapshot: Sequence[BlockDescriptor], total_size: int, width: int) -> np.ndarray:
    """
    Return a 1D occupancy array over the address space, binned to 'width'.
    A bin is 1.0 when any allocated byte falls in it.
    """
    bins = np.zeros(width, dtype=np.float32)
    scale = total_size / width
    for blk in snapshot:
        if not blk.allocated:
            continue
        a = int(blk.start / scale)
        b = int((blk.start + blk.size - 1) / scale)
        a = max(0, min(width - 1, a))
        b = max(0, min(width - 1, b))
        bins[a : b + 1] = 1.0
    return bins


def collect_frames(session: MemorySession, lines, width: int, every: int = 1):
    """Replay `lines` and return (frames, compaction frame indices)."""
    frames: list[np.ndarray] = []
    compact_marks: list[int] = []
    step = 0

    def on_step(cmd: Command):
        nonlocal step
        if cmd.verb not in ("RQ", "RL", "C"):
            return
        step += 1
        if cmd.verb == "C":
            compact_marks.append(len(frames))
        if every <= 1 or step % every == 0:
            frames.append(render_state(session.snapshot(), session.total_size, width))

    run_commands(session, lines, emit=lambda _line: None, on_step=on_step)
    return frames, compact_marks


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("memory_size", type=int, help="Size of the simulated address space")
    ap.add_argument("--trace", required=True, help="Path to command trace")
    ap.add_argument("--out", default="out_fragmentation.png", help="Output image file")
    ap.add_argument("--width", type=int, default=140, help="Heatmap width (bins)")
    ap.add_argument("--every", type=int, default=1, help="Record every N operations")
    args = ap.parse_args(argv)

    trace_path = Path(args.trace)
    if not trace_path.exists():
        raise SystemExit(f"Trace not found: {trace_path}")

    session = MemorySession(args.memory_size)
    with open(trace_path, "r", encoding="utf-8") as f:
        frames, compact_marks = collect_frames(session, f, args.width, args.every)

    if not frames:
        raise SystemExit("No frames captured. Check trace path and --every.")

    H = np.stack(frames, axis=0)  # (time, width)

    fig = plt.figure(figsize=(10.5, 4.6))
    ax = fig.add_subplot(111)
    ax.imshow(H, aspect="auto", interpolation="nearest")
    ax.set_title("Address-space Occupancy Heatmap (Trace-driven)")
    ax.set_xlabel("address (binned)")
    ax.set_ylabel("time (operations)")

    for t in compact_marks:
        ax.axhline(t, linewidth=1)

    m = session.metrics()
    fig.text(0.01, 0.01, f"Final fragmentation: {m.summary()}", fontsize=9)

    fig.tight_layout()
    out_path = Path(args.out)
    fig.savefig(str(out_path), dpi=220)
    print(f"Wrote: {out_path.resolve()}")


if __name__ == "__main__":
    main()
