from __future__ import annotations
import argparse
import subprocess
import sys
import re
from pathlib import Path

PY = sys.executable  # respects venv if activated, otherwise uses current python

STRATEGIES = [
    ("F", "first-fit"),
    ("B", "best-fit"),
    ("W", "worst-fit"),
]

TRACE = str(Path("traces") / "fragmentation_stressor.txt")

PATTERNS = {
    "allocations": re.compile(r"Allocations:\s+(\d+)"),
    "failed": re.compile(r"Failed allocations:\s+(\d+)"),
    "compactions": re.compile(r"Compactions:\s+(\d+)"),
    "bytes_moved": re.compile(r"Bytes moved:\s+(\d+)"),
    "lfe": re.compile(r"Fragmentation: LFE=(\d+)"),
    "holes": re.compile(r"holes=(\d+)"),
    "external_frag": re.compile(r"external_frag=([0-9\.]+)"),
    "utilization": re.compile(r"utilization=([0-9\.]+)"),
}

def run(trace: str, memory_size: int, tag: str) -> str:
    cmd = [PY, "run_sim.py", str(memory_size), "--trace", trace, "--strategy", tag, "--quiet"]
    return subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True)

def parse(out: str):
    def get(key, default=None):
        m = PATTERNS[key].search(out)
        return m.group(1) if m else default
    return {
        "allocations": int(get("allocations", 0)),
        "failed": int(get("failed", 0)),
        "compactions": int(get("compactions", 0)),
        "bytes_moved": int(get("bytes_moved", 0)),
        "lfe": int(get("lfe", 0)),
        "holes": int(get("holes", 0)),
        "external_frag": float(get("external_frag", 0.0)),
        "utilization": float(get("utilization", 0.0)),
    }

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--trace", default=TRACE)
    ap.add_argument("--memory-size", type=int, default=1000)
    args = ap.parse_args()

    rows = [(name, parse(run(args.trace, args.memory_size, tag))) for tag, name in STRATEGIES]

    header = ["strategy","allocs","failed","compacts","moved","LFE","holes","ext_frag","util"]
    print("="*88)
    print(f"Fit Strategy Comparison — {args.trace} ({args.memory_size} bytes)")
    print("="*88)
    print("{:<10} {:>7} {:>7} {:>9} {:>8} {:>6} {:>6} {:>9} {:>6}".format(*header))
    for name, m in rows:
        print("{:<10} {:>7} {:>7} {:>9} {:>8} {:>6} {:>6} {:>9.3f} {:>6.3f}".format(
            name, m["allocations"], m["failed"], m["compactions"], m["bytes_moved"],
            m["lfe"], m["holes"], m["external_frag"], m["utilization"]
        ))
    print("="*88)
    print("Tip: replay a trace with the final memory map:")
    print(f"  python run_sim.py {args.memory_size} --trace {args.trace} --show-map")

if __name__ == "__main__":
    main()
