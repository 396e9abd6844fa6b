from __future__ import annotations
import argparse, logging, sys
from typing import Iterator

from control.commands import run_commands
from memory.session import MemorySession
from viz.ascii_map import render_map

PROMPT = "allocator> "

def load_trace(path: str) -> Iterator[str]:
    with open(path,'r',encoding='utf-8') as f:
        for line in f:
            yield line

def prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input(PROMPT)
        except EOFError:
            print("\nExiting.")
            return

def print_summary(session: MemorySession, args):
    st=session.stats
    m=session.metrics()
    print("="*72)
    print("Contiguous Allocation Simulator — Summary")
    print("="*72)
    print(f"Memory: {session.total_size}  Used: {session.used()}  Free: {session.free_bytes()}  "
          f"Blocks: {len(session.snapshot())}")
    print(f"Allocations: {st.allocations}  Failed allocations: {st.failed_allocations}  "
          f"Releases: {st.releases}  Failed releases: {st.failed_releases}")
    print(f"Compactions: {st.compactions}  Failed compactions: {st.failed_compactions}  "
          f"Bytes moved: {st.bytes_moved}")
    if args.strategy:
        print(f"Strategy override: {args.strategy}")
    print("-"*72)
    print(f"Fragmentation: {m.summary()}")
    if args.show_map:
        print("-"*72)
        print("Memory map (ASCII):")
        print(render_map(session.snapshot(), session.total_size, args.width))
    print("="*72)

def main(argv=None):
    ap=argparse.ArgumentParser(description="Contiguous memory allocation simulator")
    ap.add_argument('memory_size', type=int, help="Size of the simulated address space in bytes")
    ap.add_argument('--trace', help="Replay commands from this file instead of reading stdin")
    ap.add_argument('--strategy', choices=['F','B','W'],
                    help="Force this fit strategy for every RQ, ignoring the tag on the line")
    ap.add_argument('--quiet', action='store_true', help="Suppress per-command output (trace mode)")
    ap.add_argument('--show-map', action='store_true')
    ap.add_argument('--width', type=int, default=80, help="ASCII map width")
    ap.add_argument('--check', action='store_true', help="Verify block-list invariants after every operation")
    ap.add_argument('--log-level', default='WARNING',
                    choices=['DEBUG','INFO','WARNING','ERROR'])
    args=ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.memory_size <= 0:
        print("Error: Invalid memory size.", file=sys.stderr)
        return 1
    session=MemorySession(args.memory_size, check=args.check)

    if args.trace is None:
        run_commands(session, prompt_lines(), strategy_override=args.strategy)
        return 0

    emit=(lambda _line: None) if args.quiet else print
    run_commands(session, load_trace(args.trace), emit=emit, strategy_override=args.strategy)
    print_summary(session, args)
    return 0

if __name__=='__main__':
    sys.exit(main())
