from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from memory.errors import AllocatorError
from memory.session import MemorySession
from viz.status import render_status

RQ_USAGE = "Usage: RQ <process_id> <size> <F|B|W>"
RL_USAGE = "Usage: RL <process_id>"


class CommandError(Exception):
    """A line the command grammar cannot turn into a core operation."""


@dataclass
class Command:
    verb: str            # RQ / RL / C / STAT / X
    owner: Optional[str] = None
    size: Optional[int] = None
    tag: Optional[str] = None


def parse_command(line: str) -> Optional[Command]:
    """Parse one command line. Blank lines and '#' comments give None."""
    text = line.strip()
    if not text or text.startswith('#'):
        return None
    tok = text.split()
    verb = tok[0]
    if verb == 'RQ':
        if len(tok) < 4:
            raise CommandError(RQ_USAGE)
        try:
            size = int(tok[2])
        except ValueError:
            raise CommandError(RQ_USAGE) from None
        return Command('RQ', owner=tok[1], size=size, tag=tok[3])
    if verb == 'RL':
        if len(tok) < 2:
            raise CommandError(RL_USAGE)
        return Command('RL', owner=tok[1])
    if verb in ('C', 'STAT', 'X'):
        return Command(verb)
    raise CommandError(f"Unknown command '{verb}'")


def execute(session: MemorySession, cmd: Command,
            strategy_override: Optional[str] = None) -> List[str]:
    """Run one command against the session and return the lines to show."""
    try:
        if cmd.verb == 'RQ':
            tag = strategy_override or cmd.tag
            h = session.allocate(cmd.owner, cmd.size, tag)
            return [f"Allocated {h.size} bytes to process {h.owner} at address {h.start}"]
        if cmd.verb == 'RL':
            r = session.release(cmd.owner)
            return [f"Released memory allocated to process {r.owner} "
                    f"at address {r.start}, size {r.size} bytes"]
        if cmd.verb == 'C':
            session.compact()
            return ["Compacting memory...", "Memory compaction complete."]
    except AllocatorError as e:
        return [f"Error: {e}"]
    if cmd.verb == 'STAT':
        return render_status(session.snapshot(), session.total_size)
    if cmd.verb == 'X':
        return ["Exiting."]
    raise CommandError(f"Unknown command '{cmd.verb}'")


def run_commands(session: MemorySession, lines: Iterable[str],
                 emit: Callable[[str], None] = print,
                 strategy_override: Optional[str] = None,
                 on_step: Optional[Callable[[Command], None]] = None) -> bool:
    """Feed `lines` through the session until exhausted or an X command.

    Returns True if stopped by X.
    """
    for line in lines:
        try:
            cmd = parse_command(line)
        except CommandError as e:
            msg = str(e)
            emit(msg if msg.startswith("Usage:") else f"Error: {msg}")
            continue
        if cmd is None:
            continue
        for out in execute(session, cmd, strategy_override):
            emit(out)
        if on_step is not None:
            on_step(cmd)
        if cmd.verb == 'X':
            return True
    return False
