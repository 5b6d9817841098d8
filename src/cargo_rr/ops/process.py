"""Child-process helpers shared by the build, record and replay steps."""

from __future__ import annotations

import logging
import shlex
import signal
import subprocess
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from cargo_rr.errors import SpawnFailureError

logger = logging.getLogger(__name__)


def spawn(argv: Sequence[str], **kwargs: Any) -> subprocess.Popen:
    command = [str(arg) for arg in argv]
    logger.debug("Spawning %s", shlex.join(command))
    try:
        return subprocess.Popen(command, **kwargs)
    except OSError as exc:
        raise SpawnFailureError(command[0], exc) from exc


def _discard_interrupt(signum: int, frame: Any) -> None:
    logger.debug("Ignoring signal %s; the child process handles it", signum)


@contextmanager
def interrupts_ignored() -> Iterator[None]:
    """Swallow SIGINT while a foreground child (rr, gdb) owns the terminal."""
    previous = signal.signal(signal.SIGINT, _discard_interrupt)
    if previous is None:
        previous = signal.SIG_DFL
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)
