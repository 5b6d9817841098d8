"""Replay a recorded trace through `rr replay` and the debugger."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cargo_rr.errors import ToolFailureError
from cargo_rr.ops.process import interrupts_ignored, spawn
from cargo_rr.ops.splice import SEPARATOR, partition, splice, split_opts
from cargo_rr.traces import Trace

logger = logging.getLogger(__name__)

QUIET_FLAG = "--quiet"


class Replayer:
    def __init__(self, rr: str = "rr", debugger: str = "rust-gdb") -> None:
        self.rr = rr
        self.debugger = debugger

    def build_command(
        self,
        trace: Trace,
        rr_opts: str | None = None,
        passthrough: Sequence[str] = (),
    ) -> list[str]:
        # Tokens before the caller's `--` are rr options, the rest go to the debugger.
        rr_args, debugger_args = partition(splice(passthrough, [QUIET_FLAG]))
        return [
            self.rr,
            "replay",
            *split_opts(rr_opts),
            *rr_args,
            "-d",
            self.debugger,
            str(trace.path),
            SEPARATOR,
            *debugger_args,
        ]

    def replay(
        self,
        trace: Trace,
        rr_opts: str | None = None,
        passthrough: Sequence[str] = (),
    ) -> None:
        argv = self.build_command(trace, rr_opts, passthrough)
        logger.debug("Replaying %s", trace.path)
        with interrupts_ignored():
            process = spawn(argv)
            returncode = process.wait()
        if returncode != 0:
            raise ToolFailureError("rr replay", returncode)
