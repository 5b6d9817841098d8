# ABOUTME: Records an executable under `rr record` into a freshly allocated trace directory.
# ABOUTME: The trace becomes `latest` as soon as rr is running, even if the recording later fails.
"""Recording orchestration."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from cargo_rr.ops.process import interrupts_ignored, spawn
from cargo_rr.ops.splice import SEPARATOR, split_opts
from cargo_rr.traces import Trace, TraceRegistry

logger = logging.getLogger(__name__)


class Recorder:
    def __init__(self, registry: TraceRegistry, rr: str = "rr") -> None:
        self.registry = registry
        self.rr = rr
        self.last_returncode: int | None = None

    def record(
        self,
        executable: str | Path,
        rr_opts: str | None = None,
        program_args: Sequence[str] = (),
    ) -> Trace:
        executable = Path(executable)
        logger.debug("Recording %s with args %s", executable, list(program_args))
        trace = self.registry.create(executable.name)

        argv = [
            self.rr,
            "record",
            *split_opts(rr_opts),
            "--output-trace-dir",
            str(trace.path),
            str(executable),
            SEPARATOR,
            *program_args,
        ]
        with interrupts_ignored():
            process = spawn(argv)
            try:
                self.registry.set_latest(trace)
            except OSError as exc:
                logger.warning("Could not mark %s as latest: %s", trace.name, exc)
            returncode = process.wait()

        self.last_returncode = returncode
        if returncode != 0:
            # The recorded program failing still leaves a usable trace.
            print(f"cargo-rr: `rr record` exited with status {returncode}")
        return trace
