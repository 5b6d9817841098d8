# ABOUTME: Drives cargo in machine-readable mode: workspace metadata and streamed build events.
# ABOUTME: Non-JSON stdout lines and non-artifact messages are ignored.
"""Cargo integration for cargo-rr."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from pydantic import ValidationError

from cargo_rr.contracts import CompilerArtifact, WorkspaceMetadata
from cargo_rr.errors import ToolFailureError
from cargo_rr.ops.process import spawn

logger = logging.getLogger(__name__)

MESSAGE_FORMAT = "--message-format=json-render-diagnostics"


def parse_messages(lines: Iterable[str]) -> Iterator[CompilerArtifact]:
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError:
            continue
        if not isinstance(payload, dict) or payload.get("reason") != "compiler-artifact":
            continue
        try:
            yield CompilerArtifact.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Skipping malformed compiler-artifact message: %s", exc)


class Cargo:
    def __init__(self, program: str = "cargo", cwd: str | Path | None = None) -> None:
        self.program = program
        self.cwd = Path(cwd) if cwd is not None else None

    def metadata(self) -> WorkspaceMetadata:
        process = spawn(
            [self.program, "metadata", "--no-deps", "--format-version", "1"],
            stdout=subprocess.PIPE,
            text=True,
            cwd=self.cwd,
        )
        stdout, _ = process.communicate()
        if process.returncode != 0:
            raise ToolFailureError("cargo metadata", process.returncode)
        try:
            return WorkspaceMetadata.model_validate_json(stdout)
        except ValidationError as exc:
            detail = f"unreadable output ({exc.error_count()} errors)"
            raise ToolFailureError("cargo metadata", process.returncode, detail) from exc

    def build(self, args: Sequence[str]) -> list[CompilerArtifact]:
        """Run a cargo build command and collect every artifact message it emits.

        The stream is drained completely before cargo is waited on, so nothing
        downstream ever sees a partially built workspace.
        """
        process = spawn(
            [self.program, *args, MESSAGE_FORMAT],
            stdout=subprocess.PIPE,
            text=True,
            cwd=self.cwd,
        )
        assert process.stdout is not None
        with process.stdout:
            messages = list(parse_messages(process.stdout))
        returncode = process.wait()
        if returncode != 0:
            command = args[0] if args else "build"
            raise ToolFailureError(f"cargo {command}", returncode)
        logger.debug("cargo reported %d artifacts", len(messages))
        return messages
