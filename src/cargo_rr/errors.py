"""Exception hierarchy for cargo-rr.

Every failure the CLI reports to the operator derives from CargoRrError. None
of these are retried internally.
"""

from __future__ import annotations


class CargoRrError(Exception):
    """Base exception for all cargo-rr errors."""

    exit_code = 1


class InputConflictError(CargoRrError):
    """Raised when mutually exclusive filters or flags are supplied together."""

    exit_code = 2


class NoCandidatesError(CargoRrError):
    """Raised when the build produced no artifacts or tests matching the request."""


class TraceNotFoundError(CargoRrError):
    """Raised when a named trace or the latest pointer does not resolve."""


class NothingSelectedError(TraceNotFoundError):
    """Raised when an interactive pick was aborted."""


class SelectionContractError(CargoRrError):
    """Raised when a selector hands back more than one item."""


class SpawnFailureError(CargoRrError):
    """Raised when an external tool binary could not be launched."""

    def __init__(self, program: str, cause: OSError) -> None:
        super().__init__(f"Failed to run `{program}`: {cause}")
        self.program = program
        self.cause = cause


class ToolFailureError(CargoRrError):
    """Raised when an external tool ran and exited with a non-zero status."""

    def __init__(self, tool: str, returncode: int, detail: str | None = None) -> None:
        message = f"`{tool}` exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.tool = tool
        self.returncode = returncode

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        # Signal deaths come back negative from subprocess.
        return self.returncode if self.returncode > 0 else 1
