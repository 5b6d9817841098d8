# ABOUTME: Positions tool-owned tokens relative to the `--` pass-through separator.
# ABOUTME: Also repairs a trace-name positional that swallowed an option-like token.
"""Argument splicing for cargo, rr and the debugger."""

from __future__ import annotations

from collections.abc import Sequence

SEPARATOR = "--"


def splice(args: Sequence[str], extra: Sequence[str]) -> list[str]:
    """Insert ``extra`` right after the first ``--`` in ``args``.

    When ``args`` has no separator one is appended, so ``extra`` always reaches
    the next layer down instead of the tool that receives ``args``.
    """
    spliced = list(args)
    try:
        index = spliced.index(SEPARATOR)
    except ValueError:
        return [*spliced, SEPARATOR, *extra]
    spliced[index + 1 : index + 1] = list(extra)
    return spliced


def split_opts(opts: str | None) -> list[str]:
    if not opts:
        return []
    return opts.split()


def partition(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split ``args`` at the first ``--`` (which is dropped)."""
    items = list(args)
    if SEPARATOR not in items:
        return items, []
    index = items.index(SEPARATOR)
    return items[:index], items[index + 1 :]


def fixup_trace_name(
    trace: str | None, passthrough: Sequence[str]
) -> tuple[str | None, list[str]]:
    if trace is not None and trace.startswith("-"):
        return None, [trace, *passthrough]
    return trace, list(passthrough)
