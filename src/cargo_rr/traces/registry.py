# ABOUTME: Owns the trace root directory: allocates collision-free trace names and tracks `latest`.
# ABOUTME: Trace directories themselves are materialized by `rr record`, never by the registry.
"""Trace registry for cargo-rr."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from cargo_rr.errors import TraceNotFoundError

logger = logging.getLogger(__name__)

LATEST_MARKER = "latest"


@dataclass(frozen=True)
class Trace:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def root(self) -> Path:
        return self.path.parent


def _created_at(stat_result: os.stat_result) -> float:
    # st_birthtime is missing on Linux, so ctime stands in there. ctime moves
    # whenever the directory inode changes, so a trace written to after a newer
    # one was created (rr pack, a recording still running) sorts after it.
    return getattr(stat_result, "st_birthtime", stat_result.st_ctime)


class TraceRegistry:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @classmethod
    def at(cls, root: str | Path) -> TraceRegistry:
        registry = cls(root)
        registry.root.mkdir(parents=True, exist_ok=True)
        return registry

    def create(self, name_hint: str) -> Trace:
        if not name_hint or name_hint in {".", ".."} or "/" in name_hint:
            raise ValueError(f"Invalid trace name hint: {name_hint!r}")
        candidate = self.root / name_hint
        suffix = 0
        while candidate.exists():
            suffix += 1
            candidate = self.root / f"{name_hint}-{suffix}"
        logger.debug("Allocated trace %s", candidate)
        return Trace(candidate)

    def open(self, name: str) -> Trace:
        path = self.root / name
        if not name or not path.is_dir():
            raise TraceNotFoundError(f"Trace `{name}` does not exist in `{self.root}`")
        return Trace(path)

    def set_latest(self, trace: Trace) -> None:
        marker = self.root / LATEST_MARKER
        marker.write_text(trace.name, encoding="utf-8")
        logger.debug("Marked %s as latest", trace.name)

    def latest(self) -> Trace:
        marker = self.root / LATEST_MARKER
        try:
            name = marker.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            raise TraceNotFoundError(f"No trace in `{self.root}`") from None
        except OSError as exc:
            raise TraceNotFoundError(f"Cannot read `{marker}`: {exc}") from exc
        if not name:
            raise TraceNotFoundError(f"No trace in `{self.root}`")
        try:
            path = (self.root / name).resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise TraceNotFoundError(
                f"Latest trace `{name}` no longer exists in `{self.root}`"
            ) from exc
        return Trace(path)

    def list(self) -> list[str]:
        entries: list[tuple[float, str]] = []
        for entry in self.root.iterdir():
            if not entry.is_dir():
                continue
            entries.append((_created_at(entry.stat()), entry.name))
        entries.sort(key=lambda item: item[0])
        return [name for _, name in entries]
