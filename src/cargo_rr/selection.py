# ABOUTME: Interactive "pick one of N" capabilities used to disambiguate artifacts and tests.
# ABOUTME: The core only sees the Picker/FuzzySelector protocols, so tests inject deterministic fakes.
"""Selection capabilities for cargo-rr."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from typing import Protocol, TextIO

from rapidfuzz import fuzz, process


class Picker(Protocol):
    def pick(self, prompt: str, labels: Sequence[str]) -> int | None:
        """Return the chosen index, or None when the operator aborts."""


class FuzzySelector(Protocol):
    def select(self, prompt: str, labels: Sequence[str]) -> list[int]:
        """Return the indices of the selected labels."""


class TerminalPicker:
    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        stream: TextIO | None = None,
    ) -> None:
        self._input = input_fn
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def pick(self, prompt: str, labels: Sequence[str]) -> int | None:
        if not labels:
            return None
        print(prompt, file=self.stream)
        for index, label in enumerate(labels):
            print(f"  [{index}] {label}", file=self.stream)
        while True:
            try:
                raw = self._input(f"Pick 0-{len(labels) - 1} (q to abort)> ").strip()
            except EOFError:
                return None
            if raw in {"", "q"}:
                return None
            if raw.isdecimal() and int(raw) < len(labels):
                return int(raw)
            print(f"Not a valid choice: {raw}", file=self.stream)


class TerminalFuzzySelector:
    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        stream: TextIO | None = None,
        limit: int = 15,
        score_cutoff: float = 50.0,
    ) -> None:
        self._input = input_fn
        self._picker = TerminalPicker(input_fn=input_fn, stream=stream)
        self.limit = limit
        self.score_cutoff = score_cutoff

    def rank(self, query: str, labels: Sequence[str]) -> list[int]:
        if not query:
            return list(range(len(labels)))
        needle = query.lower()
        literal = [index for index, label in enumerate(labels) if needle in label.lower()]
        if literal:
            return literal
        matches = process.extract(
            query,
            list(labels),
            scorer=fuzz.partial_ratio,
            limit=self.limit,
            score_cutoff=self.score_cutoff,
        )
        return [index for _, _, index in matches]

    def select(self, prompt: str, labels: Sequence[str]) -> list[int]:
        print(f"{prompt} ({len(labels)} candidates)", file=self._picker.stream)
        try:
            query = self._input("Filter (empty for all)> ").strip()
        except EOFError:
            return []
        shortlist = self.rank(query, labels)
        if len(shortlist) <= 1:
            return shortlist
        choice = self._picker.pick(prompt, [labels[index] for index in shortlist])
        if choice is None:
            return []
        return [shortlist[choice]]
