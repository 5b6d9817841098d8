# ABOUTME: Flattens the test functions of every built test artifact into one selectable list.
# ABOUTME: Name and target-type filters apply here; the build step already applied package/features.
"""Test enumeration for cargo-rr."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from cargo_rr.build.filters import NameSpec, TypeSpec
from cargo_rr.contracts import (
    ArtifactCategory,
    ArtifactDescriptor,
    TestFunction,
    TestKind,
    TestSpec,
)
from cargo_rr.errors import (
    NoCandidatesError,
    NothingSelectedError,
    SelectionContractError,
    ToolFailureError,
)
from cargo_rr.ops.process import spawn
from cargo_rr.selection import FuzzySelector

logger = logging.getLogger(__name__)

TestLister = Callable[[Path], Sequence[str]]


def list_test_functions(executable: Path) -> list[str]:
    """Return the raw `--list --format terse` output lines of a libtest harness."""
    process = spawn(
        [str(executable), "--list", "--format", "terse"],
        stdout=subprocess.PIPE,
        text=True,
    )
    stdout, _ = process.communicate()
    if process.returncode != 0:
        raise ToolFailureError(f"{executable.name} --list", process.returncode)
    return stdout.splitlines()


def parse_test_list(lines: Iterable[str], artifact: ArtifactDescriptor) -> list[TestFunction]:
    functions: list[TestFunction] = []
    for line in lines:
        name, sep, marker = line.strip().rpartition(": ")
        if not sep or not name or marker not in {"test", "bench"}:
            continue
        if marker == "bench" or artifact.category is ArtifactCategory.BENCH:
            kind = TestKind.BENCH
        else:
            kind = artifact.default_test_kind()
        functions.append(TestFunction(name=name, kind=kind))
    return functions


class TestEnumerator:
    __test__ = False

    def __init__(self, selector: FuzzySelector, lister: TestLister | None = None) -> None:
        self.selector = selector
        self.lister = lister or list_test_functions

    def enumerate(
        self,
        artifacts: Iterable[ArtifactDescriptor],
        name: NameSpec | None = None,
        target_type: TypeSpec | None = None,
    ) -> list[TestSpec]:
        name = name or NameSpec()
        target_type = target_type or TypeSpec()
        specs: list[TestSpec] = []
        for artifact in artifacts:
            for function in parse_test_list(self.lister(artifact.executable), artifact):
                spec = TestSpec(artifact=artifact, test=function)
                if name.matches(function.name) and target_type.matches(spec):
                    specs.append(spec)
        logger.debug("Enumerated %d matching tests", len(specs))
        return specs

    def select(self, specs: Sequence[TestSpec]) -> TestSpec:
        if not specs:
            raise NoCandidatesError("No tests matching the request")
        if len(specs) == 1:
            return specs[0]
        chosen = self.selector.select("Pick a test to record", [spec.label() for spec in specs])
        if not chosen:
            raise NothingSelectedError("No test selected")
        if len(chosen) > 1:
            raise SelectionContractError(f"Selector returned {len(chosen)} tests, expected one")
        return specs[chosen[0]]
