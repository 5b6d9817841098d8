# ABOUTME: Tests flattening of libtest `--list` output into selectable test specs.
# ABOUTME: Verifies name/type filtering and the zero/one/many selection policy.

from __future__ import annotations

import unittest
from pathlib import Path

from cargo_rr.build import NameSpec, TestEnumerator, TypeSpec
from cargo_rr.build.enumerator import parse_test_list
from cargo_rr.contracts import ArtifactCategory, ArtifactDescriptor, TestKind


def descriptor(
    name: str, category: ArtifactCategory, kinds: tuple[str, ...], src: str
) -> ArtifactDescriptor:
    return ArtifactDescriptor(
        executable=Path(f"/ws/target/debug/deps/{name}-0123abcd"),
        category=category,
        package_id="app 0.1.0 (path+file:///ws)",
        src_path=Path(f"/ws/{src}"),
        target_name=name,
        target_kinds=kinds,
    )


LIB = descriptor("app", ArtifactCategory.UNIT_TEST, ("lib",), "src/lib.rs")
BIN = descriptor("cli", ArtifactCategory.UNIT_TEST, ("bin",), "src/bin/cli.rs")
IT = descriptor("smoke", ArtifactCategory.INTEGRATION_TEST, ("test",), "tests/smoke.rs")

LISTINGS = {
    LIB.executable: ["parser::tests::parses_empty: test", "parser::tests::parses_list: test", ""],
    BIN.executable: ["args::tests::parses_flags: test", "timing: bench"],
    IT.executable: ["end_to_end: test", "", "2 tests, 0 benchmarks"],
}


class ScriptedSelector:
    def __init__(self, answer: list[int]) -> None:
        self.answer = answer
        self.labels: list[str] = []

    def select(self, prompt: str, labels: list[str]) -> list[int]:
        self.labels = list(labels)
        return self.answer


def enumerator(answer: list[int] | None = None) -> tuple[TestEnumerator, ScriptedSelector]:
    selector = ScriptedSelector(answer or [])
    return TestEnumerator(selector, lister=lambda exe: LISTINGS[exe]), selector


class TestParseTestList(unittest.TestCase):
    def test_parses_terse_lines_and_kinds(self) -> None:
        functions = parse_test_list(LISTINGS[BIN.executable], BIN)

        self.assertEqual(
            [(f.name, f.kind) for f in functions],
            [("args::tests::parses_flags", TestKind.UNIT), ("timing", TestKind.BENCH)],
        )

    def test_integration_kind_and_summary_lines_ignored(self) -> None:
        functions = parse_test_list(LISTINGS[IT.executable], IT)

        self.assertEqual([(f.name, f.kind) for f in functions], [("end_to_end", TestKind.INTEGRATION)])


class TestTestEnumerator(unittest.TestCase):
    def test_flattens_all_artifacts(self) -> None:
        tests, _ = enumerator()

        specs = tests.enumerate([LIB, BIN, IT])

        self.assertEqual(len(specs), 5)
        self.assertIs(specs[0].artifact, LIB)
        self.assertEqual(specs[0].label(), "app::parser::tests::parses_empty (unit)")

    def test_substring_and_exact_name_filters(self) -> None:
        tests, _ = enumerator()

        substring = tests.enumerate([LIB, BIN, IT], name=NameSpec.from_flags("parses"))
        exact = tests.enumerate([LIB, BIN, IT], name=NameSpec.from_flags("end_to_end", exact=True))
        exact_miss = tests.enumerate([LIB, BIN, IT], name=NameSpec.from_flags("end_to", exact=True))

        self.assertEqual(len(substring), 3)
        self.assertEqual([s.test.name for s in exact], ["end_to_end"])
        self.assertEqual(exact_miss, [])

    def test_type_filters(self) -> None:
        tests, _ = enumerator()

        lib_only = tests.enumerate([LIB, BIN, IT], target_type=TypeSpec.from_flags(lib=True))
        bin_only = tests.enumerate([LIB, BIN, IT], target_type=TypeSpec.from_flags(bin="cli"))
        other_bin = tests.enumerate([LIB, BIN, IT], target_type=TypeSpec.from_flags(bin="nope"))
        integration = tests.enumerate([LIB, BIN, IT], target_type=TypeSpec.from_flags(tests=True))

        self.assertEqual({s.artifact.target_name for s in lib_only}, {"app"})
        self.assertEqual(len(bin_only), 2)
        self.assertEqual(other_bin, [])
        self.assertEqual([s.test.name for s in integration], ["end_to_end"])

    def test_select_single_is_automatic(self) -> None:
        tests, selector = enumerator([0])

        chosen = tests.select(tests.enumerate([IT]))

        self.assertEqual(chosen.test.name, "end_to_end")
        self.assertEqual(selector.labels, [])

    def test_select_many_uses_composite_labels(self) -> None:
        tests, selector = enumerator([2])
        specs = tests.enumerate([BIN, IT])

        chosen = tests.select(specs)

        self.assertEqual(
            selector.labels,
            [
                "cli::args::tests::parses_flags (unit)",
                "cli::timing (bench)",
                "smoke::end_to_end (integration)",
            ],
        )
        self.assertEqual(chosen.test.name, "end_to_end")

    def test_select_failures(self) -> None:
        from cargo_rr.errors import (
            NoCandidatesError,
            NothingSelectedError,
            SelectionContractError,
        )

        none_selected, _ = enumerator([])
        many_selected, _ = enumerator([0, 1])
        specs = none_selected.enumerate([LIB])

        with self.assertRaises(NoCandidatesError):
            none_selected.select([])
        with self.assertRaises(NothingSelectedError):
            none_selected.select(specs)
        with self.assertRaises(SelectionContractError):
            many_selected.select(specs)


if __name__ == "__main__":
    unittest.main()
