# ABOUTME: Tests token splicing around the `--` separator and the trace-name positional fixup.
# ABOUTME: Covers the separator-present and separator-absent cases plus option string splitting.

from __future__ import annotations

import unittest

from cargo_rr.ops.splice import fixup_trace_name, partition, splice, split_opts


class TestSplice(unittest.TestCase):
    def test_inserts_after_existing_separator(self) -> None:
        self.assertEqual(splice(["--", "x"], ["y"]), ["--", "y", "x"])

    def test_appends_separator_when_absent(self) -> None:
        self.assertEqual(splice(["a", "b"], ["y"]), ["a", "b", "--", "y"])

    def test_only_first_separator_is_used(self) -> None:
        self.assertEqual(
            splice(["-M", "--", "-ex", "run", "--", "z"], ["--quiet", "-nx"]),
            ["-M", "--", "--quiet", "-nx", "-ex", "run", "--", "z"],
        )

    def test_empty_args(self) -> None:
        self.assertEqual(splice([], ["--quiet"]), ["--", "--quiet"])

    def test_does_not_mutate_input(self) -> None:
        args = ["--", "x"]
        splice(args, ["y"])
        self.assertEqual(args, ["--", "x"])


class TestPartition(unittest.TestCase):
    def test_splits_on_first_separator(self) -> None:
        self.assertEqual(partition(["a", "--", "b", "--", "c"]), (["a"], ["b", "--", "c"]))

    def test_without_separator(self) -> None:
        self.assertEqual(partition(["a", "b"]), (["a", "b"], []))


class TestSplitOpts(unittest.TestCase):
    def test_none_and_empty_give_no_tokens(self) -> None:
        self.assertEqual(split_opts(None), [])
        self.assertEqual(split_opts(""), [])
        self.assertEqual(split_opts("   "), [])

    def test_splits_on_whitespace(self) -> None:
        self.assertEqual(split_opts("--chaos  -n\t--num-cores=2"), ["--chaos", "-n", "--num-cores=2"])


class TestFixupTraceName(unittest.TestCase):
    def test_option_like_trace_moves_to_front_of_passthrough(self) -> None:
        self.assertEqual(fixup_trace_name("-M", ["--", "-ex", "run"]), (None, ["-M", "--", "-ex", "run"]))

    def test_regular_trace_name_is_kept(self) -> None:
        self.assertEqual(fixup_trace_name("app-1", ["-M"]), ("app-1", ["-M"]))

    def test_missing_trace_name(self) -> None:
        self.assertEqual(fixup_trace_name(None, []), (None, []))


if __name__ == "__main__":
    unittest.main()
