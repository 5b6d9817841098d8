# ABOUTME: Tests `rr record` command composition and the trace lifecycle around it.
# ABOUTME: The rr child process is replaced by a fake so no recording actually happens.

from __future__ import annotations

import io
import signal
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch


class FakeProcess:
    def __init__(self, returncode: int = 0, on_wait=None) -> None:
        self.returncode = returncode
        self._on_wait = on_wait

    def wait(self) -> int:
        if self._on_wait is not None:
            self._on_wait()
        return self.returncode


class TestRecorder(unittest.TestCase):
    def setUp(self) -> None:
        from cargo_rr.traces import TraceRegistry

        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)
        self.registry = TraceRegistry.at(self.root)

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def test_record_on_empty_root(self) -> None:
        from cargo_rr.ops import Recorder

        spawned: list[list[str]] = []

        def fake_spawn(argv, **_kwargs):
            spawned.append(list(argv))
            return FakeProcess(0)

        with patch("cargo_rr.ops.recorder.spawn", side_effect=fake_spawn):
            trace = Recorder(self.registry).record(
                "/ws/target/debug/app", rr_opts=None, program_args=["--flag"]
            )

        self.assertEqual(trace.name, "app")
        self.assertEqual(
            spawned,
            [
                [
                    "rr",
                    "record",
                    "--output-trace-dir",
                    str(self.root / "app"),
                    "/ws/target/debug/app",
                    "--",
                    "--flag",
                ]
            ],
        )
        self.assertEqual((self.root / "latest").read_text(encoding="utf-8"), "app")

    def test_rr_opts_are_split_and_lead_the_command(self) -> None:
        from cargo_rr.ops import Recorder

        spawned: list[list[str]] = []

        def fake_spawn(argv, **_kwargs):
            spawned.append(list(argv))
            return FakeProcess(0)

        (self.root / "app").mkdir()
        with patch("cargo_rr.ops.recorder.spawn", side_effect=fake_spawn):
            trace = Recorder(self.registry, rr="/opt/rr/bin/rr").record(
                Path("/ws/target/debug/app"), rr_opts="--chaos  -n", program_args=[]
            )

        self.assertEqual(trace.name, "app-1")
        self.assertEqual(
            spawned[0],
            [
                "/opt/rr/bin/rr",
                "record",
                "--chaos",
                "-n",
                "--output-trace-dir",
                str(self.root / "app-1"),
                "/ws/target/debug/app",
                "--",
            ],
        )

    def test_latest_is_set_before_rr_exits_and_interrupts_are_ignored(self) -> None:
        from cargo_rr.ops import Recorder

        observed: dict[str, object] = {}

        def during_wait() -> None:
            observed["latest"] = (self.root / "latest").read_text(encoding="utf-8")
            observed["handler"] = signal.getsignal(signal.SIGINT)

        before = signal.getsignal(signal.SIGINT)
        with patch(
            "cargo_rr.ops.recorder.spawn",
            return_value=FakeProcess(0, on_wait=during_wait),
        ):
            Recorder(self.registry).record("/ws/target/debug/app")

        self.assertEqual(observed["latest"], "app")
        self.assertIsNot(observed["handler"], before)
        self.assertIs(signal.getsignal(signal.SIGINT), before)

    def test_non_zero_exit_is_informational(self) -> None:
        from cargo_rr.ops import Recorder

        recorder = Recorder(self.registry)
        buffer = io.StringIO()
        with patch("cargo_rr.ops.recorder.spawn", return_value=FakeProcess(101)):
            with redirect_stdout(buffer):
                trace = recorder.record("/ws/target/debug/app")

        self.assertEqual(trace.name, "app")
        self.assertEqual(recorder.last_returncode, 101)
        self.assertIn("exited with status 101", buffer.getvalue())
        self.assertEqual(self.registry.list(), [])

    def test_unwritable_latest_marker_still_waits_for_rr(self) -> None:
        from cargo_rr.ops import Recorder

        waited: list[bool] = []
        process = FakeProcess(0, on_wait=lambda: waited.append(True))
        recorder = Recorder(self.registry)
        with patch("cargo_rr.ops.recorder.spawn", return_value=process), patch.object(
            self.registry, "set_latest", side_effect=PermissionError("read-only")
        ):
            with self.assertLogs("cargo_rr.ops.recorder", level="WARNING") as logs:
                trace = recorder.record("/ws/target/debug/app")

        self.assertEqual(trace.name, "app")
        self.assertEqual(waited, [True])
        self.assertEqual(recorder.last_returncode, 0)
        self.assertIn("Could not mark app as latest", logs.output[0])

    def test_spawn_failure_is_a_hard_error(self) -> None:
        from cargo_rr.errors import SpawnFailureError
        from cargo_rr.ops import Recorder

        with patch("cargo_rr.ops.process.subprocess.Popen", side_effect=FileNotFoundError("rr")):
            with self.assertRaises(SpawnFailureError):
                Recorder(self.registry, rr="definitely-not-rr").record("/ws/target/debug/app")

        self.assertFalse((self.root / "latest").exists())


if __name__ == "__main__":
    unittest.main()
