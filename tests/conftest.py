# ABOUTME: Makes the `cargo_rr` package importable during pytest runs.
# ABOUTME: Ensures tests can run without requiring an editable install step.

from __future__ import annotations

import sys
from pathlib import Path


def _add_cargo_rr_src_to_sys_path() -> None:
    tests_dir = Path(__file__).resolve().parent
    cargo_rr_src = tests_dir.parent / "src"
    sys.path.insert(0, str(cargo_rr_src))


_add_cargo_rr_src_to_sys_path()
