"""Operational utilities (splicing, recording, replay)."""

from .recorder import Recorder
from .replayer import Replayer
from .splice import fixup_trace_name, splice

__all__ = ["Recorder", "Replayer", "fixup_trace_name", "splice"]
