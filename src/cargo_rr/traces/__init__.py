"""Trace storage (registry, latest pointer)."""

from .registry import Trace, TraceRegistry

__all__ = ["Trace", "TraceRegistry"]
