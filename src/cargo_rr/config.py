"""Configuration defaults and environment overrides for cargo-rr."""

from __future__ import annotations

import os

from pydantic import BaseModel

ENV_PREFIX = "CARGO_RR_"


class Config(BaseModel):
    cargo: str = "cargo"
    rr: str = "rr"
    debugger: str = "rust-gdb"
    trace_dir: str | None = None
    log_level: str = "WARNING"

    def as_lines(self) -> str:
        lines = [
            f"cargo={self.cargo}",
            f"rr={self.rr}",
            f"debugger={self.debugger}",
            f"trace_dir={self.trace_dir or '(target dir)/rr'}",
            f"log_level={self.log_level}",
        ]
        return "\n".join(lines)


def _env_override(key: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{key}", default)


def _env_override_optional(key: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}{key}")
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def load_config() -> Config:
    defaults = Config()
    overrides: dict[str, object] = {
        # cargo exports CARGO to the subcommands it launches.
        "cargo": _env_override("CARGO", os.getenv("CARGO", defaults.cargo)),
        "rr": _env_override("RR", defaults.rr),
        "debugger": _env_override("DEBUGGER", defaults.debugger),
        "trace_dir": _env_override_optional("TRACE_DIR"),
        "log_level": _env_override("LOG_LEVEL", defaults.log_level).strip().upper(),
    }
    return Config(**overrides)
