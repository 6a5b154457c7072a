from __future__ import annotations

import os
import sys

DEBUG_ENV = "FURI_DEBUG"


def _env_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() not in {"", "0", "false", "no", "off"}


_DEBUG_LOG = _env_flag(os.environ.get(DEBUG_ENV))


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def debug_logging_enabled() -> bool:
    return _DEBUG_LOG


def debug_log(message: str) -> None:
    """Print a debug line to stderr when debug logging is on."""
    if _DEBUG_LOG:
        print(f"[furi debug] {message}", file=sys.stderr)
