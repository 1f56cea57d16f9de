"""
JSONL event logger.

- Write one JSON object per line
- Output to stdout
- No buffering, no batching
- No side effects beyond logging
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any, Mapping, Callable

from constants import LOG_LEVELS


# ------------------------------------------------------------------
# Explicit output sink (patchable in tests)
# ------------------------------------------------------------------

def _stdout_print(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()

_print: Callable[[str], None] = _stdout_print

_min_level: int = LOG_LEVELS["info"]
_json_output: bool = True


def configure(*, level: str = "INFO", json_output: bool = True) -> None:
    """
    Apply process-wide logger settings.

    Called once at startup from the app factory. Unknown level names
    fall back to INFO.
    """
    global _min_level, _json_output  # pylint: disable=global-statement
    _min_level = LOG_LEVELS.get(level.lower(), LOG_LEVELS["info"])
    _json_output = json_output


def now_ms() -> int:
    """Wall-clock milliseconds."""
    return time.time_ns() // 1_000_000


def log_event(event: Mapping[str, Any]) -> None:
    """
    Write a single JSONL event to stdout.

    The caller is responsible for:
    - Supplying a fully-formed event dict
    - Including ts_ms and event_type

    This function:
    - Drops events below the configured level ("level" defaults to info)
    - Serializes to JSON
    - Writes exactly one line
    - Never raises
    """
    level = str(event.get("level", "info")).lower()
    if LOG_LEVELS.get(level, LOG_LEVELS["info"]) < _min_level:
        return

    if not _json_output:
        _print(_format_plain(event, level))
        return

    try:
        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        # Last-resort fallback, logging must never crash the server
        fallback: dict[str, Any] = {
            "ts_ms": event.get("ts_ms"),
            "event_type": "LOGGER_SERIALIZATION_ERROR",
            "error": str(e),
            "original_event_repr": repr(event),
        }
        line = json.dumps(fallback, ensure_ascii=False, separators=(",", ":"))

    _print(line)


def _format_plain(event: Mapping[str, Any], level: str) -> str:
    fields = " ".join(
        f"{key}={value}"
        for key, value in event.items()
        if key not in ("event_type", "level")
    )
    return f"{level.upper()} {event.get('event_type', '?')} {fields}".rstrip()
