# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from typing import Any

import pytest

from observability import logger


def _capture(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    captured: list[str] = []
    monkeypatch.setattr(logger, "_print", captured.append)
    return captured


def test_log_event_emits_valid_jsonl(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """
    Contract:
    - log_event emits exactly one JSONL line
    - payload is serialized as-is
    - output sink is patchable
    """
    captured = _capture(monkeypatch)

    payload: dict[str, Any] = {
        "event_type": "TEST",
        "value": 123,
    }

    logger.log_event(payload)

    assert len(captured) == 1
    assert json.loads(captured[0]) == payload


def test_events_below_configured_level_are_dropped(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured = _capture(monkeypatch)
    logger.configure(level="WARNING")

    logger.log_event({"event_type": "QUIET", "level": "debug"})
    logger.log_event({"event_type": "DEFAULT_INFO"})
    logger.log_event({"event_type": "LOUD", "level": "error"})

    assert [json.loads(line)["event_type"] for line in captured] == ["LOUD"]


def test_unknown_level_name_falls_back_to_info(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured = _capture(monkeypatch)
    logger.configure(level="verbose")

    logger.log_event({"event_type": "SKIPPED", "level": "debug"})
    logger.log_event({"event_type": "KEPT"})

    assert len(captured) == 1


def test_unserializable_event_falls_back(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured = _capture(monkeypatch)

    logger.log_event({"ts_ms": 1, "event_type": "BAD", "obj": object()})

    decoded = json.loads(captured[0])
    assert decoded["event_type"] == "LOGGER_SERIALIZATION_ERROR"
    assert decoded["ts_ms"] == 1


def test_plain_output(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _capture(monkeypatch)
    logger.configure(level="INFO", json_output=False)

    logger.log_event({"event_type": "WHATSAPP_CONNECTED", "session_id": "wa_1"})

    assert captured == ["INFO WHATSAPP_CONNECTED session_id=wa_1"]
