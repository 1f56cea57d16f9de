# pylint: disable=missing-module-docstring,missing-function-docstring,missing-class-docstring

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from config import AppConfig
from observability import logger
from protocol.client import NotificationSink
from session.notifications import (
    DisconnectReason,
    handshake_completed,
    login_challenge,
    transport_closed,
)


class FakeSession:
    """In-memory stand-in for a pyaileys session."""

    def __init__(self, *, session_id: str, emit: NotificationSink) -> None:
        self._session_id = session_id
        self._emit = emit

        self.opened = False
        self.closed = False
        self.sent: list[tuple[str, str]] = []
        self.message_id = "3EB0C767D26A1D5F3A2B"
        self.fail_open: Exception | None = None
        self.fail_send: Exception | None = None
        self.close_ticks = 0

    @property
    def session_id(self) -> str:
        return self._session_id

    async def open(self) -> None:
        if self.fail_open is not None:
            raise self.fail_open
        self.opened = True

    async def send_text(self, address: str, text: str) -> str:
        self.sent.append((address, text))
        if self.fail_send is not None:
            raise self.fail_send
        return self.message_id

    async def close(self) -> None:
        for _ in range(self.close_ticks):
            await asyncio.sleep(0)
        self.closed = True

    # Synthetic notifications

    def issue_challenge(self, token: str) -> None:
        self._emit(login_challenge(self._session_id, token))

    def complete_handshake(self) -> None:
        self._emit(handshake_completed(self._session_id))

    def close_transport(self, reason: DisconnectReason) -> None:
        self._emit(transport_closed(self._session_id, reason))


class FakeSessionFactory:
    def __init__(self) -> None:
        self.sessions: list[FakeSession] = []
        self.fail_open: Exception | None = None

    def __call__(self, *, session_id: str, emit: NotificationSink) -> FakeSession:
        session = FakeSession(session_id=session_id, emit=emit)
        session.fail_open = self.fail_open
        self.sessions.append(session)
        return session

    @property
    def latest(self) -> FakeSession:
        return self.sessions[-1]


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        env="test",
        log_level="DEBUG",
        host="127.0.0.1",
        port=3000,
        public_base_url="http://localhost:3000",
        auth_dir="test-auth",
        enable_json_logs=True,
    )


@pytest.fixture(autouse=True)
def logged_events(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Capture every JSONL line instead of writing to stdout."""
    captured: list[dict[str, Any]] = []

    monkeypatch.setattr(logger, "_print", lambda line: captured.append(json.loads(line)))
    monkeypatch.setattr(logger, "_min_level", 10)
    monkeypatch.setattr(logger, "_json_output", True)

    return captured
