"""
pyaileys protocol session adapter.

Role in the system:
- Loads credentials from a multi-file auth folder (credential store)
- Creates one pyaileys WhatsAppClient per session
- Translates "connection.update" events into bridge notifications
- Persists credentials on every "creds.update"
- Sends text messages

Architectural constraints:
- No reconnect logic lives here; the bridge decides
- pyaileys' own auto-reconnect is disabled, and a pending
  restart-required reconnect is cancelled when the session is closed,
  so a closed session can never come back to life
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

from pyaileys import WhatsAppClient
from pyaileys.exceptions import TransportError
from pyaileys.socket_config import SocketConfig

from observability.logger import log_event, now_ms
from protocol.client import NotificationSink
from session.notifications import (
    Notification,
    classify_status_code,
    handshake_completed,
    login_challenge,
    transport_closed,
)


# pyaileys reports stream errors as TransportError("WhatsApp stream error <code>: <text>")
_STREAM_ERROR_CODE = re.compile(r"stream error (\d+)")

STREAM_ERROR_EVENT = "cb:stream:error"


# ------------------------------------------------------------------
# connection.update translation
# ------------------------------------------------------------------

def translate_update(
    session_id: str,
    update: Any,
    *,
    stream_error_code: int | None = None,
) -> list[Notification]:
    """
    Convert one pyaileys connection update into notifications.

    An update may carry a QR payload and a connection change at the
    same time; the QR is reported first.

    stream_error_code is the code of the last <stream:error> seen on
    the socket; it classifies closes that carry no last_disconnect
    (the restart pyaileys performs after pairing).
    """
    notifications: list[Notification] = []

    qr = getattr(update, "qr", None)
    if qr:
        notifications.append(login_challenge(session_id, qr))

    connection = getattr(update, "connection", None)
    if connection == "close":
        status_code = close_status_code(getattr(update, "last_disconnect", None))
        if status_code is None:
            status_code = stream_error_code
        notifications.append(
            transport_closed(
                session_id,
                classify_status_code(status_code),
                status_code,
            )
        )
    elif connection == "open":
        notifications.append(handshake_completed(session_id))

    return notifications


def close_status_code(last_disconnect: Exception | None) -> int | None:
    """Status code carried in a pyaileys stream-error TransportError, if any."""
    if not isinstance(last_disconnect, TransportError):
        return None

    match = _STREAM_ERROR_CODE.search(str(last_disconnect))
    return int(match.group(1)) if match else None


def _stanza_error_code(stanza: Any) -> int | None:
    attrs = getattr(stanza, "attrs", None) or {}
    code = attrs.get("code")
    return int(code) if isinstance(code, str) and code.isdigit() else None


# ------------------------------------------------------------------
# Session
# ------------------------------------------------------------------

class PyaileysSession:
    """
    One WhatsApp Web session backed by pyaileys.

    The auth folder is shared across sessions: a replacement session
    resumes from the credentials saved by its predecessor.
    """

    def __init__(
        self,
        *,
        session_id: str,
        emit: NotificationSink,
        auth_dir: str,
    ) -> None:
        self._session_id = session_id
        self._emit = emit
        self._auth_dir = auth_dir

        self._client: Any | None = None
        self._auth_state: Any | None = None
        self._closed = False
        self._stream_error_code: int | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    async def open(self) -> None:
        client, self._auth_state = await WhatsAppClient.from_auth_folder(
            self._auth_dir,
            socket=SocketConfig(auto_reconnect=False),
        )
        if self._closed:
            return
        self._client = client

        client.on("connection.update", self._on_connection_update)
        client.on("creds.update", self._on_creds_update)
        client.on(STREAM_ERROR_EVENT, self._on_stream_error)

        await client.connect()

    async def send_text(self, address: str, text: str) -> str:
        if self._client is None:
            raise RuntimeError("session not open")

        return await self._client.send_text(address, text)

    async def close(self) -> None:
        self._closed = True
        client, self._client = self._client, None
        if client is None:
            return

        # WASocket.close() returns early on an already-closed socket and
        # leaves a restart-required reconnect pending; stop it first.
        await _cancel_pending_restart(client)
        await client.disconnect()

    # ------------------------------------------------------------------
    # pyaileys event handlers
    # ------------------------------------------------------------------

    async def _on_connection_update(self, update: Any) -> None:
        if self._closed:
            return

        notifications = translate_update(
            self._session_id,
            update,
            stream_error_code=self._stream_error_code,
        )
        if getattr(update, "connection", None) == "close":
            self._stream_error_code = None

        for notification in notifications:
            self._emit(notification)

    async def _on_stream_error(self, stanza: Any) -> None:
        self._stream_error_code = _stanza_error_code(stanza)

    async def _on_creds_update(self, _creds: Any) -> None:
        if self._auth_state is None or self._closed:
            return
        await self._auth_state.save_creds()
        log_event({
            "ts_ms": now_ms(),
            "level": "debug",
            "event_type": "CREDENTIALS_SAVED",
            "session_id": self._session_id,
        })


async def _cancel_pending_restart(client: Any) -> None:
    socket = getattr(client, "socket", None)
    task = getattr(socket, "_restart_task", None)
    if task is None or task.done() or task is asyncio.current_task():
        return

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
