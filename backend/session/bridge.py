"""
Connection-state bridge.

Responsibilities:
- Owns the single active ProtocolSession (session handle)
- Owns ConnectionState and the pending login challenge
- Applies the reconnect policy on transport close
- Forwards sends to the live session

Concurrency:
- Runs on one asyncio event loop
- Notification handlers never await, so their state writes cannot
  interleave with other handlers or with HTTP reads
- send() awaits network I/O; the CONNECTED check can go stale while a
  send is in flight

NOT responsible for:
- WhatsApp protocol, encryption, credential persistence
- QR rendering or HTTP concerns
"""

from __future__ import annotations

import asyncio
from typing import Coroutine, Any
from uuid import uuid4

from observability.logger import log_event, now_ms
from protocol.addressing import normalize_address
from protocol.client import ProtocolSession, SessionFactory
from session.connection_status import ConnectionState
from session.errors import DeliveryFailed, NotConnected
from session.notifications import (
    DisconnectReason,
    HandshakeCompleted,
    LoginChallengeIssued,
    Notification,
    TransportClosed,
)
from session.reconnect import ReconnectPolicy, reconnect_unless_logged_out


def _new_session_id() -> str:
    return f"wa_{uuid4().hex[:12]}"


class ConnectionBridge:
    """
    One bridge == one WhatsApp identity for the process lifetime.

    The bridge is the only writer of its state. Everything else reads
    through current_state() / current_challenge() or calls send().
    """

    def __init__(
        self,
        *,
        session_factory: SessionFactory,
        reconnect_policy: ReconnectPolicy = reconnect_unless_logged_out,
        qr_url: str | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._reconnect_policy = reconnect_policy
        self._qr_url = qr_url

        self._state = ConnectionState.DISCONNECTED
        self._challenge: str | None = None
        self._session: ProtocolSession | None = None

        # Opens are abandoned on shutdown; closes always run to completion
        self._open_tasks: set[asyncio.Task[None]] = set()
        self._close_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def current_state(self) -> ConnectionState:
        return self._state

    def current_challenge(self) -> str | None:
        return self._challenge

    @property
    def session(self) -> ProtocolSession | None:
        """The live session handle, if any."""
        return self._session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """
        Begin a new session attempt.

        Replaces the session handle synchronously, then schedules the
        open on the running loop and returns. Any previous handle is
        closed in the background and its notifications are ignored from
        now on.

        Must be called from inside the event loop.
        """
        previous = self._session

        session_id = _new_session_id()
        self._session = self._session_factory(
            session_id=session_id,
            emit=self.handle_notification,
        )
        self._state = ConnectionState.DISCONNECTED
        self._challenge = None

        log_event({
            "ts_ms": now_ms(),
            "event_type": "SESSION_STARTING",
            "session_id": session_id,
            "replaces": previous.session_id if previous is not None else None,
        })

        if previous is not None:
            self._spawn(self._close_session(previous), self._close_tasks)

        self._spawn(self._open_session(self._session), self._open_tasks)

    async def shutdown(self) -> None:
        """
        Close the live session and every replaced one.

        Pending opens are cancelled; pending closes of replaced sessions
        are awaited. Leaves the bridge DISCONNECTED; start() may be
        called again.
        """
        session, self._session = self._session, None
        self._state = ConnectionState.DISCONNECTED
        self._challenge = None

        opening = list(self._open_tasks)
        for task in opening:
            task.cancel()

        for task in opening:
            try:
                await task
            except asyncio.CancelledError:
                pass

        if session is not None:
            await self._close_session(session)

        for task in list(self._close_tasks):
            await task

        log_event({
            "ts_ms": now_ms(),
            "event_type": "BRIDGE_SHUTDOWN",
            "session_id": session.session_id if session is not None else None,
        })

    # ------------------------------------------------------------------
    # Notification channel
    # ------------------------------------------------------------------

    def handle_notification(self, notification: Notification) -> None:
        """
        Entry point for every notification emitted by a session.

        Notifications from a session other than the live one are stale
        and ignored.
        """
        if self._session is None or notification.session_id != self._session.session_id:
            log_event({
                "ts_ms": now_ms(),
                "level": "debug",
                "event_type": "STALE_NOTIFICATION_IGNORED",
                "session_id": notification.session_id,
                "notification_type": notification.notification_type.value,
            })
            return

        if isinstance(notification, LoginChallengeIssued):
            self.on_login_challenge(notification.token)
        elif isinstance(notification, HandshakeCompleted):
            self.on_handshake_completed()
        elif isinstance(notification, TransportClosed):
            self.on_transport_closed(notification.reason)
        else:
            log_event({
                "ts_ms": now_ms(),
                "level": "warning",
                "event_type": "UNKNOWN_NOTIFICATION",
                "session_id": notification.session_id,
                "notification_type": notification.notification_type.value,
            })

    def on_login_challenge(self, token: str) -> None:
        self._state = ConnectionState.AWAITING_SCAN
        self._challenge = token

        log_event({
            "ts_ms": now_ms(),
            "event_type": "LOGIN_CHALLENGE_ISSUED",
            "session_id": self._current_session_id(),
            "qr_url": self._qr_url,
        })

    def on_handshake_completed(self) -> None:
        self._state = ConnectionState.CONNECTED
        self._challenge = None

        log_event({
            "ts_ms": now_ms(),
            "event_type": "WHATSAPP_CONNECTED",
            "session_id": self._current_session_id(),
        })

    def on_transport_closed(self, reason: DisconnectReason) -> None:
        """
        Mark the session DISCONNECTED, then apply the reconnect policy.

        The state change is visible before the replacement session
        emits anything.
        """
        self._state = ConnectionState.DISCONNECTED
        self._challenge = None

        reconnect = self._reconnect_policy(reason)

        log_event({
            "ts_ms": now_ms(),
            "level": "warning",
            "event_type": "WHATSAPP_DISCONNECTED",
            "session_id": self._current_session_id(),
            "reason": reason.value,
            "reconnecting": reconnect,
        })

        if reconnect:
            self.start()
            return

        # Terminal: drop the dead handle, stay DISCONNECTED until restart
        dead, self._session = self._session, None
        if dead is not None:
            self._spawn(self._close_session(dead), self._close_tasks)

        log_event({
            "ts_ms": now_ms(),
            "level": "error",
            "event_type": "SESSION_EXPIRED",
            "session_id": dead.session_id if dead is not None else None,
            "message": "Session expired. Please restart.",
        })

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send(self, destination: str, text: str) -> str:
        """
        Send a text message through the live session.

        Raises:
            NotConnected if the state is not CONNECTED (the session is
            never called).
            DeliveryFailed if the protocol client raises. Not retried.
        """
        session = self._session
        if self._state is not ConnectionState.CONNECTED or session is None:
            raise NotConnected("WhatsApp is not connected")

        address = normalize_address(destination)

        try:
            message_id = await session.send_text(address, text)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": now_ms(),
                "level": "error",
                "event_type": "MESSAGE_SEND_FAILED",
                "session_id": session.session_id,
                "address": address,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            raise DeliveryFailed(str(exc)) from exc

        log_event({
            "ts_ms": now_ms(),
            "event_type": "MESSAGE_SENT",
            "session_id": session.session_id,
            "address": address,
            "message_id": message_id,
        })
        return message_id

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _current_session_id(self) -> str | None:
        return self._session.session_id if self._session is not None else None

    def _spawn(
        self,
        coro: Coroutine[Any, Any, None],
        tasks: set[asyncio.Task[None]],
    ) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    async def _open_session(self, session: ProtocolSession) -> None:
        try:
            await session.open()
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            # Not retried: a broken credential store needs an operator
            log_event({
                "ts_ms": now_ms(),
                "level": "error",
                "event_type": "SESSION_OPEN_FAILED",
                "session_id": session.session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })

    async def _close_session(self, session: ProtocolSession) -> None:
        try:
            await session.close()
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "ts_ms": now_ms(),
                "level": "warning",
                "event_type": "SESSION_CLOSE_FAILED",
                "session_id": session.session_id,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
