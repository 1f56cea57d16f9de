"""
Protocol session contract.

A ProtocolSession wraps one WhatsApp Web client instance together with
its credential store. The bridge owns exactly one at a time and never
reuses a session after replacing it.

Lifecycle:
    session = factory(session_id=..., emit=bridge.handle_notification)
    await session.open()          # load credentials, connect
    msg_id = await session.send_text(address, text)
    await session.close()

Notifications are delivered synchronously through `emit` from the
event loop thread.
"""

from __future__ import annotations

from typing import Callable, Protocol

from session.notifications import Notification


NotificationSink = Callable[[Notification], None]


class ProtocolSession(Protocol):
    """Contract implemented by the pyaileys adapter and by test fakes."""

    @property
    def session_id(self) -> str: ...

    async def open(self) -> None:
        """Load credentials and start the connection. Returns once connecting."""
        ...

    async def send_text(self, address: str, text: str) -> str:
        """Send a text message. Returns the message id."""
        ...

    async def close(self) -> None:
        """Tear down the connection. Must be safe to call more than once."""
        ...


class SessionFactory(Protocol):
    def __call__(
        self,
        *,
        session_id: str,
        emit: NotificationSink,
    ) -> ProtocolSession: ...
