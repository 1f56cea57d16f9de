"""
Reconnect policy.

Purpose:
- Keep the reconnect decision out of the bridge's state transitions
- Allow tests (or a hardened deployment) to substitute another policy

This module contains NO timers, NO async, NO side effects.
"""
from __future__ import annotations

from typing import Callable

from session.notifications import DisconnectReason


ReconnectPolicy = Callable[[DisconnectReason], bool]
"""
Returns True if a new session attempt should start immediately after a
transport close with the given reason.
"""


def reconnect_unless_logged_out(reason: DisconnectReason) -> bool:
    """
    Default policy.

    - LOGGED_OUT: terminal, the process must be restarted to log in again
    - anything else: reconnect immediately, no backoff, no attempt cap
    """
    return reason is not DisconnectReason.LOGGED_OUT


def never_reconnect(_reason: DisconnectReason) -> bool:
    """Policy that leaves every close terminal."""
    return False
