"""
Connection state of the WhatsApp session.

DISCONNECTED | AWAITING_SCAN | CONNECTED

This is pure data owned by ConnectionBridge. Transitions happen only
inside the bridge's notification handlers.
"""
from enum import Enum


class ConnectionState(str, Enum):
    """
    Lifecycle of the single WhatsApp Web session.

    Exactly one value holds at any instant.
    """
    DISCONNECTED = "DISCONNECTED"    # No usable session (initial state)
    AWAITING_SCAN = "AWAITING_SCAN"  # Login QR issued, waiting for the phone
    CONNECTED = "CONNECTED"          # Handshake complete, can send


def external_status(state: ConnectionState) -> str:
    """
    Status string reported over HTTP.

    AWAITING_SCAN is reported as "disconnected"; callers only ever see
    two values.
    """
    return "connected" if state is ConnectionState.CONNECTED else "disconnected"
