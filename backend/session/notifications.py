"""
Notifications emitted by a protocol session (v1).

Rules:
- Notifications describe facts reported by the WhatsApp client.
- Notifications carry data only (no behavior).
- All bridge transitions are driven by these notifications.
- Every notification carries the session_id of the emitting session so
  the bridge can ignore notifications from a replaced session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from constants import (
    STATUS_BAD_SESSION,
    STATUS_CONNECTION_CLOSED,
    STATUS_CONNECTION_LOST,
    STATUS_CONNECTION_REPLACED,
    STATUS_FORBIDDEN,
    STATUS_LOGGED_OUT,
    STATUS_MULTIDEVICE_MISMATCH,
    STATUS_RESTART_REQUIRED,
    STATUS_UNAVAILABLE_SERVICE,
)


# =============================================================================
# Notification Type Enumeration
# =============================================================================

class NotificationType(str, Enum):
    """The three lifecycle notifications the bridge subscribes to."""

    LOGIN_CHALLENGE_ISSUED = "LOGIN_CHALLENGE_ISSUED"
    HANDSHAKE_COMPLETED = "HANDSHAKE_COMPLETED"
    TRANSPORT_CLOSED = "TRANSPORT_CLOSED"


# =============================================================================
# Disconnect classification
# =============================================================================

class DisconnectReason(str, Enum):
    """
    Classification of a transport close.

    Used only to decide reconnect vs. terminal stop. Never persisted.

    LOGGED_OUT is the far end explicitly unlinking this device; every
    other value is a transient or protocol-level failure.
    """

    LOGGED_OUT = "logged_out"
    FORBIDDEN = "forbidden"
    CONNECTION_LOST = "connection_lost"  # network failure or timeout
    MULTIDEVICE_MISMATCH = "multidevice_mismatch"
    CONNECTION_CLOSED = "connection_closed"
    CONNECTION_REPLACED = "connection_replaced"
    BAD_SESSION = "bad_session"
    UNAVAILABLE_SERVICE = "unavailable_service"
    RESTART_REQUIRED = "restart_required"
    UNKNOWN = "unknown"


_REASONS_BY_STATUS: dict[int, DisconnectReason] = {
    STATUS_LOGGED_OUT: DisconnectReason.LOGGED_OUT,
    STATUS_FORBIDDEN: DisconnectReason.FORBIDDEN,
    STATUS_CONNECTION_LOST: DisconnectReason.CONNECTION_LOST,
    STATUS_MULTIDEVICE_MISMATCH: DisconnectReason.MULTIDEVICE_MISMATCH,
    STATUS_CONNECTION_CLOSED: DisconnectReason.CONNECTION_CLOSED,
    STATUS_CONNECTION_REPLACED: DisconnectReason.CONNECTION_REPLACED,
    STATUS_BAD_SESSION: DisconnectReason.BAD_SESSION,
    STATUS_UNAVAILABLE_SERVICE: DisconnectReason.UNAVAILABLE_SERVICE,
    STATUS_RESTART_REQUIRED: DisconnectReason.RESTART_REQUIRED,
}


def classify_status_code(status_code: int | None) -> DisconnectReason:
    """Map a close status code to a DisconnectReason (UNKNOWN if unmapped)."""
    if status_code is None:
        return DisconnectReason.UNKNOWN
    return _REASONS_BY_STATUS.get(status_code, DisconnectReason.UNKNOWN)


# =============================================================================
# Base Notification
# =============================================================================

@dataclass(frozen=True)
class Notification:
    """
    Base notification type.

    notification_type: discriminant
    session_id: id of the emitting session (stale gating)
    """

    notification_type: NotificationType
    session_id: str


# =============================================================================
# Lifecycle Notifications
# =============================================================================

@dataclass(frozen=True)
class LoginChallengeIssued(Notification):
    """A login QR payload must be scanned by the phone."""
    token: str


@dataclass(frozen=True)
class HandshakeCompleted(Notification):
    """The session is authenticated and open."""


@dataclass(frozen=True)
class TransportClosed(Notification):
    """The underlying connection ended."""
    reason: DisconnectReason
    status_code: int | None = None


# =============================================================================
# Constructors
# =============================================================================

def login_challenge(session_id: str, token: str) -> LoginChallengeIssued:
    return LoginChallengeIssued(
        notification_type=NotificationType.LOGIN_CHALLENGE_ISSUED,
        session_id=session_id,
        token=token,
    )


def handshake_completed(session_id: str) -> HandshakeCompleted:
    return HandshakeCompleted(
        notification_type=NotificationType.HANDSHAKE_COMPLETED,
        session_id=session_id,
    )


def transport_closed(
    session_id: str,
    reason: DisconnectReason,
    status_code: int | None = None,
) -> TransportClosed:
    return TransportClosed(
        notification_type=NotificationType.TRANSPORT_CLOSED,
        session_id=session_id,
        reason=reason,
        status_code=status_code,
    )
