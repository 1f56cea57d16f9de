"""
Protocol and service constants.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
"""

from __future__ import annotations

from typing import Final, Mapping

# =============================================================================
# HTTP
# =============================================================================

DEFAULT_PORT: Final[int] = 3000

# =============================================================================
# WhatsApp addressing
# =============================================================================

# Personal chats are addressed as "<digits>@s.whatsapp.net"
USER_ADDRESS_SUFFIX: Final[str] = "@s.whatsapp.net"

# =============================================================================
# Credential store
# =============================================================================

DEFAULT_AUTH_DIR: Final[str] = "baileys-auth"

# =============================================================================
# Close status codes reported by the WhatsApp Web socket
# =============================================================================

STATUS_LOGGED_OUT: Final[int] = 401
STATUS_FORBIDDEN: Final[int] = 403
STATUS_CONNECTION_LOST: Final[int] = 408  # also used for keepalive timeouts
STATUS_MULTIDEVICE_MISMATCH: Final[int] = 411
STATUS_CONNECTION_CLOSED: Final[int] = 428
STATUS_CONNECTION_REPLACED: Final[int] = 440
STATUS_BAD_SESSION: Final[int] = 500
STATUS_UNAVAILABLE_SERVICE: Final[int] = 503
STATUS_RESTART_REQUIRED: Final[int] = 515

# =============================================================================
# Logging
# =============================================================================

LOG_LEVELS: Final[Mapping[str, int]] = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
}
