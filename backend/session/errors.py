"""
Errors raised by the connection bridge and the HTTP facade helpers.

Route handlers translate these into HTTP responses:
- InvalidRequest -> 400
- NotConnected   -> 503
- DeliveryFailed -> 500
- RenderFailed   -> 500
"""


class GatewayError(Exception):
    """Base class for gateway errors."""


class InvalidRequest(GatewayError):
    """Required request fields are missing or empty."""


class NotConnected(GatewayError):
    """
    A send was attempted while the session is not CONNECTED.

    Routine, not exceptional: the state can change between the check
    and the actual send.
    """


class DeliveryFailed(GatewayError):
    """The protocol client failed to send a message."""


class RenderFailed(GatewayError):
    """The login QR could not be rendered to an image."""
