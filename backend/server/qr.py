"""
Login QR rendering.

Turns the opaque login challenge into a PNG data URI that can be
embedded directly in an <img> tag.
"""

from __future__ import annotations

import base64
import io

import qrcode

from observability.logger import log_event, now_ms
from session.errors import RenderFailed


def render_qr_data_uri(token: str) -> str:
    """
    Render `token` as a PNG QR code.

    Raises:
        RenderFailed if the payload cannot be encoded or rendered.
    """
    try:
        img = qrcode.make(token)
        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
    except Exception as exc:  # pylint: disable=broad-exception-caught
        log_event({
            "ts_ms": now_ms(),
            "level": "error",
            "event_type": "QR_RENDER_FAILED",
            "exception": type(exc).__name__,
            "message": str(exc),
        })
        raise RenderFailed(str(exc)) from exc

    encoded = base64.b64encode(buffered.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
