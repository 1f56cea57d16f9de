"""
Route registration for the WhatsApp gateway API.

Responsibilities:
- Define HTTP endpoints
- Translate bridge errors into HTTP responses
- Pull dependencies from app.state
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse

from server.pages import (
    NO_QR_PAGE,
    QR_RENDER_FAILED_PAGE,
    SEND_FORM_PAGE,
    qr_page,
)
from server.qr import render_qr_data_uri
from session.bridge import ConnectionBridge
from session.connection_status import ConnectionState, external_status
from session.errors import DeliveryFailed, InvalidRequest, NotConnected, RenderFailed


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.get("/qr", response_class=HTMLResponse)
    async def qr() -> HTMLResponse: # pyright: ignore[reportUnusedFunction]
        bridge: ConnectionBridge = app.state.bridge

        token = bridge.current_challenge()
        if not token:
            return HTMLResponse(NO_QR_PAGE)

        try:
            image = render_qr_data_uri(token)
        except RenderFailed:
            return HTMLResponse(QR_RENDER_FAILED_PAGE, status_code=500)

        return HTMLResponse(qr_page(image))

    @app.get("/whatsapp-status")
    async def whatsapp_status() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        bridge: ConnectionBridge = app.state.bridge
        return {"status": external_status(bridge.current_state())}

    @app.post("/send-message")
    async def send_message(request: Request) -> JSONResponse: # pyright: ignore[reportUnusedFunction]
        bridge: ConnectionBridge = app.state.bridge

        if bridge.current_state() is not ConnectionState.CONNECTED:
            return _not_connected()

        try:
            number, message = parse_send_request(await request.body())
        except InvalidRequest as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)

        try:
            message_id = await bridge.send(number, message)
        except NotConnected:
            # Dropped between the check above and the send
            return _not_connected()
        except DeliveryFailed:
            return JSONResponse({"error": "Failed to send message"}, status_code=500)

        return JSONResponse({"status": "sent", "id": message_id})

    @app.get("/send", response_class=HTMLResponse)
    async def send_form() -> HTMLResponse: # pyright: ignore[reportUnusedFunction]
        return HTMLResponse(SEND_FORM_PAGE)


def parse_send_request(raw_body: bytes) -> tuple[str, str]:
    """
    Extract (number, message) from a JSON request body.

    Raises:
        InvalidRequest if the body is not a JSON object or either field
        is missing, empty or not a string.
    """
    try:
        payload: Any = json.loads(raw_body) if raw_body else {}
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = {}

    if not isinstance(payload, dict):
        payload = {}

    number = payload.get("number")
    message = payload.get("message")

    if not isinstance(number, str) or not isinstance(message, str) or not number or not message:
        raise InvalidRequest("Missing number or message")

    return number, message


def _not_connected() -> JSONResponse:
    return JSONResponse(
        {"status": "disconnected", "error": "WhatsApp is not connected"},
        status_code=503,
    )
