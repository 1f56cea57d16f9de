"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Set up middleware and logging
- Own the connection bridge lifecycle (start at boot, shutdown at exit)
- Register routes
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppConfig
from observability import logger
from observability.logger import log_event, now_ms
from protocol.client import SessionFactory
from protocol.pyaileys_session import PyaileysSession
from session.bridge import ConnectionBridge
from session.reconnect import ReconnectPolicy, reconnect_unless_logged_out

from server.routes import register_routes


def create_app(
    config: AppConfig | None = None,
    *,
    session_factory: SessionFactory | None = None,
    reconnect_policy: ReconnectPolicy = reconnect_unless_logged_out,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This is the app factory pattern that allows:
    - Testing with a fake session factory
    - Environment-specific setup
    - ASGI server compatibility
    """
    if config is None:
        config = AppConfig.load_from_env()

    logger.configure(level=config.log_level, json_output=config.enable_json_logs)

    if session_factory is None:
        session_factory = build_session_factory(config)

    # One bridge per process
    bridge = ConnectionBridge(
        session_factory=session_factory,
        reconnect_policy=reconnect_policy,
        qr_url=config.qr_url,
    )

    @asynccontextmanager
    async def lifespan(fastapi_app: FastAPI) -> AsyncIterator[None]:
        log_event({
            "ts_ms": now_ms(),
            "event_type": "SERVER_STARTED",
            "env": config.env,
            "url": config.public_base_url,
        })
        fastapi_app.state.bridge.start()
        try:
            yield
        finally:
            await fastapi_app.state.bridge.shutdown()

    app = FastAPI(title="WhatsApp Gateway API", lifespan=lifespan)

    app.state.config = config
    app.state.bridge = bridge

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten later
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    register_routes(app)

    return app


def build_session_factory(config: AppConfig) -> SessionFactory:
    """Session factory backed by pyaileys and the configured auth folder."""
    return partial(PyaileysSession, auth_dir=config.auth_dir)
