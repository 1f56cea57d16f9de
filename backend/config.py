"""
Application configuration.

Responsibilities:
- Load deployment-specific configuration
- Read environment variables
- Provide a typed, immutable config object

Non-responsibilities:
- No connection-state logic
- No protocol constants
- No runtime mutation
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from constants import DEFAULT_AUTH_DIR, DEFAULT_PORT


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable application configuration.

    Constructed once at process startup.
    Passed downward to the app factory and the connection bridge.
    """

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    env: str
    log_level: str

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    host: str
    port: int
    public_base_url: str

    # ------------------------------------------------------------------
    # WhatsApp session
    # ------------------------------------------------------------------

    auth_dir: str

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    enable_json_logs: bool

    @property
    def qr_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}/qr"

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @staticmethod
    def load_from_env() -> AppConfig:
        """
        Load configuration from environment variables.

        Raises:
            ValueError if PORT is not an integer.
        """
        port = int(os.environ.get("PORT", str(DEFAULT_PORT)))

        return AppConfig(
            env=os.environ.get("ENV", "dev"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),

            host=os.environ.get("HOST", "0.0.0.0"),
            port=port,
            public_base_url=os.environ.get(
                "PUBLIC_BASE_URL", f"http://localhost:{port}"
            ),

            auth_dir=os.environ.get("AUTH_DIR", DEFAULT_AUTH_DIR),

            enable_json_logs=os.environ.get("ENABLE_JSON_LOGS", "1") == "1",
        )
