# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from config import AppConfig


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in ("PORT", "HOST", "AUTH_DIR", "PUBLIC_BASE_URL", "LOG_LEVEL", "ENABLE_JSON_LOGS"):
        monkeypatch.delenv(name, raising=False)

    config = AppConfig.load_from_env()

    assert config.port == 3000
    assert config.auth_dir == "baileys-auth"
    assert config.enable_json_logs
    assert config.qr_url == "http://localhost:3000/qr"


def test_port_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.delenv("PUBLIC_BASE_URL", raising=False)

    config = AppConfig.load_from_env()

    assert config.port == 8080
    assert config.qr_url == "http://localhost:8080/qr"


def test_invalid_port_raises(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PORT", "eighty")

    with pytest.raises(ValueError):
        AppConfig.load_from_env()
