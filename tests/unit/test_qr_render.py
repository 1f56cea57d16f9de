# pylint: disable=missing-module-docstring,missing-function-docstring

import base64

import pytest

from server import qr as qr_mod
from server.qr import render_qr_data_uri
from session.errors import RenderFailed


def test_renders_png_data_uri():
    uri = render_qr_data_uri("2@abc,def,ghi")

    prefix = "data:image/png;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]).startswith(b"\x89PNG")


def test_render_error_becomes_render_failed(monkeypatch: pytest.MonkeyPatch):
    def broken_make(_data):
        raise ValueError("data too long")

    monkeypatch.setattr(qr_mod.qrcode, "make", broken_make)

    with pytest.raises(RenderFailed):
        render_qr_data_uri("x")
