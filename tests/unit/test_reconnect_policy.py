# pylint: disable=missing-module-docstring,missing-function-docstring

import pytest

from session.notifications import DisconnectReason, classify_status_code
from session.reconnect import never_reconnect, reconnect_unless_logged_out


@pytest.mark.parametrize(
    ("status_code", "reason"),
    [
        (401, DisconnectReason.LOGGED_OUT),
        (403, DisconnectReason.FORBIDDEN),
        (408, DisconnectReason.CONNECTION_LOST),
        (411, DisconnectReason.MULTIDEVICE_MISMATCH),
        (428, DisconnectReason.CONNECTION_CLOSED),
        (440, DisconnectReason.CONNECTION_REPLACED),
        (500, DisconnectReason.BAD_SESSION),
        (503, DisconnectReason.UNAVAILABLE_SERVICE),
        (515, DisconnectReason.RESTART_REQUIRED),
        (999, DisconnectReason.UNKNOWN),
        (None, DisconnectReason.UNKNOWN),
    ],
)
def test_classify_status_code(status_code, reason):
    assert classify_status_code(status_code) is reason


def test_only_logout_is_terminal():
    assert not reconnect_unless_logged_out(DisconnectReason.LOGGED_OUT)

    for reason in DisconnectReason:
        if reason is DisconnectReason.LOGGED_OUT:
            continue
        assert reconnect_unless_logged_out(reason), reason


def test_never_reconnect():
    assert not any(never_reconnect(reason) for reason in DisconnectReason)
