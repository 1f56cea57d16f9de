"""
WhatsApp address normalization.

A bare phone number (country code, digits only) becomes
"<number>@s.whatsapp.net"; an address that already carries the
user suffix passes through unchanged.
"""

from __future__ import annotations

from constants import USER_ADDRESS_SUFFIX


def normalize_address(destination: str) -> str:
    if USER_ADDRESS_SUFFIX in destination:
        return destination
    return f"{destination}{USER_ADDRESS_SUFFIX}"
