"""Test helper utilities: scripted transport and sample provider records."""

from tests.helpers.fake_transport import (
    FakeTransport,
    city,
    counterparty,
    envelope,
    warehouse,
)

__all__ = [
    "FakeTransport",
    "city",
    "counterparty",
    "envelope",
    "warehouse",
]
