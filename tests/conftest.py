import json
import socket
from dataclasses import replace
from pathlib import Path

import pytest

from diga.binding import LxmlDocumentSerializer
from diga.samples import (
    SAMPLE_BILLING_INFORMATION,
    SAMPLE_DIGA_INFORMATION,
    build_sample_invoice,
)


VIOLATIONS = []
ARTIFACTS_DIR = Path("artifacts")
REPORT = ARTIFACTS_DIR / "egress-violations.json"


@pytest.fixture(autouse=True, scope="session")
def egress_guard():
    """Document assembly must never touch the network."""

    real_getaddrinfo = socket.getaddrinfo
    real_create_connection = socket.create_connection

    def guard_getaddrinfo(host, *args, **kwargs):
        VIOLATIONS.append({"fn": "getaddrinfo", "host": str(host)})
        raise RuntimeError("Egress blocked: getaddrinfo disallowed")

    def guard_create_connection(address, *args, **kwargs):
        VIOLATIONS.append({"fn": "create_connection", "address": str(address)})
        raise RuntimeError("Egress blocked: create_connection disallowed")

    socket.getaddrinfo = guard_getaddrinfo  # type: ignore[assignment]
    socket.create_connection = guard_create_connection  # type: ignore[assignment]

    yield

    socket.getaddrinfo = real_getaddrinfo  # type: ignore[assignment]
    socket.create_connection = real_create_connection  # type: ignore[assignment]

    if VIOLATIONS:
        ARTIFACTS_DIR.mkdir(parents=True, exist_ok=True)
        REPORT.write_text(json.dumps(VIOLATIONS, indent=2))


@pytest.fixture
def diga_information():
    return SAMPLE_DIGA_INFORMATION


@pytest.fixture
def reverse_charge_information():
    return replace(SAMPLE_DIGA_INFORMATION, reverse_charge_vat=True)


@pytest.fixture
def billing_information():
    return SAMPLE_BILLING_INFORMATION


@pytest.fixture
def invoice():
    return build_sample_invoice()


@pytest.fixture
def serializer():
    return LxmlDocumentSerializer(pretty_print=True)
