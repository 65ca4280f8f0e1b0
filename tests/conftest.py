from datetime import datetime

import pytest

from freight_engine.schemas import Location, Package
from freight_engine.services.fedex import FedExService
from helpers import EDT, StubTransport, load_xml

FEDEX_ENV_VARS = ("FEDEX_KEY", "FEDEX_PASSWORD", "FEDEX_ACCOUNT", "FEDEX_METER", "FEDEX_TEST_MODE", "FEDEX_TIMEOUT")


@pytest.fixture
def xml_fixture():
    return load_xml


@pytest.fixture
def locations():
    return {
        "ottawa": Location(city="Ottawa", state="ON", postal_code="K1P 1J1", country="CA"),
        "beverly_hills": Location(city="Beverly Hills", state="CA", postal_code="90210", country="US"),
        "beverly_hills_commercial": Location(
            city="Beverly Hills", state="CA", postal_code="90210", country="US", address_type="commercial",
        ),
        "wallingford": Location(city="Wallingford", state="CT", postal_code="06492", country="US"),
    }


@pytest.fixture
def packages():
    return {
        "book": Package(weight=0.25, length=9.5, width=6.2, height=1.1, weight_units="KG", dimension_units="CM"),
        "wii": Package(weight=3.4, length=15.0, width=10.0, height=4.5, weight_units="KG", dimension_units="CM"),
    }


@pytest.fixture
def fedex_factory():
    """Builds a FedExService wired to a StubTransport and a fixed clock."""

    def build(body, now=None, **kwargs):
        transport = StubTransport(body)
        fixed_now = now or datetime(2013, 3, 11, 0, 0, tzinfo=EDT)
        service = FedExService(
            key="1111",
            password="2222",
            account="3333",
            meter="4444",
            transport=transport,
            clock=lambda: fixed_now,
            **kwargs,
        )
        return service, transport

    return build


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores the absence after .env loading
    for name in FEDEX_ENV_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch
