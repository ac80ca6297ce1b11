"""Root-level pytest fixtures for all tests.

Provides:
- A scripted fake transport and services built on it
- Isolation of the process-wide area index between tests
"""

import pytest

from novaposhta.resolvers.area_index import reset_area_index
from novaposhta.services.novaposhta_service import NovaPoshtaService
from tests.helpers.fake_transport import FakeTransport


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Empty scripted transport."""
    return FakeTransport()


@pytest.fixture
def service(fake_transport: FakeTransport) -> NovaPoshtaService:
    """Raw API service over the fake transport."""
    return NovaPoshtaService(fake_transport)


@pytest.fixture(autouse=True)
def fresh_area_index():
    """Force every test to load the area index itself."""
    reset_area_index()
    yield
    reset_area_index()
