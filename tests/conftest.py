"""
Shared test fixtures — packaged rate tables, an empty calendar, test client.
"""

import pytest
from fastapi.testclient import TestClient

from quote_engine.business_calendar import EMPTY_CALENDAR
from quote_engine.main import app
from quote_engine.rate_tables import load_bundle


@pytest.fixture(scope="session")
def rates():
    """The packaged rate bundle, loaded once."""
    return load_bundle()


@pytest.fixture
def empty_calendar():
    """Mon–Fri calendar with no holidays or working weekends."""
    return EMPTY_CALENDAR


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


def sample_payload(**overrides):
    """10×10cm, 1.6mm, 2-layer FR4, 1oz, qty 20 — the reference board."""
    payload = {
        "pcb_type": "fr4",
        "layers": 2,
        "outer_copper_weight": "1",
        "thickness_mm": 1.6,
        "length_cm": 10,
        "width_cm": 10,
        "quantity": 20,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_spec():
    """Factory for PcbSpec instances built from the reference board."""
    from quote_engine.schemas import PcbSpec

    def _make(**overrides):
        return PcbSpec.from_payload(sample_payload(**overrides))

    return _make
