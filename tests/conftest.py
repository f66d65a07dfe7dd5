"""
tests/conftest.py - Pytest configuration and fixtures

Makes the test suite clock-independent:
- every engine test builds its reference instants explicitly
- health status and request correlation are reset between tests
"""

import os
import sys
from datetime import datetime

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.invariants import reset_health_status
from core.structured_logging import clear_request_id
from core.time_cet import CET


@pytest.fixture(autouse=True)
def clean_runtime_state():
    """Start and finish every test with healthy status and no request id."""
    reset_health_status()
    clear_request_id()
    yield
    reset_health_status()
    clear_request_id()


@pytest.fixture
def cet():
    """Build civil-time instants: cet(2024, 1, 15, 12, 30)."""
    def _build(year, month, day, hour=0, minute=0, second=0, millisecond=0, fold=0):
        return datetime(year, month, day, hour, minute, second, millisecond * 1000, tzinfo=CET, fold=fold)
    return _build


@pytest.fixture
def client():
    """FastAPI test client with lifespan (startup contract check) executed."""
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as test_client:
        yield test_client
