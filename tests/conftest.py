"""
tests/conftest.py

Fixtures communes: source d'inscriptions en mémoire et client FastAPI
avec la source injectée via dependency_overrides.
"""

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_registration_source
from app.main import app
from tests.factories import FakeRegistrationSource


@pytest.fixture
def source():
    """Source vide, à peupler par chaque test."""
    return FakeRegistrationSource()


@pytest.fixture
def client(source):
    """TestClient avec la source en mémoire."""
    app.dependency_overrides[get_registration_source] = lambda: source
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
