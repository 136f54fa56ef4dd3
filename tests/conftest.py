import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Pas de Redis pendant les tests; email admin connu
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("ADMIN_EMAILS", "admin@example.com")

from storefront.app_setup.factory import create_app
from tests.helpers import ADMIN_EMAIL, USER_EMAIL, FakeServices, catalog_body, make_token

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture()
def services() -> FakeServices:
    fake = FakeServices()
    fake.set("GET", "/api/v1/vaccines-with-inventory", json=catalog_body())
    fake.set("POST", "/api/v1/signin", json={"success": True, "data": make_token({"id": 42, "email": USER_EMAIL})})
    return fake

@pytest.fixture()
def app(services):
    return create_app(http_transport=services.transport())

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture()
def user_client(client) -> TestClient:
    """Client avec une session utilisateur ouverte (id 42)."""
    res = client.post("/api/v1/session/login", json={"email": USER_EMAIL, "password": "secret123"})
    assert res.status_code == 200, res.text
    return client

@pytest.fixture()
def admin_client(client, services) -> TestClient:
    services.set("POST", "/api/v1/signin", json={"success": True, "data": make_token({"id": 1, "email": ADMIN_EMAIL})})
    res = client.post("/api/v1/session/login", json={"email": ADMIN_EMAIL, "password": "secret123"})
    assert res.status_code == 200, res.text
    return client
