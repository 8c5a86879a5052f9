"""
Shared fixtures: temporary settings and a running application client.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings, get_settings
from storefront.main import create_app


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def make_settings(tmp_path):
    """Factory for settings rooted in the test's temporary directory."""
    def factory(**overrides) -> Settings:
        values = dict(
            data_dir=tmp_path,
            database_path=tmp_path / "test.db",
            snapshot_path=tmp_path / "test.snapshot.db",
            snapshot_interval=60.0,
        )
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture(params=["sqlite", "memory"])
def client(request, make_settings):
    """Client for a running app, once per store backend."""
    app = create_app(make_settings(store_backend=request.param))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def shop(client):
    response = client.post(
        "/api/shops",
        json={"name": "Acme", "subdomain": "acme", "owner_email": "a@b.com"},
    )
    assert response.status_code == 201
    return response.json()["shop"]
