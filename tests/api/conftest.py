"""Shared fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from catalog_api.infrastructure.config import settings
from catalog_api.main import app


@pytest.fixture
def client(app_database: None) -> Generator[TestClient, None, None]:
    """Create test client without authentication."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(app_database: None) -> Generator[TestClient, None, None]:
    """Create test client authenticated with the admin API key."""
    with TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.admin_api_key}"},
    ) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {settings.admin_api_key}"}


@pytest.fixture
def taxonomy(auth_client: TestClient) -> dict[str, int]:
    """Ropa > Camisetas > Manga corta, created through the API."""
    family = auth_client.post("/admin/families", json={"name": "Ropa"}).json()
    category = auth_client.post(
        "/admin/categories",
        json={"name": "Camisetas", "family_id": family["id"]},
    ).json()
    subcategory = auth_client.post(
        "/admin/subcategories",
        json={"name": "Manga corta", "category_id": category["id"]},
    ).json()
    return {
        "family_id": family["id"],
        "category_id": category["id"],
        "subcategory_id": subcategory["id"],
    }


@pytest.fixture
def options(auth_client: TestClient) -> dict[str, list[int] | int]:
    """Color (Azul, Rojo) and Talla (M, S), created through the API."""
    color = auth_client.post("/admin/options", json={"name": "Color"}).json()
    size = auth_client.post("/admin/options", json={"name": "Talla"}).json()
    colors = [
        auth_client.post("/admin/features", json={"value": v, "option_id": color["id"]}).json()["id"]
        for v in ("Azul", "Rojo")
    ]
    sizes = [
        auth_client.post("/admin/features", json={"value": v, "option_id": size["id"]}).json()["id"]
        for v in ("M", "S")
    ]
    return {"color": color["id"], "size": size["id"], "colors": colors, "sizes": sizes}
