"""Tests for option and feature API endpoints."""

from fastapi.testclient import TestClient


class TestOptionEndpoints:
    """Tests for /admin/options."""

    def test_list_with_features(self, auth_client: TestClient, options: dict) -> None:
        """Options by name with their features by value."""
        response = auth_client.get("/admin/options")

        assert response.status_code == 200
        data = response.json()
        assert [o["name"] for o in data] == ["Color", "Talla"]
        assert [f["value"] for f in data[0]["features"]] == ["Azul", "Rojo"]
        assert "ETag" in response.headers

    def test_create_requires_name(self, auth_client: TestClient) -> None:
        """An empty name is rejected with the localized message."""
        response = auth_client.post("/admin/options", json={"name": "  "})

        assert response.status_code == 422
        assert response.json()["message"] == "El nombre es requerido"

    def test_rename(self, auth_client: TestClient, options: dict) -> None:
        """PATCH renames."""
        response = auth_client.patch(f"/admin/options/{options['size']}", json={"name": "Tamaño"})
        assert response.json()["name"] == "Tamaño"

    def test_delete_blocked_by_features(self, auth_client: TestClient, options: dict) -> None:
        """Options with features are kept."""
        response = auth_client.delete(f"/admin/options/{options['color']}")

        assert response.status_code == 409
        assert response.json()["message"] == "No se puede eliminar una opción con características"

    def test_delete_after_features(self, auth_client: TestClient, options: dict) -> None:
        """Removing the features first allows the delete."""
        for feature_id in options["sizes"]:
            assert auth_client.delete(f"/admin/features/{feature_id}").status_code == 200

        response = auth_client.delete(f"/admin/options/{options['size']}")

        assert response.status_code == 200
        assert [o["name"] for o in auth_client.get("/admin/options").json()] == ["Color"]


class TestFeatureEndpoints:
    """Tests for /admin/features."""

    def test_create_for_missing_option(self, auth_client: TestClient) -> None:
        """The option must exist."""
        response = auth_client.post("/admin/features", json={"value": "XL", "option_id": 999})

        assert response.status_code == 404
        assert response.json()["message"] == "Opción no encontrada"

    def test_update_keeps_option(self, auth_client: TestClient, options: dict) -> None:
        """An option id in the body is ignored."""
        response = auth_client.patch(
            f"/admin/features/{options['sizes'][0]}",
            json={"value": "L", "option_id": options["color"]},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": options["sizes"][0],
            "value": "L",
            "option_id": options["size"],
        }

    def test_delete_missing(self, auth_client: TestClient) -> None:
        """Unknown features are 404."""
        assert auth_client.delete("/admin/features/999").status_code == 404
