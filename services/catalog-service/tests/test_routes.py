"""
Tests for the /catalogs REST routes.

These drive the full application through FastAPI's TestClient with the
in-memory store installed.
"""

import pytest

from catalog_service.app.errors import StoreUnavailableError
from conftest import FailingItemStore

LAPTOP = {"name": "Laptop", "price": 60000, "category": "Electronics"}


def _create(client, fields):
    response = client.post("/catalogs", json=fields)
    assert response.status_code == 201
    return response.json()["data"]


class TestLiveness:
    def test_test_route(self, client):
        response = client.get("/catalogs/test")
        assert response.status_code == 200
        assert response.text == "Test route OK"

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True, "service": "catalog-service"}


class TestItemLifecycle:
    def test_create_update_delete(self, client):
        response = client.post("/catalogs", json=LAPTOP)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Item created successfully"
        assert body["data"]["name"] == "Laptop"
        item_id = body["data"]["id"]

        response = client.put(f"/catalogs/{item_id}", json={"price": 25000})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Item updated successfully"
        assert body["data"]["price"] == 25000
        assert body["data"]["name"] == "Laptop"

        response = client.delete(f"/catalogs/{item_id}")
        assert response.status_code == 200
        assert response.json()["message"] == "Item deleted successfully"
        assert response.json()["data"]["name"] == "Laptop"

        response = client.delete(f"/catalogs/{item_id}")
        assert response.status_code == 404
        assert response.json() == {"message": "Item not found"}

    def test_patch_response_has_no_message(self, client):
        item = _create(client, {"name": "Headphones", "price": 2000, "category": "Electronics"})

        response = client.patch(f"/catalogs/{item['id']}", json={"price": 1500})

        assert response.status_code == 200
        assert response.json() == {"data": dict(item, price=1500.0)}

    def test_created_item_is_listed(self, client):
        item = _create(client, LAPTOP)
        listed = client.get("/catalogs").json()
        assert item in listed

    def test_trailing_slash_collection_paths(self, client):
        response = client.post("/catalogs/", json=LAPTOP)
        assert response.status_code == 201
        item = response.json()["data"]

        response = client.get("/catalogs/")
        assert response.status_code == 200
        assert response.json() == [item]

        response = client.get("/catalogs/", params={"category": "Books"})
        assert response.json() == []


class TestNotFound:
    @pytest.mark.parametrize("method", ["put", "patch"])
    def test_update_unknown_id(self, client, method):
        response = getattr(client, method)("/catalogs/does-not-exist", json={"price": 1})
        assert response.status_code == 404
        assert response.json() == {"message": "Item not found"}

    def test_delete_unknown_id(self, client):
        assert client.delete("/catalogs/does-not-exist").status_code == 404


class TestFiltering:
    @pytest.fixture(autouse=True)
    def seeded(self, client):
        for fields in (
            {"name": "The Alchemist", "price": 500, "category": "Books"},
            {"name": "Atomic Habits", "price": 650, "category": "Books"},
            {"name": "Headphones", "price": 500, "category": "Electronics"},
        ):
            _create(client, fields)

    def _names(self, client, query):
        response = client.get("/catalogs", params=query)
        assert response.status_code == 200
        return sorted(i["name"] for i in response.json())

    def test_no_query_returns_everything(self, client):
        assert self._names(client, {}) == ["Atomic Habits", "Headphones", "The Alchemist"]

    def test_category(self, client):
        assert self._names(client, {"category": "Books"}) == ["Atomic Habits", "The Alchemist"]

    def test_name(self, client):
        assert self._names(client, {"name": "Headphones"}) == ["Headphones"]

    def test_price_is_numeric(self, client):
        assert self._names(client, {"price": "500"}) == ["Headphones", "The Alchemist"]
        assert self._names(client, {"price": "500.0"}) == ["Headphones", "The Alchemist"]

    def test_conjunction(self, client):
        assert self._names(client, {"category": "Books", "price": "500"}) == ["The Alchemist"]

    def test_empty_parameter_imposes_nothing(self, client):
        assert len(self._names(client, {"category": ""})) == 3

    def test_no_match(self, client):
        assert self._names(client, {"category": "Toys"}) == []

    def test_non_numeric_price_is_server_error(self, client):
        response = client.get("/catalogs", params={"price": "cheap"})
        assert response.status_code == 500
        assert response.json()["message"] == "Error retrieving items"
        assert response.json()["error"]["type"] == "ValidationError"


class TestServerErrors:
    def test_incomplete_item_is_500(self, client):
        response = client.post("/catalogs", json={"name": "Laptop"})

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Error creating item"
        assert body["error"]["type"] == "ValidationError"
        assert "price" in body["error"]["message"]

    def test_store_failure_is_mapped(self, client, use_store):
        use_store(FailingItemStore(StoreUnavailableError()))

        response = client.get("/catalogs")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Error retrieving items",
            "error": {"type": "StoreUnavailable", "message": "Item store unavailable"},
        }

    @pytest.mark.parametrize("method,message", [
        ("put", "Error updating item"),
        ("patch", "Error patching item"),
    ])
    def test_unexpected_error_is_not_leaked(self, client, use_store, method, message):
        use_store(FailingItemStore(RuntimeError("secret connection string")))

        response = getattr(client, method)("/catalogs/a1", json={"price": 1})

        assert response.status_code == 500
        assert response.json() == {
            "message": message,
            "error": {"type": "InternalError", "message": "Unexpected server error"},
        }

    def test_delete_failure(self, client, use_store):
        use_store(FailingItemStore(StoreUnavailableError()))
        response = client.delete("/catalogs/a1")
        assert response.status_code == 500
        assert response.json()["message"] == "Error deleting item"


class TestRequestBodies:
    """Bodies are checked by the item schema, so bad shapes go through the 500 mapping."""

    def test_list_body_on_create(self, client, store):
        response = client.post("/catalogs", json=["Laptop", 60000, "Electronics"])

        assert response.status_code == 500
        assert response.json()["message"] == "Error creating item"
        assert response.json()["error"]["type"] == "ValidationError"
        assert store.items == {}

    def test_empty_body_on_create(self, client):
        response = client.post("/catalogs")

        assert response.status_code == 500
        assert response.json()["message"] == "Error creating item"
        assert response.json()["error"]["type"] == "ValidationError"

    def test_malformed_json_on_create(self, client):
        response = client.post(
            "/catalogs",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["error"] == {
            "type": "ValidationError",
            "message": "Request body is not valid JSON",
        }

    def test_empty_body_on_put(self, client):
        item = _create(client, LAPTOP)

        response = client.put(f"/catalogs/{item['id']}")

        assert response.status_code == 500
        assert response.json()["message"] == "Error updating item"
        assert response.json()["error"]["type"] == "ValidationError"

    def test_list_body_on_patch(self, client):
        item = _create(client, LAPTOP)

        response = client.patch(f"/catalogs/{item['id']}", json=[{"price": 1}])

        assert response.status_code == 500
        assert response.json()["message"] == "Error patching item"
        assert response.json()["error"]["type"] == "ValidationError"
