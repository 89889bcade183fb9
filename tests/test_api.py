"""Integration tests for the HTTP API via TestClient."""

from sqlalchemy.exc import OperationalError

from conftest import JPEG_BYTES, PNG_BYTES, data_url


def _add(client, name, times=1, **extra):
    for _ in range(times):
        response = client.post("/inventory/", json={"name": name, **extra})
        assert response.status_code == 200
    return response.json()


def _inventory(client):
    return {it["name"]: it["quantity"] for it in client.get("/inventory/").json()}


class TestAddEndpoint:
    def test_add_to_empty_collection(self, client):
        data = _add(client, "rice")

        assert data["ok"] is True
        assert data["item"] == {"name": "rice", "quantity": 1, "image_url": ""}
        assert data["inventory"] == [{"name": "rice", "quantity": 1, "image_url": ""}]

    def test_add_twice_increments(self, client):
        data = _add(client, "rice", times=2)
        assert data["item"]["quantity"] == 2

    def test_blank_name_rejected(self, client):
        response = client.post("/inventory/", json={"name": "   "})
        assert response.status_code == 422


class TestReadEndpoints:
    def test_get_item(self, client):
        _add(client, "rice", image_url="http://img/rice")

        response = client.get("/inventory/rice")

        assert response.status_code == 200
        assert response.json()["image_url"] == "http://img/rice"

    def test_get_missing_item(self, client):
        assert client.get("/inventory/ghost").status_code == 404

    def test_database_error_is_503(self, client):
        from main import app
        from routers.inventory import get_inventory_store

        class UnreachableStore:
            async def get(self, name):
                raise OperationalError("SELECT", {}, Exception("database is down"))

        app.dependency_overrides[get_inventory_store] = UnreachableStore
        try:
            response = client.get("/inventory/rice")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert "Failed to read item" in response.json()["detail"]

    def test_list_filters(self, client):
        _add(client, "rice", times=6)
        _add(client, "brown rice", times=1)
        _add(client, "beans", times=5)

        response = client.get("/inventory/", params={"search": "RICE", "quantity_filter": "5"})

        assert [it["name"] for it in response.json()] == ["rice"]

    def test_list_rejects_unknown_filter(self, client):
        assert client.get("/inventory/", params={"quantity_filter": "3"}).status_code == 422


class TestMutationEndpoints:
    def test_update_image(self, client):
        _add(client, "rice", times=3)

        response = client.patch("/inventory/rice", json={"image_url": "http://img/rice"})

        assert response.status_code == 200
        assert response.json()["item"] == {"name": "rice", "quantity": 3, "image_url": "http://img/rice"}

    def test_update_missing_is_404(self, client):
        response = client.patch("/inventory/ghost", json={"image_url": "http://img/ghost"})

        assert response.status_code == 404
        assert _inventory(client) == {}

    def test_decrement_then_remove(self, client):
        _add(client, "rice", times=2)

        response = client.post("/inventory/rice/decrement")
        assert response.json()["item"]["quantity"] == 1

        response = client.post("/inventory/rice/decrement")
        assert response.status_code == 200
        assert response.json()["inventory"] == []

    def test_decrement_missing_is_404(self, client):
        assert client.post("/inventory/ghost/decrement").status_code == 404

    def test_rename(self, client):
        _add(client, "rice", times=2)

        response = client.post("/inventory/rice/rename", json={"new_name": "basmati"})

        assert response.status_code == 200
        assert _inventory(client) == {"basmati": 2}

    def test_rename_conflict_is_409_and_changes_nothing(self, client):
        _add(client, "rice", times=2)
        _add(client, "beans")

        response = client.post("/inventory/rice/rename", json={"new_name": "beans"})

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]
        assert _inventory(client) == {"rice": 2, "beans": 1}

    def test_rename_missing_is_404(self, client):
        response = client.post("/inventory/ghost/rename", json={"new_name": "spirit"})
        assert response.status_code == 404

    def test_delete(self, client):
        _add(client, "rice", times=4)

        assert client.delete("/inventory/rice").status_code == 200
        assert client.delete("/inventory/rice").status_code == 404


class TestImageEndpoints:
    def test_upload_then_serve_round_trip(self, client):
        response = client.post("/images/upload", json={"item_key": "rice", "image": data_url(PNG_BYTES)})

        assert response.status_code == 201
        body = response.json()
        assert body["key"] == "images/rice"

        served = client.get(body["url"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES
        assert served.headers["content-type"] == "image/png"

    def test_reupload_overwrites_under_same_url(self, client):
        first = client.post("/images/upload", json={"item_key": "olive oil", "image": data_url(PNG_BYTES)})
        second = client.post(
            "/images/upload",
            json={"item_key": "olive oil", "image": data_url(JPEG_BYTES, "image/jpeg")},
        )

        assert first.json()["url"] == second.json()["url"]
        assert client.get(second.json()["url"]).content == JPEG_BYTES

    def test_bad_payload_is_400(self, client):
        response = client.post("/images/upload", json={"item_key": "rice", "image": "data:image/png;base64,%%%"})
        assert response.status_code == 400

    def test_serve_missing_is_404(self, client):
        assert client.get("/images/serve/ghost").status_code == 404


class TestPantrySubmitEndpoint:
    def test_add_with_photo(self, client):
        view = {"modal_open": True, "item_name": "rice", "image": data_url(), "search_term": "ri"}

        response = client.post("/pantry/submit", json=view)

        assert response.status_code == 200
        body = response.json()
        assert body["result"]["ok"] is True
        assert body["view"]["modal_open"] is False
        assert body["view"]["search_term"] == "ri"
        assert [it["name"] for it in body["visible"]] == ["rice"]
        assert client.get(body["result"]["item"]["image_url"]).content == PNG_BYTES

    def test_rename_conflict_reported_on_view(self, client):
        _add(client, "rice")
        _add(client, "beans")
        view = {
            "modal_open": True,
            "is_adding_new": False,
            "current_item": "rice",
            "original_name": "rice",
            "item_name": "beans",
        }

        response = client.post("/pantry/submit", json=view)

        body = response.json()
        assert body["result"]["error"] == "DUPLICATE_NAME"
        assert body["view"]["modal_open"] is True
        assert "already exists" in body["view"]["last_error"]

    def test_edit_without_changes_closes_modal(self, client):
        _add(client, "rice")
        view = {
            "modal_open": True,
            "is_adding_new": False,
            "current_item": "rice",
            "original_name": "rice",
            "item_name": "rice",
        }

        body = client.post("/pantry/submit", json=view).json()

        assert body["result"]["ok"] is True
        assert body["view"]["modal_open"] is False
        assert _inventory(client) == {"rice": 1}
