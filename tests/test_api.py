"""Tests for the HTTP interface."""

import pytest
from fastapi.testclient import TestClient
from subway_favorites.api import create_app
from subway_favorites.network import default_graph
from subway_favorites.service import FavoriteResolutionService

MEMBER = {"X-Member-Id": "1"}
OTHER_MEMBER = {"X-Member-Id": "2"}


@pytest.fixture
def client():
    service = FavoriteResolutionService(default_graph())
    return TestClient(create_app(service))


def register(client, source="Kangnam", target="Hanti", headers=MEMBER):
    return client.post("/favorite/me", json={"source": source, "target": target}, headers=headers)


def test_health(client):
    assert client.get("/").json()["status"] == "ok"


def test_list_stations(client):
    body = client.get("/stations").json()
    assert body["count"] == len(body["stations"])
    assert body["stations"][0] == {"id": 1, "name": "Kangnam"}


def test_find_path(client):
    response = client.get("/paths", params={"source": "Kangnam", "target": "Hanti", "type": "DISTANCE"})
    assert response.status_code == 200
    body = response.json()
    assert [s["name"] for s in body["stations"]] == ["Kangnam", "Yeoksam", "Seolleung", "Hanti"]
    assert body["distance"] == 2700
    assert body["transfers"] == 1


def test_find_path_bad_type(client):
    response = client.get("/paths", params={"source": "Kangnam", "target": "Hanti", "type": "FARE"})
    assert response.status_code == 400
    assert "errorMessage" in response.json()


def test_find_path_unknown_station(client):
    response = client.get("/paths", params={"source": "Kangnam", "target": "Busan"})
    assert response.status_code == 404
    assert response.json()["errorMessage"] == "Station not found: Busan"


def test_find_path_same_station(client):
    response = client.get("/paths", params={"source": "Kangnam", "target": "Kangnam"})
    assert response.status_code == 400


def test_requires_member(client):
    """Test favorite endpoints reject requests without a member."""
    headers = {}
    assert register(client, headers=headers).status_code == 401
    assert client.get("/favorite/me", headers=headers).status_code == 401
    response = client.delete("/favorite/me/1", headers=headers)
    assert response.status_code == 401
    assert response.json()["errorMessage"] == "Invalid token!"


def test_register_favorite(client):
    """Test registration returns 201 with a Location header."""
    response = register(client)
    assert response.status_code == 201
    body = response.json()
    assert response.headers["Location"] == f"/favorite/me/{body['id']}"
    assert body["source"] == {"id": 1, "name": "Kangnam"}
    assert body["target"] == {"id": 2, "name": "Hanti"}


def test_register_duplicate(client):
    register(client)
    response = register(client, "Hanti", "Kangnam")
    assert response.status_code == 409


def test_retrieve_favorites(client):
    register(client, "Kangnam", "Hanti")
    register(client, "Dogok", "Yangjae")
    register(client, "Kangnam", "Dogok", headers=OTHER_MEMBER)

    response = client.get("/favorite/me", headers=MEMBER)
    assert response.status_code == 200
    favorites = response.json()["favoritePaths"]
    assert len(favorites) == 2
    assert favorites[0]["source"]["id"] == 1
    assert favorites[1]["source"]["name"] == "Dogok"
    assert favorites[0]["path"]["stations"][-1]["name"] == "Hanti"


def test_delete_favorite(client):
    favorite_id = register(client).json()["id"]
    assert client.delete(f"/favorite/me/{favorite_id}", headers=MEMBER).status_code == 204
    assert client.get("/favorite/me", headers=MEMBER).json()["favoritePaths"] == []


def test_delete_hides_other_members_favorites(client):
    """Test foreign and missing favorites give the same response."""
    favorite_id = register(client).json()["id"]

    foreign = client.delete(f"/favorite/me/{favorite_id}", headers=OTHER_MEMBER)
    missing = client.delete("/favorite/me/999", headers=OTHER_MEMBER)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["errorMessage"].startswith("Favorite path not found")
    assert len(client.get("/favorite/me", headers=MEMBER).json()["favoritePaths"]) == 1


def test_register_bad_path_type(client):
    response = client.post(
        "/favorite/me", json={"source": "Kangnam", "target": "Hanti", "type": "FARE"}, headers=MEMBER
    )
    assert response.status_code == 400
    assert "Unknown path type: FARE" in response.json()["errorMessage"]
    assert client.get("/favorite/me", headers=MEMBER).json()["favoritePaths"] == []


def test_register_path_type_any_case(client):
    response = client.post(
        "/favorite/me", json={"source": "Kangnam", "target": "Hanti", "type": "duration"}, headers=MEMBER
    )
    assert response.status_code == 201
    assert response.json()["path"]["type"] == "DURATION"


def test_register_missing_field(client):
    response = client.post("/favorite/me", json={"source": "Kangnam"}, headers=MEMBER)
    assert response.status_code == 400
    assert response.json()["errorMessage"].startswith("target:")


@pytest.mark.parametrize(
    "method, url, status_code",
    [("get", "/nowhere", 404), ("put", "/favorite/me", 405)],
)
def test_routing_errors_use_error_body(client, method, url, status_code):
    response = getattr(client, method)(url, headers=MEMBER)
    assert response.status_code == status_code
    assert set(response.json()) == {"errorMessage"}
