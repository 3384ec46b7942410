# Tests for city CRUD and the read-through cache invalidation.

from __future__ import annotations

from cache import cache
from tests.support import create_city


def test_create_and_fetch_city(client, admin_headers, user_headers) -> None:
    response = client.post("/api/v1/cities", headers=admin_headers, json={
        "name": "Ramallah", "country": "Palestine", "post_office": "R100", "number_of_hotels": 5,
    })
    assert response.status_code == 201
    city = response.json()
    assert response.headers["location"].endswith(f"/api/v1/cities/{city['id']}")

    fetched = client.get(f"/api/v1/cities/{city['id']}", headers=user_headers)
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Ramallah"


def test_city_validation(client, admin_headers) -> None:
    response = client.post("/api/v1/cities", headers=admin_headers, json={
        "name": "Ab", "country": "Palestine", "post_office": "R100", "number_of_hotels": 0,
    })
    assert response.status_code == 400


def test_list_is_cached_and_cleared_on_write(client, admin_headers, user_headers) -> None:
    create_city(client, admin_headers)
    assert len(client.get("/api/v1/cities", headers=user_headers).json()) == 1
    assert cache.get("cities-list") is not None

    create_city(client, admin_headers, name="Jenin")
    assert cache.get("cities-list") is None
    assert len(client.get("/api/v1/cities", headers=user_headers).json()) == 2


def test_patch_city_without_if_match(client, admin_headers, user_headers) -> None:
    city = create_city(client, admin_headers)
    client.get(f"/api/v1/cities/{city['id']}", headers=user_headers)

    response = client.patch(f"/api/v1/cities/{city['id']}", headers=admin_headers, json={"name": "Nablus City"})
    assert response.status_code == 200
    assert response.json()["name"] == "Nablus City"
    assert response.json()["country"] == city["country"]

    # Item cache was dropped by the update
    assert client.get(f"/api/v1/cities/{city['id']}", headers=user_headers).json()["name"] == "Nablus City"


def test_patch_and_delete_missing_city(client, admin_headers) -> None:
    assert client.patch("/api/v1/cities/9", headers=admin_headers, json={"name": "Nothing"}).status_code == 404
    assert client.delete("/api/v1/cities/9", headers=admin_headers).status_code == 204


def test_user_cannot_delete_city(client, admin_headers, user_headers) -> None:
    city = create_city(client, admin_headers)
    assert client.delete(f"/api/v1/cities/{city['id']}", headers=user_headers).status_code == 403
