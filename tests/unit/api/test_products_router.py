"""Unit tests for the products router."""

import json
from unittest.mock import Mock

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from src.backend.api.http.app import app
from src.backend.api.http.deps import get_products_service, get_repositories
from src.backend.core.errors import ConflictError
from src.backend.core.services import Repositories

PRODUCTS_URL = "/api/v1/products"


@pytest.fixture
def client(relational_storage):
    """Test client whose repositories use the in-memory SQLite session."""

    def _repositories():
        yield Repositories(
            products=relational_storage.products, files=relational_storage.files
        )

    app.dependency_overrides[get_repositories] = _repositories
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create(client, headers, **payload):
    response = client.post(PRODUCTS_URL, json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


class TestAuthorization:
    def test_missing_token(self, client):
        response = client.get(PRODUCTS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_token(self, client):
        response = client.get(PRODUCTS_URL, headers={"Authorization": "Bearer nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_non_admin_is_forbidden(self, client, user_headers):
        response = client.get(PRODUCTS_URL, headers=user_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_guard_covers_every_route(self, client, user_headers):
        """Writes are refused to non-admins as well."""
        assert client.post(PRODUCTS_URL, json={}, headers=user_headers).status_code == 403
        assert client.delete(f"{PRODUCTS_URL}/1", headers=user_headers).status_code == 403


class TestCreateProduct:
    def test_create(self, client, admin_headers):
        """Creating answers 201 without exposing the password hash."""
        body = _create(
            client,
            admin_headers,
            email="Jane@Example.com",
            password="secret1",
            first_name="Jane",
            role={"id": 1},
            status={"id": 1},
        )

        assert body["id"] is not None
        assert body["email"] == "jane@example.com"
        assert body["provider"] == "email"
        assert body["role"] == {"id": 1}
        assert "password" not in body

    def test_duplicate_email(self, client, admin_headers):
        _create(client, admin_headers, email="jane@example.com")

        response = client.post(
            PRODUCTS_URL, json={"email": "jane@example.com"}, headers=admin_headers
        )

        assert response.status_code == 422
        assert response.json() == {"status": 422, "errors": {"email": "emailAlreadyExists"}}

    def test_unknown_photo(self, client, admin_headers):
        response = client.post(
            PRODUCTS_URL, json={"photo": {"id": "missing"}}, headers=admin_headers
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"photo": "imageNotExists"}

    def test_invalid_body(self, client, admin_headers):
        """Body validation failures use the framework's 422 response."""
        response = client.post(PRODUCTS_URL, json={"password": "123"}, headers=admin_headers)

        assert response.status_code == 422
        assert "detail" in response.json()

    def test_camel_case_body(self, client, admin_headers):
        """Bodies may use camelCase keys."""
        body = _create(
            client, admin_headers, firstName="Jane", lastName="Doe", socialId="g-1"
        )

        assert (body["first_name"], body["last_name"], body["social_id"]) == (
            "Jane",
            "Doe",
            "g-1",
        )

    def test_unknown_body_key(self, client, admin_headers):
        """Misnamed keys are rejected instead of being dropped."""
        response = client.post(
            PRODUCTS_URL, json={"fist_name": "Jane"}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_unexpected_error(self, client, admin_headers):
        """Unhandled failures answer 500 with the request id."""
        service = Mock()
        service.create.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_products_service] = lambda: service

        response = client.post(
            PRODUCTS_URL,
            json={"first_name": "Jane"},
            headers={**admin_headers, "X-Request-ID": "req-1"},
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error", "request_id": "req-1"}

    def test_storage_conflict(self, client, admin_headers):
        """A uniqueness violation from storage answers 409."""
        service = Mock()
        service.create.side_effect = ConflictError("duplicate email")
        app.dependency_overrides[get_products_service] = lambda: service

        response = client.post(
            PRODUCTS_URL, json={"email": "jane@example.com"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"status": 409, "detail": "duplicate email"}


class TestListProducts:
    def test_defaults_and_envelope(self, client, admin_headers):
        for index in range(3):
            _create(client, admin_headers, first_name=f"p{index}")

        response = client.get(PRODUCTS_URL, headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [p["first_name"] for p in body["data"]] == ["p0", "p1", "p2"]
        assert body["has_next_page"] is False

    def test_full_page_has_next(self, client, admin_headers):
        for index in range(3):
            _create(client, admin_headers, first_name=f"p{index}")

        body = client.get(
            PRODUCTS_URL, params={"limit": 2}, headers=admin_headers
        ).json()

        assert len(body["data"]) == 2
        assert body["has_next_page"] is True

    def test_limit_is_clamped(self, client, admin_headers):
        """A limit above 50 is served as 50."""
        for index in range(51):
            _create(client, admin_headers, first_name=f"p{index}")

        body = client.get(
            PRODUCTS_URL, params={"limit": 100}, headers=admin_headers
        ).json()

        assert len(body["data"]) == 50
        assert body["has_next_page"] is True

    def test_filter_and_sort(self, client, admin_headers):
        _create(client, admin_headers, first_name="a", role={"id": 1})
        _create(client, admin_headers, first_name="b", role={"id": 2})
        _create(client, admin_headers, first_name="c", role={"id": 2})

        response = client.get(
            PRODUCTS_URL,
            params={
                "filters": json.dumps({"roles": [{"id": 2}]}),
                "sort": json.dumps([{"orderBy": "firstName", "order": "DESC"}]),
            },
            headers=admin_headers,
        )

        assert [p["first_name"] for p in response.json()["data"]] == ["c", "b"]

    def test_huge_page_is_empty(self, client, admin_headers):
        """A page far beyond any stored offset answers an empty page."""
        _create(client, admin_headers, first_name="Jane")

        response = client.get(
            PRODUCTS_URL, params={"page": str(10**20)}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"data": [], "has_next_page": False}

    def test_no_passwords_in_list(self, client, admin_headers):
        _create(client, admin_headers, password="secret1")

        body = client.get(PRODUCTS_URL, headers=admin_headers).json()

        assert all("password" not in product for product in body["data"])

    @pytest.mark.parametrize(
        "params,field",
        [
            ({"filters": "{broken"}, "filters"),
            ({"sort": json.dumps([{"orderBy": "nope", "order": "ASC"}])}, "sort"),
            ({"page": "0"}, "page"),
        ],
    )
    def test_malformed_query(self, client, admin_headers, params, field):
        """Malformed query parameters answer 400 naming the field."""
        response = client.get(PRODUCTS_URL, params=params, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = [error["field"].split(".")[0] for error in response.json()["detail"]]
        assert fields == [field]


class TestSingleProduct:
    def test_get(self, client, admin_headers):
        created = _create(client, admin_headers, first_name="Jane")

        response = client.get(f"{PRODUCTS_URL}/{created['id']}", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["first_name"] == "Jane"

    def test_get_missing_is_null(self, client, admin_headers):
        response = client.get(f"{PRODUCTS_URL}/999", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() is None

    def test_patch(self, client, admin_headers):
        created = _create(client, admin_headers, first_name="Jane", last_name="Doe")

        response = client.patch(
            f"{PRODUCTS_URL}/{created['id']}",
            json={"first_name": "Janet", "role": {"id": 2}},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["first_name"] == "Janet"
        assert body["last_name"] == "Doe"
        assert body["role"] == {"id": 2}

    def test_patch_missing_is_null(self, client, admin_headers):
        response = client.patch(
            f"{PRODUCTS_URL}/999", json={"first_name": "x"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() is None

    def test_patch_business_rule(self, client, admin_headers):
        created = _create(client, admin_headers, first_name="Jane")

        response = client.patch(
            f"{PRODUCTS_URL}/{created['id']}",
            json={"status": {"id": 9}},
            headers=admin_headers,
        )

        assert response.status_code == 422
        assert response.json()["errors"] == {"status": "statusNotExists"}

    def test_delete_is_idempotent(self, client, admin_headers):
        created = _create(client, admin_headers, first_name="Jane")
        url = f"{PRODUCTS_URL}/{created['id']}"

        assert client.delete(url, headers=admin_headers).status_code == 204
        assert client.delete(url, headers=admin_headers).status_code == 204
        assert client.get(url, headers=admin_headers).json() is None
