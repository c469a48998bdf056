"""Tests for the /users administration endpoints."""

from services.exceptions import ErrorCode

from conftest import PASSWORD

NEW_USER = {"email": "new@x.com", "password": PASSWORD, "full_name": "New User", "phone": "0987654321"}


def create(client, headers, **overrides):
    resp = client.post("/api/v1/users", json={**NEW_USER, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]["user"]


class TestUserCrud:

    def test_requires_auth(self, client):
        assert client.get("/api/v1/users").status_code == 401

    def test_create_and_get(self, client, auth_headers):
        user = create(client, auth_headers)
        assert user["email"] == "new@x.com"
        assert "password" not in user and "password_hash" not in user

        resp = client.get(f"/api/v1/users/{user['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["user"]["full_name"] == "New User"

    def test_create_validation(self, client, auth_headers):
        resp = client.post(
            "/api/v1/users", json={"email": "x@x.com", "password": PASSWORD, "phone": "123"}, headers=auth_headers
        )
        assert resp.status_code == 422
        errors = resp.get_json()["errors"]
        assert "full_name" in errors
        assert "phone" in errors

    def test_create_duplicate(self, client, auth_headers):
        create(client, auth_headers)
        resp = client.post("/api/v1/users", json=NEW_USER, headers=auth_headers)
        assert resp.status_code == 409
        assert resp.get_json()["code"] == ErrorCode.EMAIL_EXIST

    def test_list_paginates(self, client, auth_headers):
        for i in range(3):
            create(client, auth_headers, email=f"user{i}@x.com")

        resp = client.get("/api/v1/users?page=1&limit=2", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert len(data["users"]) == 2
        # three created + the caller
        assert data["meta"] == {"page": 1, "limit": 2, "total": 4}

    def test_list_caps_limit(self, client, auth_headers):
        resp = client.get("/api/v1/users?limit=1000", headers=auth_headers)
        assert resp.get_json()["data"]["meta"]["limit"] == 100

    def test_list_rejects_bad_query(self, client, auth_headers):
        resp = client.get("/api/v1/users?page=abc", headers=auth_headers)
        assert resp.status_code == 422
        assert resp.get_json()["code"] == ErrorCode.INVALID_PARAMETER

    def test_update(self, client, auth_headers):
        user = create(client, auth_headers)
        resp = client.patch(
            f"/api/v1/users/{user['id']}",
            json={"email": "Renamed@x.com", "full_name": "Renamed", "gender": "other"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        updated = resp.get_json()["data"]["user"]
        assert updated["email"] == "renamed@x.com"
        assert updated["gender"] == "other"

    def test_update_to_taken_email(self, client, auth_headers):
        user = create(client, auth_headers)
        resp = client.patch(
            f"/api/v1/users/{user['id']}",
            json={"email": "admin@x.com", "full_name": "Clash"},
            headers=auth_headers,
        )
        assert resp.status_code == 409

    def test_missing_user(self, client, auth_headers):
        resp = client.get("/api/v1/users/does-not-exist", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.get_json()["code"] == ErrorCode.NOT_FOUND

    def test_set_password_revokes_sessions(self, client, auth_headers):
        create(client, auth_headers)
        login = client.post("/api/v1/auth/login", json={"email": "new@x.com", "password": PASSWORD})
        session = login.get_json()["data"]
        user_id = session["user"]["id"]

        short = client.patch(f"/api/v1/users/{user_id}/password", json={"password": "123"}, headers=auth_headers)
        assert short.status_code == 422

        resp = client.patch(f"/api/v1/users/{user_id}/password", json={"password": "reset-pw"}, headers=auth_headers)
        assert resp.status_code == 200

        refresh = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": session["refresh_token"]},
            headers={"Authorization": f"Bearer {session['access_token']}"},
        )
        assert refresh.status_code == 401
        login = client.post("/api/v1/auth/login", json={"email": "new@x.com", "password": "reset-pw"})
        assert login.status_code == 200

    def test_delete(self, client, auth_headers):
        user = create(client, auth_headers)
        resp = client.delete(f"/api/v1/users/{user['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert client.get(f"/api/v1/users/{user['id']}", headers=auth_headers).status_code == 404
        assert client.delete(f"/api/v1/users/{user['id']}", headers=auth_headers).status_code == 404
