"""
Test account, session and password-reset endpoints.
"""
from fastapi.testclient import TestClient

REGISTER = {
    "email": "Carol@Example.com",
    "password": "hunter22",
    "name": "Carol",
    "performerType": "comedian",
    "socialMedia": {"instagram": "carol.jokes", "website": "https://carol.example.com"},
}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register(client: TestClient, **overrides) -> dict:
    response = client.post("/api/auth/register", json={**REGISTER, **overrides})
    assert response.status_code == 201, response.json()
    return response.json()


def login(client: TestClient, email: str = "carol@example.com", password: str = "hunter22"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


class TestRegisterAndLogin:
    """Test account creation and login."""

    def test_register(self, client: TestClient):
        data = register(client)

        assert data["token"]
        user = data["user"]
        assert user["email"] == "carol@example.com"
        assert user["performer_type"] == "comedian"
        assert user["instagram_handle"] == "carol.jokes"
        assert user["website_url"].startswith("https://carol.example.com")
        assert user["role"] == "user"
        assert "password_hash" not in user

    def test_register_existing_email(self, client: TestClient):
        register(client)

        response = client.post(
            "/api/auth/register", json={**REGISTER, "email": "carol@example.com"}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "User already exists", "code": "EMAIL_IN_USE"}

    def test_register_short_password(self, client: TestClient):
        response = client.post("/api/auth/register", json={**REGISTER, "password": "123"})

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_register_password_over_72_bytes(self, client: TestClient):
        response = client.post("/api/auth/register", json={**REGISTER, "password": "x" * 73})

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_login(self, client: TestClient):
        register(client)

        response = login(client, email="CAROL@example.com")

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Carol"

    def test_login_wrong_password(self, client: TestClient):
        register(client)

        response = login(client, password="not-it")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_login_unknown_user(self, client: TestClient):
        response = login(client, email="nobody@example.com")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid credentials"


class TestSessions:
    """Test token checks, logout and profile access."""

    def test_me(self, client: TestClient):
        token = register(client)["token"]

        response = client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 200
        assert response.json()["email"] == "carol@example.com"

    def test_garbage_token(self, client: TestClient):
        response = client.get("/api/auth/me", headers=bearer("not-a-jwt"))

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_logout_revokes_token(self, client: TestClient):
        token = register(client)["token"]

        response = client.post("/api/auth/logout", headers=bearer(token))
        assert response.status_code == 200

        response = client.get("/api/auth/me", headers=bearer(token))
        assert response.status_code == 401
        assert response.json()["message"] == "Session expired or revoked"

    def test_logout_keeps_other_sessions(self, client: TestClient):
        first = register(client)["token"]
        second = login(client).json()["token"]

        client.post("/api/auth/logout", headers=bearer(first))

        assert client.get("/api/auth/me", headers=bearer(second)).status_code == 200

    def test_update_profile(self, client: TestClient):
        token = register(client)["token"]

        response = client.put(
            "/api/auth/profile",
            json={"bio": "Dry wit", "tiktokHandle": "carol", "phone": "555-0100"},
            headers=bearer(token),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Dry wit"
        assert data["tiktok_handle"] == "carol"
        assert data["phone"] == "555-0100"
        assert data["name"] == "Carol"

    def test_change_password(self, client: TestClient):
        token = register(client)["token"]

        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": "hunter22", "newPassword": "hunter33"},
            headers=bearer(token),
        )
        assert response.status_code == 200

        assert client.get("/api/auth/me", headers=bearer(token)).status_code == 401
        assert login(client).status_code == 400
        assert login(client, password="hunter33").status_code == 200

    def test_change_password_wrong_current(self, client: TestClient):
        token = register(client)["token"]

        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": "wrong", "newPassword": "hunter33"},
            headers=bearer(token),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"


class TestPasswordReset:
    """Test the emailed password-reset flow."""

    def test_reset_unknown_email_looks_the_same(self, client: TestClient, queued):
        register(client)

        known = client.post(
            "/api/auth/request-password-reset", json={"email": "carol@example.com"}
        )
        unknown = client.post(
            "/api/auth/request-password-reset", json={"email": "ghost@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert [name for name, _ in queued] == ["password_reset"]

    def test_reset_password(self, client: TestClient, queued):
        old_token = register(client)["token"]
        client.post("/api/auth/request-password-reset", json={"email": "carol@example.com"})
        _, (email, user_name, reset_token) = queued[0]
        assert (email, user_name) == ("carol@example.com", "Carol")

        response = client.post(
            "/api/auth/reset-password",
            json={"token": reset_token, "newPassword": "brand-new"},
        )
        assert response.status_code == 200

        assert login(client, password="brand-new").status_code == 200
        assert client.get("/api/auth/me", headers=bearer(old_token)).status_code == 401

    def test_reset_token_is_single_use(self, client: TestClient, queued):
        register(client)
        client.post("/api/auth/request-password-reset", json={"email": "carol@example.com"})
        reset_token = queued[0][1][2]
        body = {"token": reset_token, "newPassword": "brand-new"}

        assert client.post("/api/auth/reset-password", json=body).status_code == 200

        response = client.post("/api/auth/reset-password", json=body)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RESET_TOKEN"

    def test_reset_survives_broker_outage(self, client: TestClient, monkeypatch):
        from openmic.tasks import send_password_reset_email_task

        def broker_down(*args):
            raise ConnectionError("broker unavailable")

        monkeypatch.setattr(send_password_reset_email_task, "delay", broker_down)
        register(client)

        response = client.post(
            "/api/auth/request-password-reset", json={"email": "carol@example.com"}
        )

        assert response.status_code == 200
