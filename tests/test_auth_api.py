import uuid

from todo_api.core.security import create_access_token, decode_token

from helpers import auth_headers, register


def assert_user_shape(user: dict):
    for key in ["id", "email", "name", "isActive", "createdAt", "updatedAt"]:
        assert key in user
    # The hash never leaves the server under any spelling.
    for key in ["password", "hashedPassword", "hashed_password"]:
        assert key not in user


class TestRegister:
    def test_register_returns_user_and_token(self, client, settings):
        body = register(client, "a@x.com", "secret1", "AA")
        user = body["user"]
        assert_user_shape(user)
        assert user["email"] == "a@x.com"
        assert user["name"] == "AA"
        assert user["isActive"] is True

        claims = decode_token(settings, body["token"])
        assert str(claims.user_id) == user["id"]
        assert claims.email == user["email"]

    def test_duplicate_email_is_conflict_regardless_of_password_and_name(self, client):
        register(client, "dup@example.com", "secret1", "First")
        res = client.post(
            "/api/auth/register",
            json={"email": "dup@example.com", "password": "another-pass", "name": "Second"},
        )
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "Registration Error"
        assert body["message"] == "Email is already registered"
        assert body["statusCode"] == 400

    def test_email_is_stored_as_given(self, client):
        # No case normalisation: differently cased addresses are distinct accounts.
        register(client, "Case@Example.com", "secret1", "Upper")
        body = register(client, "case@example.com", "secret1", "Lower")
        assert body["user"]["email"] == "case@example.com"

    def test_email_case_is_preserved_exactly(self, client):
        body = register(client, "A@X.COM", "secret1", "Caps")
        assert body["user"]["email"] == "A@X.COM"

        res = client.post("/api/auth/login", json={"email": "A@x.CoM", "password": "secret1"})
        assert res.status_code == 401

        res = client.post("/api/auth/login", json={"email": "A@X.COM", "password": "secret1"})
        assert res.status_code == 200
        assert res.json()["user"]["email"] == "A@X.COM"

    def test_single_character_name_is_rejected(self, client):
        res = client.post(
            "/api/auth/register",
            json={"email": "short@example.com", "password": "secret1", "name": "A"},
        )
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "Validation Error"
        assert "name: " in body["message"]

    def test_validation_messages_are_concatenated(self, client):
        res = client.post(
            "/api/auth/register",
            json={"email": "not-an-email", "password": "123", "name": "A"},
        )
        assert res.status_code == 400
        body = res.json()
        assert body["error"] == "Validation Error"
        message = body["message"]
        assert "email" in message
        assert "password" in message
        assert "name" in message
        assert message.count(", ") >= 2

    def test_missing_fields(self, client):
        res = client.post("/api/auth/register", json={})
        assert res.status_code == 400
        assert res.json()["error"] == "Validation Error"


class TestLogin:
    def test_login_success(self, client, settings):
        registered = register(client, "login@example.com", "secret1", "Login")
        res = client.post(
            "/api/auth/login", json={"email": "login@example.com", "password": "secret1"}
        )
        assert res.status_code == 200
        body = res.json()
        assert_user_shape(body["user"])
        assert body["user"]["id"] == registered["user"]["id"]
        assert str(decode_token(settings, body["token"]).user_id) == registered["user"]["id"]

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client):
        register(client, "known@example.com", "secret1", "Known")
        wrong_password = client.post(
            "/api/auth/login", json={"email": "known@example.com", "password": "wrong-pass"}
        )
        unknown_email = client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "secret1"}
        )
        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == "Unauthorized"

    def test_login_validation_error(self, client):
        res = client.post("/api/auth/login", json={"email": "nope", "password": ""})
        assert res.status_code == 400
        assert res.json()["error"] == "Validation Error"


class TestProfile:
    def test_profile_with_token(self, client, alice):
        res = client.get("/api/auth/profile", headers=auth_headers(alice["token"]))
        assert res.status_code == 200
        profile = res.json()
        assert_user_shape(profile)
        assert profile["id"] == alice["user"]["id"]
        assert profile["email"] == "alice@example.com"

    def test_profile_without_token(self, client):
        res = client.get("/api/auth/profile")
        assert res.status_code == 401
        body = res.json()
        assert body["error"] == "Unauthorized"
        assert body["statusCode"] == 401

    def test_profile_with_invalid_token(self, client):
        res = client.get("/api/auth/profile", headers=auth_headers("garbage"))
        assert res.status_code == 401

    def test_profile_with_non_bearer_scheme(self, client, alice):
        res = client.get(
            "/api/auth/profile", headers={"Authorization": f"Basic {alice['token']}"}
        )
        assert res.status_code == 401

    def test_profile_for_unknown_user(self, client, settings):
        token = create_access_token(settings, subject=uuid.uuid4(), email="ghost@example.com")
        res = client.get("/api/auth/profile", headers=auth_headers(token))
        assert res.status_code == 404
        assert res.json()["message"] == "User not found"
