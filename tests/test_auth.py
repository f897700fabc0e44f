"""Registration, login and password reset tests."""

from conftest import unique


def test_register_and_me(client, make_user):
    user = make_user("alice")
    r = client.get("/auth/me", headers=user["headers"])
    assert r.status_code == 200
    data = r.json()
    assert data["email"] == user["email"]
    assert data["display_name"] == user["display_name"]
    assert data["role"] == "member"
    assert data["genre_preferences"] == []


def test_duplicate_email_and_display_name(client, make_user):
    user = make_user("dup")
    r = client.post(
        "/auth/register",
        json={"email": user["email"], "password": "secret123", "display_name": f"other_{unique()}"},
    )
    assert r.status_code == 409
    r = client.post(
        "/auth/register",
        json={"email": f"other_{unique()}@test.com", "password": "secret123", "display_name": user["display_name"]},
    )
    assert r.status_code == 409


def test_login_failures_look_the_same(client, make_user):
    user = make_user("login")
    wrong_password = client.post("/auth/login", json={"email": user["email"], "password": "nope-nope"})
    unknown_email = client.post("/auth/login", json={"email": f"ghost_{unique()}@test.com", "password": "nope-nope"})
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_me_requires_token(client):
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_password_reset_request_does_not_reveal_accounts(client, make_user):
    user = make_user("reset")
    known = client.post("/auth/password-reset-request", json={"email": user["email"]})
    unknown = client.post("/auth/password-reset-request", json={"email": f"ghost_{unique()}@test.com"})
    assert known.status_code == 200
    assert unknown.status_code == 200
    assert known.json()["message"] == unknown.json()["message"]
    assert unknown.json()["reset_token"] is None


def test_password_reset_flow(client, make_user):
    user = make_user("reset")
    # Development mode echoes the token
    token = client.post("/auth/password-reset-request", json={"email": user["email"]}).json()["reset_token"]
    assert token

    r = client.post("/auth/password-reset", json={"token": token, "new_password": "brand-new-pass"})
    assert r.status_code == 200

    assert client.post("/auth/login", json={"email": user["email"], "password": "secret123"}).status_code == 401
    assert client.post("/auth/login", json={"email": user["email"], "password": "brand-new-pass"}).status_code == 200

    # Tokens are single use
    r = client.post("/auth/password-reset", json={"token": token, "new_password": "another-pass"})
    assert r.status_code == 400


def test_password_reset_token_hidden_outside_development(client, make_user, monkeypatch):
    from cineconnect.core.config import settings

    monkeypatch.setattr(settings, "environment", "production")
    user = make_user("prodreset")
    r = client.post("/auth/password-reset-request", json={"email": user["email"]})
    assert r.status_code == 200
    assert r.json()["reset_token"] is None
