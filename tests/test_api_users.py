# flake8: noqa
from datetime import timedelta

from ashpaz.token_utils import AUTH_COOKIE_NAME, create_session_token


def test_register_sets_cookie_and_hides_hash(client):
    res = client.post("/api/users/register",
                      json={"email": "Cook@Example.com", "password": "secret-pass", "name": "Cook"})
    assert res.status_code == 201
    user = res.json()["user"]
    assert user["email"] == "cook@example.com"
    assert "password_hash" not in user
    assert AUTH_COOKIE_NAME in res.cookies
    set_cookie = res.headers["set-cookie"].lower()
    assert "httponly" in set_cookie and "samesite=lax" in set_cookie


def test_register_duplicate_email(user_client):
    res = user_client.post("/api/users/register",
                           json={"email": "COOK@example.com", "password": "another-pass", "name": "Other"})
    assert res.status_code == 409
    assert res.json() == {"error": "User with this email already exists"}


def test_register_validation(client):
    res = client.post("/api/users/register", json={"email": "not-an-email", "password": "short", "name": ""})
    assert res.status_code == 400
    assert len(res.json()["details"]) == 3


def test_me_requires_auth(client):
    res = client.get("/api/users/me")
    assert res.status_code == 401
    assert res.json() == {"error": "Authentication required"}


def test_me_with_cookie(user_client):
    res = user_client.get("/api/users/me")
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Cook"


def test_login_and_logout(user_client):
    user_client.post("/api/users/logout")
    assert user_client.get("/api/users/me").status_code == 401

    res = user_client.post("/api/users/login", json={"email": "cook@example.com", "password": "secret-pass"})
    assert res.status_code == 200
    assert res.json()["message"] == "Login successful"
    assert user_client.get("/api/users/me").status_code == 200


def test_login_failures_look_the_same(user_client):
    wrong_password = user_client.post("/api/users/login", json={"email": "cook@example.com", "password": "nope"})
    unknown_email = user_client.post("/api/users/login", json={"email": "who@example.com", "password": "nope"})
    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_bearer_token_accepted(client, settings):
    res = client.post("/api/users/register",
                      json={"email": "api@example.com", "password": "secret-pass", "name": "Api"})
    token = res.cookies[AUTH_COOKIE_NAME]
    client.cookies.clear()
    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "api@example.com"


def test_expired_and_forged_tokens(client, settings):
    expired = create_session_token({"user_id": 1}, settings.jwt_secret, expires_delta=timedelta(seconds=-5))["token"]
    forged = create_session_token({"user_id": 1}, "someone-else")["token"]
    for token in (expired, forged):
        res = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 401


def test_update_profile(user_client):
    res = user_client.put("/api/users/me", json={"name": "Chef", "email": "chef@example.com"})
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Chef"
    assert res.json()["user"]["email"] == "chef@example.com"


def test_update_without_changes(user_client):
    res = user_client.put("/api/users/me", json={})
    assert res.status_code == 200
    assert res.json()["message"] == "No changes provided"


def test_update_email_taken(user_client):
    user_client.post("/api/users/register",
                     json={"email": "other@example.com", "password": "secret-pass", "name": "Other"})
    # the second registration switched the session to the other account
    res = user_client.put("/api/users/me", json={"email": "cook@example.com"})
    assert res.status_code == 409


def test_change_password(user_client):
    missing = user_client.put("/api/users/me", json={"newPassword": "brand-new-pass"})
    assert missing.status_code == 400

    wrong = user_client.put("/api/users/me", json={"newPassword": "brand-new-pass", "currentPassword": "nope"})
    assert wrong.status_code == 401

    ok = user_client.put("/api/users/me",
                         json={"newPassword": "brand-new-pass", "currentPassword": "secret-pass"})
    assert ok.status_code == 200
    login = user_client.post("/api/users/login", json={"email": "cook@example.com", "password": "brand-new-pass"})
    assert login.status_code == 200


def test_delete_account(user_client):
    token = user_client.cookies[AUTH_COOKIE_NAME]
    res = user_client.delete("/api/users/me")
    assert res.status_code == 200
    assert user_client.get("/api/users/me").status_code == 401

    # the old token no longer resolves to a user
    stale = user_client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert stale.status_code == 401
    assert stale.json() == {"error": "User not found"}
