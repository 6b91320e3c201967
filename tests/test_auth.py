import uuid

import pytest

from app.db_handlers import AccessTokenDBHandler, UserDBHandler
from app.utils.auth import create_access_token
from tests.helpers import auth_headers

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"
ME_URL = "/api/v1/auth/me"
LOGOUT_URL = "/api/v1/auth/logout"


def test_register_returns_user_and_token(client):
    response = client.post(
        REGISTER_URL,
        json={"username": "alice", "email": "alice@x.com", "password": "secret1"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@x.com"
    assert "hashed_password" not in body["user"]
    assert "password" not in body["user"]


def test_register_rejects_duplicate_email(client, register_user):
    register_user("alice", "alice@x.com")

    response = client.post(
        REGISTER_URL,
        json={"username": "alice2", "email": "alice@x.com", "password": "secret1"},
    )

    assert response.status_code == 422
    assert "email" in response.json()["detail"]


def test_register_rejects_duplicate_username(client, register_user):
    register_user("alice", "alice@x.com")

    response = client.post(
        REGISTER_URL,
        json={"username": "alice", "email": "other@x.com", "password": "secret1"},
    )

    assert response.status_code == 422
    assert "username" in response.json()["detail"]


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "al", "email": "al@x.com", "password": "secret1"},
        {"username": "a" * 51, "email": "long@x.com", "password": "secret1"},
        {"username": "alice", "email": "alice@x.com", "password": "short"},
        {"username": "alice", "email": "not-an-email", "password": "secret1"},
        {"username": "alice", "password": "secret1"},
    ],
)
def test_register_validates_input(client, payload):
    response = client.post(REGISTER_URL, json=payload)

    assert response.status_code == 422


def test_login_issues_a_fresh_token(client, register_user):
    register_token, user = register_user("alice", "alice@x.com")

    response = client.post(
        LOGIN_URL, json={"email": "alice@x.com", "password": "secret1"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == user["id"]
    assert body["token"] != register_token


def test_login_failures_look_identical(client, register_user):
    register_user("alice", "alice@x.com")

    wrong_password = client.post(
        LOGIN_URL, json={"email": "alice@x.com", "password": "wrong-password"}
    )
    unknown_email = client.post(
        LOGIN_URL, json={"email": "nobody@x.com", "password": "secret1"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 422
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json() == {
        "detail": "The provided credentials are incorrect."
    }


def test_me_returns_current_user(client, register_user):
    token, user = register_user("alice", "alice@x.com")

    response = client.get(ME_URL, headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json()["id"] == user["id"]
    assert response.json()["email"] == "alice@x.com"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer not-a-token"},
        {"Authorization": "Basic YWxpY2U6c2VjcmV0"},
    ],
)
def test_me_rejects_missing_or_invalid_token(client, headers):
    response = client.get(ME_URL, headers=headers)

    assert response.status_code == 401
    assert "detail" in response.json()


def test_token_for_unknown_session_is_rejected(client, register_user):
    _, user = register_user("alice", "alice@x.com")
    forged = create_access_token({"sub": user["id"], "jti": str(uuid.uuid4())})

    response = client.get(ME_URL, headers=auth_headers(forged))

    assert response.status_code == 401


def test_logout_revokes_only_the_presented_token(client, register_user):
    first_token, _ = register_user("alice", "alice@x.com")
    second_token = client.post(
        LOGIN_URL, json={"email": "alice@x.com", "password": "secret1"}
    ).json()["token"]

    response = client.post(LOGOUT_URL, headers=auth_headers(first_token))

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out"}
    assert client.get(ME_URL, headers=auth_headers(first_token)).status_code == 401
    assert client.get(ME_URL, headers=auth_headers(second_token)).status_code == 200


def test_logout_with_revoked_token_is_unauthenticated(client, register_user):
    token, _ = register_user("alice", "alice@x.com")
    client.post(LOGOUT_URL, headers=auth_headers(token))

    response = client.post(LOGOUT_URL, headers=auth_headers(token))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_revoke_is_idempotent():
    user = await UserDBHandler().create(
        {"username": "carol", "email": "carol@x.com", "hashed_password": "x"}
    )
    handler = AccessTokenDBHandler()
    await handler.issue_token(user.id)
    token_row = await handler.get_by_attributes(user_id=user.id)

    assert await handler.revoke(token_row.id) is True
    assert await handler.revoke(token_row.id) is False
