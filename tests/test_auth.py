from __future__ import annotations

import pytest

from mwplu.config import settings
from mwplu.services.auth import AuthError, AuthService


def test_token_round_trip(user) -> None:
    service = AuthService()

    verified = service.verify_token(service.issue_token(user))

    assert verified.id == user.id
    assert verified.email == user.email
    assert verified.user_metadata == {"full_name": "Camille Owner"}


def test_token_signed_with_other_secret_is_rejected(user) -> None:
    token = AuthService(secret="another-secret").issue_token(user)

    with pytest.raises(AuthError, match="Invalid access token"):
        AuthService().verify_token(token)


def test_garbage_token_is_rejected() -> None:
    with pytest.raises(AuthError):
        AuthService().verify_token("not-a-token")


@pytest.mark.integration
def test_bearer_token_identifies_user(client, auth_headers, user) -> None:
    response = client.post("/profiles/me/ensure", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(user.id)


@pytest.mark.integration
def test_cookie_token_identifies_user(client, user) -> None:
    client.cookies.set(settings.cookie_name, AuthService().issue_token(user))
    try:
        response = client.get("/profiles/me")
    finally:
        client.cookies.clear()

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": None}


@pytest.mark.integration
def test_invalid_token_is_unauthorized(client) -> None:
    response = client.get("/profiles/me", headers={"Authorization": "Bearer forged"})

    assert response.status_code == 401


@pytest.mark.integration
def test_profile_routes_require_login(client) -> None:
    assert client.get("/profiles/me").status_code == 401
