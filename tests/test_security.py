from datetime import timedelta

import pytest
from jose import jwt

from core.errors import ExpiredToken, InvalidSignature
from core.security import (
    create_access_token,
    create_token_for_account,
    decode_token,
    generate_session_token,
)


def test_token_round_trip_carries_identity_and_role(user):
    payload = decode_token(create_token_for_account(user))

    assert payload.user_id == user.id
    assert payload.email == user.email
    assert payload.role == "user"


def test_expired_token_is_rejected(user):
    token = create_token_for_account(user, expires_delta=timedelta(seconds=-1))

    with pytest.raises(ExpiredToken):
        decode_token(token)


def test_token_signed_with_other_key_is_rejected(user):
    token = jwt.encode({"user_id": user.id, "role": "admin"}, "some-other-key", algorithm="HS256")

    with pytest.raises(InvalidSignature):
        decode_token(token)


def test_token_without_role_is_rejected():
    with pytest.raises(InvalidSignature):
        decode_token(create_access_token({"user_id": "abc"}))


def test_session_tokens_are_unique():
    tokens = {generate_session_token() for _ in range(50)}
    assert len(tokens) == 50


def test_missing_bearer_token(client):
    response = client.get("/auth/verify")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_expired_bearer_token_over_http(client, user):
    token = create_token_for_account(user, expires_delta=timedelta(minutes=-5))

    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


def test_regular_user_cannot_reach_admin_routes(client, user_headers):
    response = client.get("/users/", headers=user_headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Unauthorized or insufficient permissions"
