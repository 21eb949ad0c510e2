"""Tests for the bearer token dependency guarding the verification route."""

import pytest

from udagram import TokenIssuer
from udagram.auth import parse_authorization
from udagram.errors import AuthError

VERIFY = "/api/v0/users/auth/verification"


def test_valid_token_is_accepted(users_client):
    token = TokenIssuer("test-secret").issue({"email": "alice@example.com"})

    response = users_client.get(VERIFY, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"auth": True, "message": "Authenticated."}


def test_missing_header_is_401(users_client):
    response = users_client.get(VERIFY)

    assert response.status_code == 401
    assert response.json() == {"message": "No authorization headers."}


@pytest.mark.parametrize("header", ["Bearer", "Bearer a b", "token-without-scheme"])
def test_header_without_two_parts_is_401(users_client, header):
    response = users_client.get(VERIFY, headers={"Authorization": header})

    assert response.status_code == 401
    assert response.json() == {"message": "Malformed token."}


def test_token_signed_with_other_secret_is_rejected(users_client):
    token = TokenIssuer("some-other-secret").issue({"email": "alice@example.com"})

    response = users_client.get(VERIFY, headers={"Authorization": f"Bearer {token}"})

    # Signature failures are reported as 500 for compatibility with existing clients.
    assert response.status_code == 500
    assert response.json() == {"auth": False, "message": "Failed to authenticate."}


def test_garbage_token_is_rejected(users_client):
    response = users_client.get(VERIFY, headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 500
    assert response.json()["auth"] is False


def test_scheme_is_not_checked():
    assert parse_authorization("Token abc") == "abc"


@pytest.mark.parametrize("header", [None, ""])
def test_parse_authorization_requires_header(header):
    with pytest.raises(AuthError) as excinfo:
        parse_authorization(header)

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "No authorization headers."
