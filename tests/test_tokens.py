from datetime import timedelta

import jwt
import pytest
from bson import ObjectId

from app.core.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from app.services.token_service import TokenService
from utils.constants import TokenType
from utils.time_utils import utc_now

SECRET = "unit-test-secret-that-is-long-enough-for-hs256"
USER_ID = str(ObjectId())


@pytest.fixture
def service():
    return TokenService(secret_key=SECRET, access_token_hours=24, refresh_token_hours=168)


def issue(service, **kwargs):
    return service.issue_tokens(USER_ID, "ada@example.com", "Ada", "Lovelace", "USER", **kwargs)


def test_issued_tokens_verify(service):
    access, refresh = issue(service)

    claims = service.verify_token(access, expected_type=TokenType.ACCESS)
    assert claims.user_id == USER_ID
    assert claims.email == "ada@example.com"
    assert claims.role == "USER"
    assert claims.token_type == TokenType.ACCESS

    refresh_claims = service.verify_token(refresh, expected_type=TokenType.REFRESH)
    assert refresh_claims.token_type == TokenType.REFRESH


def test_lifetimes(service):
    access, refresh = issue(service)
    access_claims = service.verify_token(access)
    refresh_claims = service.verify_token(refresh)

    assert access_claims.expires_at - access_claims.issued_at == timedelta(hours=24)
    assert refresh_claims.expires_at - refresh_claims.issued_at == timedelta(hours=168)


def test_access_token_expires(service):
    access, refresh = issue(service, now=utc_now() - timedelta(hours=25))

    with pytest.raises(TokenExpiredError):
        service.verify_token(access)

    # Refresh token outlives the access token
    assert service.verify_token(refresh).user_id == USER_ID


def test_other_secret_is_invalid_signature(service):
    other = TokenService(secret_key="a-different-secret-that-is-also-long-enough")
    access, _ = other.issue_tokens(USER_ID, "ada@example.com", "Ada", "Lovelace", "USER")

    with pytest.raises(InvalidSignatureError):
        service.verify_token(access)


def test_tampered_payload_is_invalid_signature(service):
    access, _ = issue(service)
    header, payload, signature = access.split(".")
    forged = jwt.encode({"sub": USER_ID, "role": "ADMIN"}, "guess", algorithm="HS256").split(".")[1]

    with pytest.raises(InvalidSignatureError):
        service.verify_token(".".join([header, forged, signature]))


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "only.two"])
def test_garbage_is_malformed(service, token):
    with pytest.raises(MalformedTokenError):
        service.verify_token(token)


def test_missing_claims_is_malformed(service):
    token = jwt.encode({"sub": USER_ID}, SECRET, algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        service.verify_token(token)


def test_wrong_token_type_is_malformed(service):
    _, refresh = issue(service)

    with pytest.raises(MalformedTokenError):
        service.verify_token(refresh, expected_type=TokenType.ACCESS)


def test_each_issue_is_unique(service):
    first, _ = issue(service)
    second, _ = issue(service)
    assert first != second
