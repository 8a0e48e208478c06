import base64
from datetime import datetime, timedelta, timezone
import pytest
from jose import jwt
from core.errors import (ExpiredTokenError, InvalidSignatureError, MalformedTokenError,
                         SigningError, InvalidTokenError)
from services.token_service import TokenService, ISSUER, SUBJECT, ACCESS_TOKEN_LIFETIME
from utils.ids import uuid7

SECRET = "unit-test-secret"


@pytest.fixture
def tokens():
    return TokenService(SECRET)


def test_access_token_claims(tokens):
    user_id = uuid7()
    token = tokens.issue(user_id, False)

    payload = jwt.decode(token, SECRET, algorithms=["HS256"], subject=SUBJECT)
    assert payload["user_id"] == str(user_id)
    assert payload["is_premium"] is False
    assert payload["premium_expired_at"] is None
    assert payload["iss"] == "nusa"
    assert payload["sub"] == "authentication"
    assert payload["exp"] - payload["iat"] == int(ACCESS_TOKEN_LIFETIME.total_seconds())


def test_issue_verify_round_trip(tokens):
    user_id = uuid7()
    premium_until = datetime(2027, 1, 31, 12, 30, tzinfo=timezone.utc)

    claims = tokens.verify(tokens.issue(user_id, True, premium_until))

    assert claims.user_id == user_id
    assert claims.is_premium is True
    assert claims.premium_expired_at == premium_until
    assert claims.iss == ISSUER
    assert claims.sub == SUBJECT
    assert claims.exp - claims.iat == ACCESS_TOKEN_LIFETIME


def test_round_trip_naive_premium_expiry(tokens):
    """Timestamps read back from the database are naive UTC."""
    premium_until = datetime(2027, 1, 31, 12, 30)

    claims = tokens.verify(tokens.issue(uuid7(), True, premium_until))

    assert claims.premium_expired_at == premium_until


def test_token_issued_two_hours_ago_is_expired():
    past = TokenService(SECRET, clock=lambda: datetime.now(timezone.utc) - timedelta(hours=2))
    token = past.issue(uuid7(), False)

    with pytest.raises(ExpiredTokenError):
        TokenService(SECRET).verify(token)


def test_token_signed_with_other_secret(tokens):
    token = TokenService("another-secret").issue(uuid7(), False)

    with pytest.raises(InvalidSignatureError):
        tokens.verify(token)


def test_tampered_token(tokens):
    header, payload, signature = tokens.issue(uuid7(), False).split(".")
    forged_claims = base64.urlsafe_b64encode(b'{"user_id": "x", "is_premium": true}').rstrip(b"=").decode()

    with pytest.raises(InvalidSignatureError):
        tokens.verify(f"{header}.{forged_claims}.{signature}")


@pytest.mark.parametrize("token", ["", "invalid_token_format", "a.b", "a.b.c"])
def test_malformed_token(tokens, token):
    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_wrong_issuer_is_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode({
        "user_id": str(uuid7()),
        "is_premium": False,
        "iss": "someone-else",
        "sub": SUBJECT,
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }, SECRET, algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_missing_user_id_is_rejected(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode({
        "is_premium": False,
        "iss": ISSUER,
        "sub": SUBJECT,
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }, SECRET, algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        tokens.verify(token)


def test_token_errors_share_base_class():
    for error in (ExpiredTokenError, InvalidSignatureError, MalformedTokenError):
        assert issubclass(error, InvalidTokenError)
        assert error.status_code == 401


def test_unsupported_algorithm_raises_signing_error():
    broken = TokenService(SECRET, algorithm="NOT-AN-ALGORITHM")

    with pytest.raises(SigningError):
        broken.issue(uuid7(), False)


def test_refresh_token_is_base64_session_id():
    session_id = uuid7()
    refresh_token = TokenService.encode_refresh_token(session_id)

    assert base64.b64decode(refresh_token).decode() == str(session_id)
    assert TokenService.decode_refresh_token(refresh_token) == session_id


@pytest.mark.parametrize("value", ["%%%", base64.b64encode(b"not-a-uuid").decode(), "ümlaut"])
def test_decode_refresh_token_rejects_garbage(value):
    with pytest.raises(MalformedTokenError):
        TokenService.decode_refresh_token(value)
