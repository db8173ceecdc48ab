import logging
from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from app.core.auth import create_access_token, verify_token
from app.core.logging import ShareTokenFilter, redact_share_path
from app.core.security import get_current_user
from app.core.share_utils import build_share_url, generate_share_token


def test_token_round_trip():
    claims = verify_token(create_access_token("user_42", email="dev@example.com"))
    assert claims["sub"] == "user_42"
    assert claims["email"] == "dev@example.com"


def test_expired_and_tampered_tokens_are_rejected():
    expired = create_access_token("user_42", expires_delta=timedelta(minutes=-1))
    assert verify_token(expired) is None
    assert verify_token(create_access_token("user_42") + "x") is None


@pytest.mark.asyncio
async def test_current_user_from_bearer_token():
    credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=create_access_token("user_7"))
    user = await get_current_user(credentials)
    assert user.id == "user_7"


@pytest.mark.asyncio
async def test_missing_credentials_are_unauthorized():
    with pytest.raises(HTTPException) as exc:
        await get_current_user(None)
    assert exc.value.status_code == 401


def test_share_tokens_are_unique_and_url_safe():
    tokens = {generate_share_token() for _ in range(50)}
    assert len(tokens) == 50
    assert all(len(token) == 32 and "/" not in token and "+" not in token for token in tokens)


def test_share_url():
    assert build_share_url("https://yatra.example/", "abc") == "https://yatra.example/trip/share/abc"
    assert build_share_url("https://yatra.example", None) is None


def test_share_paths_are_redacted():
    assert redact_share_path("GET /share/s3cr3t-T0ken HTTP/1.1") == "GET /share/<token> HTTP/1.1"
    assert redact_share_path("/trips/trip_1/share") == "/trips/trip_1/share"


def test_access_log_arguments_are_redacted():
    record = logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/%s" %d',
        args=("127.0.0.1:5000", "GET", "/share/s3cr3t-T0ken", "1.1", 200),
        exc_info=None,
    )
    assert ShareTokenFilter().filter(record) is True
    assert "s3cr3t" not in record.getMessage()
    assert "/share/<token>" in record.getMessage()
