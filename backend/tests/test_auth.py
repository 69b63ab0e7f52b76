"""
Tests for dashboard user authentication.

Tests: bearer parsing, token issue/decode, get_authenticated_user, require_user.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from config import settings
from middleware.auth import (
    _parse_bearer_token,
    decode_access_token,
    get_authenticated_user,
    issue_access_token,
    require_user,
)


class TestBearerParsing:

    @pytest.mark.unit
    @pytest.mark.parametrize("header,expected", [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Bearer   abc  ", "abc"),
        ("Token abc", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, header, expected):
        assert _parse_bearer_token(header) == expected


class TestAccessTokens:

    @pytest.mark.unit
    def test_issue_then_decode(self):
        token = issue_access_token(user_id="user_1")
        payload = decode_access_token(token)
        assert payload["sub"] == "user_1"
        assert payload["iss"] == settings.jwt_issuer

    @pytest.mark.unit
    def test_expired_token_rejected(self):
        token = issue_access_token(user_id="user_1", ttl_minutes=-5)
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)
        assert exc_info.value.status_code == 401
        assert "expired" in exc_info.value.detail.lower()

    @pytest.mark.unit
    def test_wrong_issuer_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iss": "someone-else", "sub": "user_1", "iat": now, "exp": now + timedelta(minutes=5)},
            settings.jwt_secret,
            algorithm="HS256",
        )
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)
        assert exc_info.value.status_code == 401

    @pytest.mark.unit
    def test_wrong_key_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"iss": settings.jwt_issuer, "sub": "user_1", "iat": now, "exp": now + timedelta(minutes=5)},
            "not-the-secret",
            algorithm="HS256",
        )
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)
        assert exc_info.value.status_code == 401

    @pytest.mark.unit
    def test_missing_secret_is_server_error(self, monkeypatch):
        monkeypatch.setattr(settings, "jwt_secret", "")
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token("whatever")
        assert exc_info.value.status_code == 500


class TestUserDependencies:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_anonymous_is_none(self):
        assert await get_authenticated_user(authorization=None) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_valid_token_gives_user(self):
        token = issue_access_token(user_id="user_7")
        assert await get_authenticated_user(authorization=f"Bearer {token}") == "user_7"
        assert await require_user(authorization=f"Bearer {token}") == "user_7"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_require_user_without_header_raises_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await require_user(authorization=None)
        assert exc_info.value.status_code == 401

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_bad_token_raises_401_even_when_optional(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_authenticated_user(authorization="Bearer not.a.jwt")
        assert exc_info.value.status_code == 401
