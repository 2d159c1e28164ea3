"""Unit tests for FastAPI authentication dependencies."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import select

from app.core.dependencies import get_current_user, validate_token
from models import User


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestValidateToken:
    """Test cases for validate_token."""

    @pytest.mark.asyncio
    async def test_missing_token(self):
        with pytest.raises(HTTPException) as exc_info:
            await validate_token(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_valid_token(self, token_authenticator):
        token = token_authenticator.create_access_token("idp|42")

        payload = await validate_token(_credentials(token))

        assert payload["sub"] == "idp|42"

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        with pytest.raises(HTTPException) as exc_info:
            await validate_token(_credentials("bogus"))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_unexpected_verifier_error_is_401(self):
        with patch("app.core.dependencies.auth") as mock_auth:
            mock_auth.verify_token = AsyncMock(side_effect=RuntimeError("boom"))

            with pytest.raises(HTTPException) as exc_info:
                await validate_token(_credentials("whatever"))

        assert exc_info.value.status_code == 401


class TestGetCurrentUser:
    """Test cases for get_current_user."""

    @pytest.mark.asyncio
    async def test_creates_user_on_first_sight(self, test_db):
        request = MagicMock()
        payload = {"sub": "idp|first", "email": "first@example.com", "name": "First"}

        user = await get_current_user(request, payload, test_db)

        assert user.external_id == "idp|first"
        assert user.email == "first@example.com"
        assert request.state.user_id == user.id

        again = await get_current_user(MagicMock(), payload, test_db)
        assert again.id == user.id
        result = await test_db.execute(select(User).where(User.external_id == "idp|first"))
        assert len(result.scalars().all()) == 1

    @pytest.mark.asyncio
    async def test_existing_user(self, test_db, test_user):
        user = await get_current_user(MagicMock(), {"sub": test_user.external_id}, test_db)

        assert user.id == test_user.id

    @pytest.mark.asyncio
    async def test_missing_subject(self, test_db):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(MagicMock(), {"email": "x@example.com"}, test_db)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_inactive_user(self, test_db, test_user):
        test_user.is_active = False
        await test_db.commit()

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(MagicMock(), {"sub": test_user.external_id}, test_db)

        assert exc_info.value.status_code == 403
