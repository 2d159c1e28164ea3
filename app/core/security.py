"""Security related functions."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt
from fastapi import HTTPException, status
from jwt import InvalidTokenError

from app.core.config import settings
from app.exceptions.base import UnauthorizedError


class TokenAuthenticator:
    """
    Issues and verifies bearer tokens for the API.

    Tokens are JSON Web Tokens signed with the application secret. The ``sub``
    claim carries the caller's identifier at the identity provider; everything
    else in the payload is informational.

    :ivar secret_key: The secret key used to sign and verify JWT tokens.
    :type secret_key: str
    :ivar algorithm: The JWT signing algorithm.
    :type algorithm: str
    """

    def __init__(self, secret_key: str | None = None, algorithm: str | None = None):
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.algorithm

    def create_access_token(
        self,
        subject: str,
        extra_claims: dict[str, Any] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a signed token for ``subject``."""
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
        )
        payload = {**(extra_claims or {}), "sub": subject, "exp": expire}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> dict:
        """
        Verifies a given JSON Web Token (JWT) against the application secret.
        The method decodes the provided token and validates its signature and
        expiry. If the token is invalid, it raises an HTTPException with
        proper status code and error detail.

        :param token: The JWT token to be verified.
        :return: A dictionary containing the decoded payload of the token if validation succeeds.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except InvalidTokenError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid authentication token: {str(e)}",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e


def require_user(user_id: UUID | None) -> UUID:
    """Reject a domain call that carries no caller identity."""
    if user_id is None:
        raise UnauthorizedError()
    return user_id
