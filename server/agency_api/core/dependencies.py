"""FastAPI dependencies for authentication and idempotency."""

from typing import Optional

import jwt
from fastapi import Depends, Header
from jwt import PyJWTError

from .config import settings
from .exceptions import AuthenticationError, AuthorizationError, ValidationError

MAX_IDEMPOTENCY_KEY_LENGTH = 255


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> dict:
    """
    Authentication dependency that validates Bearer tokens.

    Args:
        authorization: Authorization header with Bearer token

    Returns:
        dict: User information from validated token

    Raises:
        AuthenticationError: If token is invalid or missing
    """
    if not authorization:
        raise AuthenticationError(detail="Authorization header missing")

    try:
        scheme, token = authorization.split()
    except ValueError as e:
        raise AuthenticationError(detail="Invalid authorization header format") from e
    if scheme.lower() != "bearer":
        raise AuthenticationError(detail="Invalid authentication scheme")

    try:
        # PyJWT rejects expired tokens when "exp" is present
        payload = jwt.decode(token, settings.bearer_token_secret, algorithms=["HS256"])
    except PyJWTError as e:
        raise AuthenticationError(detail=f"Token validation failed: {e}") from e

    user_id = payload.get("sub")
    if user_id is None:
        raise AuthenticationError(detail="Invalid token payload")

    roles = payload.get("roles") or []
    if payload.get("role"):
        roles = [*roles, payload["role"]]

    return {
        "user_id": user_id,
        "username": payload.get("username"),
        "email": payload.get("email"),
        "roles": roles,
    }


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """
    Allow only agency staff holding the admin role.

    Raises:
        AuthorizationError: If the user lacks the admin role
    """
    if settings.admin_role not in user["roles"]:
        raise AuthorizationError(required_permissions=[settings.admin_role])
    return user


async def get_idempotency_key(
    idempotency_key: str = Header(..., alias="Idempotency-Key")
) -> str:
    """
    Read the Idempotency-Key header of a booking request.

    Raises:
        ValidationError: If the key is blank or too long
    """
    key = idempotency_key.strip()
    if not key or len(key) > MAX_IDEMPOTENCY_KEY_LENGTH:
        raise ValidationError(
            detail=f"Idempotency key must be between 1 and {MAX_IDEMPOTENCY_KEY_LENGTH} characters",
            errors={"Idempotency-Key": "invalid length"}
        )
    return key


AdminAuth = Depends(require_admin)
IdempotencyKey = Depends(get_idempotency_key)
