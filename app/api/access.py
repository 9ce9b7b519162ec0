"""
app/api/access.py

Purpose: Access interceptors

- authenticate: token extraction + verification, attaches the caller identity
- require_role: role gate layered after authenticate
- USER_ACCESS / ADMIN_ACCESS: ordered chains applied to protected routers
"""

from fastapi import Depends, Request
from pydantic import BaseModel
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import ForbiddenError, MissingTokenError
from app.core.logging import get_logger
from app.services.token_service import get_token_service
from utils.constants import ADMIN_ONLY_MESSAGE, Role, TokenType

logger = get_logger(__name__)


class Identity(BaseModel):
    """
    Caller identity decoded from the access token.
    """
    user_id: str
    email: str
    first_name: str
    last_name: str
    role: str


def extract_token(request: Request) -> Optional[str]:
    """
    Reads the access token from the token header, falling back to
    `Authorization: Bearer <token>`.
    """
    token = request.headers.get(settings.TOKEN_HEADER)
    if token and token.strip():
        return token.strip()

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return None


async def authenticate(request: Request) -> Identity:
    """
    Rejects the request with 401 unless it carries a valid access token.

    Raises:
        MissingTokenError: No token on the request
        AuthenticationError: Token expired, tampered or malformed
    """
    token = extract_token(request)
    if token is None:
        raise MissingTokenError()

    claims = get_token_service().verify_token(token, expected_type=TokenType.ACCESS)

    identity = Identity(
        user_id=claims.user_id,
        email=claims.email,
        first_name=claims.first_name,
        last_name=claims.last_name,
        role=claims.role,
    )
    request.state.identity = identity
    return identity


def require_role(*roles: Role):
    """
    Builds an interceptor that allows only the given roles.
    """
    allowed = {role.value for role in roles}

    async def check_role(identity: Identity = Depends(authenticate)) -> Identity:
        if identity.role not in allowed:
            logger.warning(
                f"Role {identity.role} denied, requires {sorted(allowed)}",
                extra={"user_id": identity.user_id, "role": identity.role}
            )
            raise ForbiddenError(ADMIN_ONLY_MESSAGE if allowed == {Role.ADMIN.value} else "Insufficient permissions")
        return identity

    return check_role


# Interceptor chains, run in order before the handler
USER_ACCESS: List = [Depends(authenticate)]
ADMIN_ACCESS: List = [Depends(authenticate), Depends(require_role(Role.ADMIN))]
