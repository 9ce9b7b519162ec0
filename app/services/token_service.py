"""
app/services/token_service.py

Purpose: Session token lifecycle

- Issues signed access + refresh JWTs (Issued)
- Verifies signature, expiry and structure (Valid / Expired)
- Persists the latest pair on the user so refresh and logout can
  compare against it (Revoked)
"""

import uuid
from datetime import datetime
from typing import Optional, Tuple

import jwt
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from app.core.logging import get_logger
from utils.constants import USERS_COLLECTION, TokenType
from utils.time_utils import calculate_expiry, utc_now

logger = get_logger(__name__)

REQUIRED_CLAIMS = ["sub", "exp", "iat", "type", "role"]


class TokenClaims(BaseModel):
    """
    Decoded identity carried by a token.
    """
    user_id: str
    email: str
    first_name: str
    last_name: str
    role: str
    token_type: TokenType
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """
    Issues and verifies HMAC-signed JWTs.
    Holds no per-user state; every token is self-contained.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_hours: float = 24,
        refresh_token_hours: float = 168,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_hours = access_token_hours
        self.refresh_token_hours = refresh_token_hours

    def _encode(self, claims: dict, token_type: TokenType, issued_at: datetime, lifetime_hours: float) -> str:
        payload = {
            **claims,
            "type": token_type.value,
            "iat": issued_at,
            "exp": calculate_expiry(issued_at, lifetime_hours),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def issue_tokens(
        self,
        user_id: str,
        email: str,
        first_name: str,
        last_name: str,
        role: str,
        now: Optional[datetime] = None,
    ) -> Tuple[str, str]:
        """
        Issues an access token and a refresh token for a user.

        Args:
            user_id: User id (hex string)
            email: User email
            first_name: User first name
            last_name: User last name
            role: USER or ADMIN
            now: Issue time, defaults to the current UTC time

        Returns:
            (access_token, refresh_token)
        """
        issued_at = now or utc_now()
        claims = {
            "sub": str(user_id),
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "role": role,
        }

        access_token = self._encode(claims, TokenType.ACCESS, issued_at, self.access_token_hours)
        refresh_token = self._encode(claims, TokenType.REFRESH, issued_at, self.refresh_token_hours)

        return access_token, refresh_token

    def verify_token(self, token: str, expected_type: Optional[TokenType] = None) -> TokenClaims:
        """
        Verifies a token and returns its claims.

        Raises:
            TokenExpiredError: Token is past its lifetime
            InvalidSignatureError: Token was tampered with or signed with another secret
            MalformedTokenError: Token cannot be decoded, lacks claims, or has the wrong type
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidSignatureError:
            raise InvalidSignatureError()
        except jwt.InvalidTokenError:
            raise MalformedTokenError()

        try:
            claims = TokenClaims(
                user_id=payload["sub"],
                email=payload.get("email", ""),
                first_name=payload.get("first_name", ""),
                last_name=payload.get("last_name", ""),
                role=payload["role"],
                token_type=payload["type"],
                issued_at=payload["iat"],
                expires_at=payload["exp"],
            )
        except PydanticValidationError:
            raise MalformedTokenError()

        if not ObjectId.is_valid(claims.user_id):
            raise MalformedTokenError()

        if expected_type is not None and claims.token_type != expected_type:
            raise MalformedTokenError(f"Expected a {expected_type.value} token")

        return claims


# Global token service instance
_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Get or create the global token service instance."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            access_token_hours=settings.ACCESS_TOKEN_EXPIRE_HOURS,
            refresh_token_hours=settings.REFRESH_TOKEN_EXPIRE_HOURS,
        )
    return _token_service


async def update_stored_tokens(
    db: AsyncIOMotorDatabase,
    user_id: str,
    token: Optional[str],
    refresh_token: Optional[str],
) -> bool:
    """
    Stores the latest issued pair on the user, replacing the previous one.
    Passing None for both clears them (logout).

    Returns:
        True if the user was found
    """
    users = db[USERS_COLLECTION]

    result = await users.update_one(
        {"_id": ObjectId(user_id)},
        {
            "$set": {
                "token": token,
                "refresh_token": refresh_token,
                "updated_at": utc_now()
            }
        }
    )

    if result.matched_count == 0:
        logger.warning("Cannot store tokens for unknown user", extra={"user_id": user_id})
        return False

    logger.debug("Stored token pair updated", extra={"user_id": user_id})
    return True
