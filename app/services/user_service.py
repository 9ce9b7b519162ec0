"""
app/services/user_service.py

Purpose: User accounts and sessions

- Signup with validation, uniqueness checks and password hashing
- Credential check for login
- Issue / rotate / clear the stored token pair
"""

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from typing import Optional, Tuple

from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConflictError, TokenRevokedError
from app.core.logging import get_logger, LogContext
from app.core.security import hash_password, verify_password
from app.models.address import Address
from app.models.common import ensure_valid
from app.models.user import User
from app.schemas.requests import SignupRequest
from app.services.token_service import get_token_service, update_stored_tokens
from utils.constants import (
    EMAIL_TAKEN_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    USERNAME_TAKEN_MESSAGE,
    USERS_COLLECTION,
    Role,
    TokenType,
)
from utils.time_utils import utc_now

logger = get_logger(__name__)


async def get_user_by_id(db: AsyncIOMotorDatabase, user_id: str) -> Optional[User]:
    """
    Retrieves a user by id.

    Returns:
        User or None if not found
    """
    if not ObjectId.is_valid(user_id):
        return None
    doc = await db[USERS_COLLECTION].find_one({"_id": ObjectId(user_id)})
    return User.from_document(doc)


async def get_user_by_username(db: AsyncIOMotorDatabase, username: str) -> Optional[User]:
    doc = await db[USERS_COLLECTION].find_one({"username": username})
    return User.from_document(doc)


def role_for_email(email: str) -> str:
    if email.strip().lower() in settings.ADMIN_EMAILS:
        return Role.ADMIN.value
    return Role.USER.value


async def create_user(db: AsyncIOMotorDatabase, payload: SignupRequest) -> User:
    """
    Creates a user from a signup request.

    Args:
        db: Database handle
        payload: Signup body

    Returns:
        The stored user (password holds the digest)

    Raises:
        ValidationError: A field fails validation
        ConflictError: Username or email already registered
    """
    users = db[USERS_COLLECTION]
    now = utc_now()
    user_id = str(ObjectId())

    address = None
    if payload.address is not None:
        address = Address(
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **payload.address.model_dump()
        )

    user = User(
        id=user_id,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        username=payload.username.strip(),
        password=payload.password,
        email=payload.email.strip().lower(),
        phone=payload.phone.strip(),
        address=address,
        role=role_for_email(payload.email),
        created_at=now,
        updated_at=now,
    )
    ensure_valid(user)

    if await users.find_one({"username": user.username}):
        raise ConflictError(USERNAME_TAKEN_MESSAGE, details={"field": "username"})
    if await users.find_one({"email": user.email}):
        raise ConflictError(EMAIL_TAKEN_MESSAGE, details={"field": "email"})

    user.password = hash_password(payload.password)

    try:
        await users.insert_one(user.to_document())
    except DuplicateKeyError:
        # Lost a race with a concurrent signup
        raise ConflictError("Username or email is already registered")

    with LogContext(user_id=user.id, role=user.role):
        logger.info("New user created")

    return user


async def authenticate_user(db: AsyncIOMotorDatabase, username: str, password: str) -> User:
    """
    Checks a username/password pair.

    Raises:
        AuthenticationError: Unknown user or wrong password (same message for both)
    """
    user = await get_user_by_username(db, username.strip())

    if user is None or not verify_password(password, user.password):
        logger.warning("Failed login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    return user


async def start_session(db: AsyncIOMotorDatabase, user: User) -> Tuple[str, str]:
    """
    Issues a fresh token pair and stores it, replacing the previous pair.

    Returns:
        (access_token, refresh_token)
    """
    token, refresh_token = get_token_service().issue_tokens(
        user_id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
    )
    await update_stored_tokens(db, user.id, token, refresh_token)
    user.token = token
    user.refresh_token = refresh_token

    with LogContext(user_id=user.id, role=user.role):
        logger.info("Session started")

    return token, refresh_token


async def refresh_session(db: AsyncIOMotorDatabase, refresh_token: str) -> Tuple[User, str, str]:
    """
    Exchanges a refresh token for a new pair. Only the most recently
    issued refresh token is accepted.

    Raises:
        AuthenticationError: Token invalid, expired or not of refresh type
        TokenRevokedError: Token was superseded or cleared by logout
    """
    claims = get_token_service().verify_token(refresh_token, expected_type=TokenType.REFRESH)

    user = await get_user_by_id(db, claims.user_id)
    if user is None or user.refresh_token != refresh_token:
        with LogContext(user_id=claims.user_id):
            logger.warning("Rejected revoked refresh token")
        raise TokenRevokedError()

    token, new_refresh_token = await start_session(db, user)
    return user, token, new_refresh_token


async def end_session(db: AsyncIOMotorDatabase, user_id: str) -> bool:
    """
    Clears the stored token pair so the refresh token can no longer be used.
    """
    cleared = await update_stored_tokens(db, user_id, None, None)
    with LogContext(user_id=user_id):
        logger.info("Session ended")
    return cleared
