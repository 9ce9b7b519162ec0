"""
app/api/users.py

Purpose: User-facing routes

- Public: signup, login, token refresh
- Token required: logout, product listing/search, order history, cancel
"""

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.access import USER_ACCESS, Identity, authenticate
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.db.mongo import get_database
from app.models.common import parse_object_id
from app.schemas.auth import AuthResponse
from app.schemas.requests import CancelOrderRequest, LoginRequest, RefreshRequest, SignupRequest
from app.services import order_service, product_service, user_service
from utils.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from utils.validation_utils import sanitize_input

logger = get_logger(__name__)

public_router = APIRouter(prefix="/users")
router = APIRouter(prefix="/users", dependencies=USER_ACCESS)


@public_router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(payload: SignupRequest, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Creates an account and returns a fresh token pair.
    """
    user = await user_service.create_user(db, payload)
    token, refresh_token = await user_service.start_session(db, user)
    return AuthResponse(user=user.public_view(), token=token, refresh_token=refresh_token)


@public_router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Verifies credentials and returns a fresh token pair.
    """
    if not payload.username.strip():
        raise ValidationError("username: is required", field="username")
    if not payload.password:
        raise ValidationError("password: is required", field="password")

    user = await user_service.authenticate_user(db, payload.username, payload.password)
    token, refresh_token = await user_service.start_session(db, user)
    return AuthResponse(user=user.public_view(), token=token, refresh_token=refresh_token)


@public_router.post("/refresh_token", response_model=AuthResponse)
async def refresh_token(payload: RefreshRequest, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Rotates the token pair. The presented refresh token stops working.
    """
    if not payload.refresh_token.strip():
        raise ValidationError("refresh_token: is required", field="refresh_token")

    user, token, new_refresh_token = await user_service.refresh_session(db, payload.refresh_token.strip())
    return AuthResponse(user=user.public_view(), token=token, refresh_token=new_refresh_token)


@router.post("/logout")
async def logout(
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    await user_service.end_session(db, identity.user_id)
    return {"status": "logged_out"}


@router.get("/product_view")
async def product_view(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Lists the catalog, oldest products first.
    """
    products = await product_service.list_products(db, page=page, limit=limit)
    return [product.model_dump() for product in products]


@router.get("/search")
async def search(
    name: str = Query(""),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Filters products by a case-insensitive substring of their name.
    """
    name = sanitize_input(name)
    if not name:
        raise ValidationError("name: is required", field="name")

    products = await product_service.search_products(db, name, page=page, limit=limit)
    return [product.model_dump() for product in products]


@router.get("/orders")
async def my_orders(
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    orders = await order_service.list_orders(db, identity.user_id)
    return [order.model_dump() for order in orders]


@router.post("/cancel_order")
async def cancel_order(
    payload: CancelOrderRequest,
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    order_id = parse_object_id(payload.order_id, "order_id")
    order = await order_service.cancel_order(db, identity.user_id, order_id)
    return order.model_dump()
