"""
app/api/cart.py

Purpose: Cart and checkout routes

- View, add to and remove from the caller's cart
- Checkout the cart or buy products directly
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.access import USER_ACCESS, Identity, authenticate
from app.core.exceptions import ValidationError
from app.db.mongo import get_database
from app.models.common import parse_object_id
from app.schemas.requests import CartItemRequest, CheckoutRequest, InstantBuyRequest
from app.services import cart_service, order_service

router = APIRouter(prefix="/cart", dependencies=USER_ACCESS)


@router.get("/")
async def view_cart(
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    cart = await cart_service.get_cart(db, identity.user_id)
    return cart.model_dump()


@router.post("/add_to_cart")
async def add_to_cart(
    payload: CartItemRequest,
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    product_id = parse_object_id(payload.product_id, "product_id")
    cart = await cart_service.add_to_cart(db, identity.user_id, product_id)
    return cart.model_dump()


@router.post("/remove_item")
async def remove_item(
    payload: CartItemRequest,
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    product_id = parse_object_id(payload.product_id, "product_id")
    cart = await cart_service.remove_item(db, identity.user_id, product_id)
    return cart.model_dump()


@router.post("/cart_checkout", status_code=201)
async def cart_checkout(
    payload: CheckoutRequest,
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Turns the cart into a Pending order and empties the cart.
    """
    order = await order_service.checkout_cart(db, identity.user_id, payload.payment_method)
    return order.model_dump()


@router.post("/instant_buy", status_code=201)
async def instant_buy(
    payload: InstantBuyRequest,
    identity: Identity = Depends(authenticate),
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """
    Places an order for the listed products without using the cart.
    """
    if not payload.product_ids:
        raise ValidationError("product_ids: must contain at least one product", field="product_ids")

    product_ids = [parse_object_id(product_id, "product_ids") for product_id in payload.product_ids]
    order = await order_service.instant_buy(db, identity.user_id, product_ids, payload.payment_method)
    return order.model_dump()
