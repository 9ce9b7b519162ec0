"""
app/services/cart_service.py

Purpose: Shopping cart management

- One cart per user, upserted on first add
- Add / remove single product occurrences
- Keeps total_price in line with current catalog prices
"""

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from app.core.exceptions import ResourceNotFoundError
from app.core.logging import get_logger, LogContext
from app.models.cart import Cart
from app.models.common import ensure_valid, to_object_id
from app.services.product_service import get_product, get_products_by_ids, price_total
from utils.constants import CARTS_COLLECTION
from utils.time_utils import utc_now

logger = get_logger(__name__)


async def get_cart(db: AsyncIOMotorDatabase, user_id: str) -> Cart:
    """
    Returns the user's cart, or an unsaved empty cart if none exists yet.
    """
    doc = await db[CARTS_COLLECTION].find_one({"user_id": ObjectId(user_id)})
    if doc is None:
        return Cart(user_id=user_id, product_ids=[], total_price=0)
    return Cart.from_document(doc)


async def save_cart(db: AsyncIOMotorDatabase, user_id: str, product_ids: List[str]) -> Cart:
    """
    Replaces the cart contents and recomputes the total.
    """
    products = await get_products_by_ids(db, [ObjectId(product_id) for product_id in product_ids])
    now = utc_now()
    cart = Cart(
        user_id=user_id,
        product_ids=product_ids,
        total_price=price_total(product_ids, products),
        updated_at=now,
    )
    ensure_valid(cart)

    carts = db[CARTS_COLLECTION]
    await carts.update_one(
        {"user_id": ObjectId(user_id)},
        {
            "$set": {
                "product_ids": [to_object_id(product_id) for product_id in cart.product_ids],
                "total_price": cart.total_price,
                "updated_at": now
            },
            "$setOnInsert": {"created_at": now}
        },
        upsert=True
    )

    return await get_cart(db, user_id)


async def add_to_cart(db: AsyncIOMotorDatabase, user_id: str, product_id: ObjectId) -> Cart:
    """
    Adds one occurrence of a product to the user's cart.

    Raises:
        ResourceNotFoundError: Product does not exist
    """
    product = await get_product(db, product_id)
    cart = await get_cart(db, user_id)

    updated = await save_cart(db, user_id, cart.product_ids + [product.id])
    with LogContext(user_id=user_id):
        logger.info(f"Added product {product.id} to cart")

    return updated


async def remove_item(db: AsyncIOMotorDatabase, user_id: str, product_id: ObjectId) -> Cart:
    """
    Removes one occurrence of a product from the user's cart.

    Raises:
        ResourceNotFoundError: Product is not in the cart
    """
    cart = await get_cart(db, user_id)
    product_ids = list(cart.product_ids)

    if str(product_id) not in product_ids:
        raise ResourceNotFoundError("Product is not in the cart", details={"product_id": str(product_id)})

    product_ids.remove(str(product_id))
    updated = await save_cart(db, user_id, product_ids)
    with LogContext(user_id=user_id):
        logger.info(f"Removed product {product_id} from cart")

    return updated


async def clear_cart(db: AsyncIOMotorDatabase, user_id: str, ordered_ids: List[str]) -> Cart:
    """
    Empties the cart after checkout, provided it still holds exactly the
    ordered products. If it changed in the meantime, only the ordered
    occurrences are removed and later additions are kept.
    """
    result = await db[CARTS_COLLECTION].update_one(
        {
            "user_id": ObjectId(user_id),
            "product_ids": [ObjectId(product_id) for product_id in ordered_ids]
        },
        {"$set": {"product_ids": [], "total_price": 0, "updated_at": utc_now()}}
    )
    if result.matched_count:
        return Cart(user_id=user_id, product_ids=[], total_price=0)

    cart = await get_cart(db, user_id)
    remaining = list(cart.product_ids)
    for product_id in ordered_ids:
        if product_id in remaining:
            remaining.remove(product_id)

    with LogContext(user_id=user_id):
        logger.warning(f"Cart changed during checkout, keeping {len(remaining)} item(s)")

    return await save_cart(db, user_id, remaining)
