"""
app/services/order_service.py

Purpose: Order placement and status tracking

- Cart checkout (cart -> order, then clear cart)
- Instant buy (order straight from product ids)
- Order history per user
- Status transitions, including customer cancellation
"""

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List, Optional

from app.core.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.models.common import ensure_valid
from app.models.order import Order, is_valid_transition
from app.services.cart_service import clear_cart, get_cart
from app.services.product_service import get_products_by_ids, price_total
from utils.constants import ORDERS_COLLECTION, OrderStatus, enum_values
from utils.time_utils import utc_now
from utils.validation_utils import check_one_of

logger = get_logger(__name__)


async def _place_order(
    db: AsyncIOMotorDatabase,
    user_id: str,
    product_ids: List[str],
    payment_method: str
) -> Order:
    products = await get_products_by_ids(db, [ObjectId(product_id) for product_id in product_ids])

    missing = [product_id for product_id in product_ids if product_id not in products]
    if missing:
        raise ResourceNotFoundError("Product not found", details={"product_ids": sorted(set(missing))})

    now = utc_now()
    order = Order(
        id=str(ObjectId()),
        user_id=user_id,
        product_ids=product_ids,
        total_price=price_total(product_ids, products),
        payment_method=payment_method,
        order_status=OrderStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    ensure_valid(order)

    await db[ORDERS_COLLECTION].insert_one(order.to_document())

    with LogContext(user_id=user_id, order_id=order.id):
        logger.info(f"Order placed: {len(product_ids)} item(s), total {order.total_price}")

    return order


async def checkout_cart(db: AsyncIOMotorDatabase, user_id: str, payment_method: str) -> Order:
    """
    Converts the user's cart into a Pending order and empties the cart.

    Raises:
        ValidationError: Cart is empty or payment method invalid
        ResourceNotFoundError: A product in the cart no longer exists
    """
    cart = await get_cart(db, user_id)

    if cart.is_empty:
        raise ValidationError(
            "product_ids: must contain at least one product",
            field="product_ids",
            details=[{"field": "product_ids", "message": "cart is empty"}]
        )

    ordered_ids = list(cart.product_ids)
    order = await _place_order(db, user_id, ordered_ids, payment_method)
    await clear_cart(db, user_id, ordered_ids)

    return order


async def instant_buy(
    db: AsyncIOMotorDatabase,
    user_id: str,
    product_ids: List[ObjectId],
    payment_method: str
) -> Order:
    """
    Places an order for the given products without touching the cart.
    """
    return await _place_order(db, user_id, [str(product_id) for product_id in product_ids], payment_method)


async def list_orders(db: AsyncIOMotorDatabase, user_id: str) -> List[Order]:
    """
    Returns the user's orders, newest first.
    """
    cursor = db[ORDERS_COLLECTION].find({"user_id": ObjectId(user_id)}).sort("created_at", -1)
    docs = await cursor.to_list(length=None)
    return [Order.from_document(doc) for doc in docs]


async def update_order_status(
    db: AsyncIOMotorDatabase,
    order_id: ObjectId,
    new_status: str,
    owner_id: Optional[str] = None
) -> Order:
    """
    Moves an order to `new_status`.

    Args:
        db: Database handle
        order_id: Order to update
        new_status: Target status
        owner_id: When set, the order must belong to this user

    Raises:
        ValidationError: Unknown status
        ResourceNotFoundError: No such order (or not owned by owner_id)
        ConflictError: Transition not allowed from the current status, or
            the status changed concurrently
    """
    status_error = check_one_of(new_status, enum_values(OrderStatus))
    if status_error:
        raise ValidationError(f"order_status: {status_error}", field="order_status")

    orders = db[ORDERS_COLLECTION]
    query = {"_id": order_id}
    if owner_id is not None:
        query["user_id"] = ObjectId(owner_id)

    doc = await orders.find_one(query)
    if doc is None:
        raise ResourceNotFoundError("Order not found", details={"order_id": str(order_id)})

    order = Order.from_document(doc)
    current = OrderStatus(order.order_status)
    target = OrderStatus(new_status)

    if not is_valid_transition(current, target):
        raise ConflictError(
            f"Cannot change order status from {current.value} to {target.value}",
            details={"order_status": current.value}
        )

    now = utc_now()
    result = await orders.update_one(
        {"_id": order_id, "order_status": current.value},
        {"$set": {"order_status": target.value, "updated_at": now}}
    )
    if result.modified_count == 0:
        raise ConflictError(
            f"Order status changed while updating from {current.value}",
            details={"order_status": current.value}
        )
    order.order_status = target.value
    order.updated_at = now

    with LogContext(user_id=order.user_id, order_id=order.id):
        logger.info(f"Order status changed: {current.value} -> {target.value}")

    return order


async def cancel_order(db: AsyncIOMotorDatabase, user_id: str, order_id: ObjectId) -> Order:
    """
    Cancels one of the user's own Pending or Shipped orders.
    """
    return await update_order_status(db, order_id, OrderStatus.CANCELED.value, owner_id=user_id)
