"""
app/db/indexes.py

Purpose: Database index management

- Unique indexes backing username, email and one-cart-per-user
- Lookup indexes for orders and product search
"""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from app.core.logging import get_logger
from utils.constants import (
    CARTS_COLLECTION,
    ORDERS_COLLECTION,
    PRODUCTS_COLLECTION,
    USERS_COLLECTION,
)

logger = get_logger(__name__)


async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = db[USERS_COLLECTION]
        products = db[PRODUCTS_COLLECTION]
        carts = db[CARTS_COLLECTION]
        orders = db[ORDERS_COLLECTION]

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        await users.create_index("username", unique=True, name="username_unique")
        logger.debug("Created unique index on users.username")

        await users.create_index("email", unique=True, name="email_unique")
        logger.debug("Created unique index on users.email")

        # ==============================================
        # PRODUCTS COLLECTION INDEXES
        # ==============================================

        await products.create_index("name", name="product_name_idx")
        logger.debug("Created index on products.name")

        # ==============================================
        # CARTS COLLECTION INDEXES
        # ==============================================

        await carts.create_index("user_id", unique=True, name="cart_user_unique")
        logger.debug("Created unique index on carts.user_id")

        # ==============================================
        # ORDERS COLLECTION INDEXES
        # ==============================================

        await orders.create_index(
            [("user_id", ASCENDING), ("created_at", DESCENDING)],
            name="user_orders_idx"
        )
        logger.debug("Created compound index on orders.user_id + created_at")

        await orders.create_index("order_status", name="order_status_idx")
        logger.debug("Created index on orders.order_status")

        logger.info("All database indexes created successfully")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from app.db.mongo import connect_to_mongo, close_mongo_connection, get_database

    async def main():
        await connect_to_mongo()
        await create_indexes(await get_database())
        await close_mongo_connection()

    asyncio.run(main())
