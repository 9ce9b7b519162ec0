"""
app/services/product_service.py

Purpose: Product catalog

- Create products (admin)
- Stable, paginated listing
- Case-insensitive name search
- Price lookups for carts and orders
"""

import math
import re
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Dict, Iterable, List

from app.core.exceptions import ResourceNotFoundError
from app.core.logging import get_logger
from app.models.common import ensure_valid
from app.models.product import Product
from app.schemas.requests import ProductRequest
from utils.constants import PRODUCTS_COLLECTION
from utils.time_utils import utc_now

logger = get_logger(__name__)


async def create_product(db: AsyncIOMotorDatabase, payload: ProductRequest) -> Product:
    """
    Validates and stores a new product.

    Raises:
        ValidationError: A field fails validation
    """
    now = utc_now()
    product = Product(
        id=str(ObjectId()),
        name=payload.name.strip(),
        description=payload.description.strip(),
        price=payload.price,
        rating=payload.rating,
        image=payload.image.strip(),
        created_at=now,
        updated_at=now,
    )
    ensure_valid(product)

    await db[PRODUCTS_COLLECTION].insert_one(product.to_document())
    logger.info(f"Product created: {product.name}")

    return product


async def _find_products(db: AsyncIOMotorDatabase, query: dict, page: int, limit: int) -> List[Product]:
    cursor = (
        db[PRODUCTS_COLLECTION]
        .find(query)
        .sort("_id", 1)
        .skip((page - 1) * limit)
        .limit(limit)
    )
    docs = await cursor.to_list(length=limit)
    return [Product.from_document(doc) for doc in docs]


async def list_products(db: AsyncIOMotorDatabase, page: int = 1, limit: int = 20) -> List[Product]:
    """
    Lists products in insertion order.

    Args:
        db: Database handle
        page: 1-based page number
        limit: Page size

    Returns:
        Products on the requested page (empty past the end)
    """
    return await _find_products(db, {}, page, limit)


async def search_products(db: AsyncIOMotorDatabase, name: str, page: int = 1, limit: int = 20) -> List[Product]:
    """
    Finds products whose name contains `name`, ignoring case.
    The search text is matched literally.
    """
    query = {"name": {"$regex": re.escape(name), "$options": "i"}}
    return await _find_products(db, query, page, limit)


async def get_product(db: AsyncIOMotorDatabase, product_id: ObjectId) -> Product:
    """
    Raises:
        ResourceNotFoundError: No product with that id
    """
    doc = await db[PRODUCTS_COLLECTION].find_one({"_id": product_id})
    if doc is None:
        raise ResourceNotFoundError("Product not found", details={"product_id": str(product_id)})
    return Product.from_document(doc)


async def get_products_by_ids(db: AsyncIOMotorDatabase, product_ids: Iterable[ObjectId]) -> Dict[str, Product]:
    """
    Fetches the distinct products referenced by `product_ids`.

    Returns:
        Mapping of id string to product; unknown ids are absent
    """
    unique_ids = list(dict.fromkeys(product_ids))
    if not unique_ids:
        return {}

    cursor = db[PRODUCTS_COLLECTION].find({"_id": {"$in": unique_ids}})
    docs = await cursor.to_list(length=len(unique_ids))
    return {str(doc["_id"]): Product.from_document(doc) for doc in docs}


def price_total(product_ids: Iterable[str], products: Dict[str, Product]) -> float:
    """
    Sums the price of every listed occurrence that is still in the catalog.
    Left unrounded so a cart of positive prices never totals zero.
    """
    return math.fsum(products[product_id].price for product_id in product_ids if product_id in products)
