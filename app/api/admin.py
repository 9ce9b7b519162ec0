"""
app/api/admin.py

Purpose: Admin-only routes

- Every route runs the ADMIN_ACCESS chain (token + ADMIN role)
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.api.access import ADMIN_ACCESS
from app.db.mongo import get_database
from app.models.common import parse_object_id
from app.schemas.requests import OrderStatusRequest, ProductRequest
from app.services import order_service, product_service

router = APIRouter(prefix="/admin", dependencies=ADMIN_ACCESS)


@router.post("/add_product", status_code=201)
async def add_product(payload: ProductRequest, db: AsyncIOMotorDatabase = Depends(get_database)):
    product = await product_service.create_product(db, payload)
    return product.model_dump()


@router.post("/order_status")
async def order_status(payload: OrderStatusRequest, db: AsyncIOMotorDatabase = Depends(get_database)):
    """
    Advances an order: Pending -> Shipped -> Delivered, or cancels it.
    """
    order_id = parse_object_id(payload.order_id, "order_id")
    order = await order_service.update_order_status(db, order_id, payload.order_status)
    return order.model_dump()
