"""
app/schemas/requests.py

Purpose: Request body schemas

- Parse JSON bodies into typed payloads
- Fields default to empty values; entity validation reports what is missing
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class AddressPayload(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class SignupRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    password: str = ""
    email: str = ""
    phone: str = ""
    address: Optional[AddressPayload] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "username": "ada",
                "password": "analytical-engine",
                "email": "ada@example.com",
                "phone": "+44 20 7946 0000",
                "address": {
                    "street": "12 St James's Square",
                    "city": "London",
                    "state": "London",
                    "zip_code": "SW1Y 4JH",
                    "country": "UK"
                }
            }
        }
    }


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class RefreshRequest(BaseModel):
    refresh_token: str = ""


class ProductRequest(BaseModel):
    name: str = ""
    description: str = ""
    price: float = 0
    rating: float = 0
    image: str = ""


class CartItemRequest(BaseModel):
    product_id: str = ""


class CheckoutRequest(BaseModel):
    payment_method: str = Field(default="", description="Digital or COD")


class InstantBuyRequest(BaseModel):
    product_ids: List[str] = []
    payment_method: str = Field(default="", description="Digital or COD")


class OrderStatusRequest(BaseModel):
    order_id: str = ""
    order_status: str = ""


class CancelOrderRequest(BaseModel):
    order_id: str = ""
