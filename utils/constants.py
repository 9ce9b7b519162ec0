"""
utils/constants.py

Purpose: Centralized static values

- Collection names
- Roles, payment methods and order statuses
- Client-facing messages

(Prevents hardcoding across the codebase)
"""

from enum import Enum

# ============================================================
# COLLECTIONS
# ============================================================

USERS_COLLECTION = "users"
PRODUCTS_COLLECTION = "products"
CARTS_COLLECTION = "carts"
ORDERS_COLLECTION = "orders"


# ============================================================
# ENUMS
# ============================================================

class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class TokenType(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class PaymentMethod(str, Enum):
    DIGITAL = "Digital"
    COD = "COD"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"


def enum_values(enum_cls) -> list:
    return [member.value for member in enum_cls]


# ============================================================
# PAGINATION
# ============================================================

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


# ============================================================
# MESSAGES
# ============================================================

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"
USERNAME_TAKEN_MESSAGE = "Username is already taken"
EMAIL_TAKEN_MESSAGE = "Email is already registered"
ADMIN_ONLY_MESSAGE = "This action requires the ADMIN role"
