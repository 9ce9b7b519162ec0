"""
app/models/order.py

Purpose: Order document model

- Created from a cart checkout or an instant buy
- Status moves Pending -> Shipped -> Delivered
- Pending and Shipped orders can be Canceled
- Delivered and Canceled are terminal
"""

from typing import ClassVar, Dict, List, Optional, Tuple

from app.models.common import Document, FieldError, ObjectIdStr, check_reference, collect
from utils.constants import OrderStatus, PaymentMethod, enum_values
from utils.validation_utils import check_one_of, check_range, check_required, is_object_id


ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.SHIPPED, OrderStatus.CANCELED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED, OrderStatus.CANCELED],
    OrderStatus.DELIVERED: [],
    OrderStatus.CANCELED: [],
}


def is_valid_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    """
    Checks if an order status change is allowed.

    Args:
        from_status: Current status
        to_status: Target status

    Returns:
        True if transition is allowed, False otherwise
    """
    allowed_transitions = ORDER_STATUS_TRANSITIONS.get(from_status, [])
    return to_status in allowed_transitions


class Order(Document):
    object_id_fields: ClassVar[Tuple[str, ...]] = ("user_id", "product_ids")

    user_id: Optional[ObjectIdStr] = None
    product_ids: List[ObjectIdStr] = []
    total_price: float = 0
    payment_method: str = ""
    order_status: str = OrderStatus.PENDING.value

    def validation_errors(self) -> List[FieldError]:
        errors: List[FieldError] = []
        collect(errors, "user_id", check_reference(self.user_id))
        collect(
            errors, "product_ids",
            "must contain at least one product" if not self.product_ids else None,
            None if all(is_object_id(product_id) for product_id in self.product_ids) else "must contain valid ids",
        )
        collect(errors, "total_price", check_range(self.total_price, gt=0))
        collect(
            errors, "payment_method",
            check_required(self.payment_method),
            check_one_of(self.payment_method, enum_values(PaymentMethod)),
        )
        collect(errors, "order_status", check_one_of(self.order_status, enum_values(OrderStatus)))
        return errors
