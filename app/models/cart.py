"""
app/models/cart.py

Purpose: Shopping cart document model

- One cart per user, created on first add
- product_ids may repeat; each occurrence is one unit
- total_price tracks the sum of the listed products
"""

from typing import ClassVar, List, Optional, Tuple

from app.models.common import Document, FieldError, ObjectIdStr, check_reference, collect
from utils.validation_utils import check_range, is_object_id


class Cart(Document):
    object_id_fields: ClassVar[Tuple[str, ...]] = ("user_id", "product_ids")

    user_id: Optional[ObjectIdStr] = None
    product_ids: List[ObjectIdStr] = []
    total_price: float = 0

    @property
    def is_empty(self) -> bool:
        return not self.product_ids

    def validation_errors(self) -> List[FieldError]:
        errors: List[FieldError] = []
        collect(errors, "user_id", check_reference(self.user_id))
        if not all(is_object_id(product_id) for product_id in self.product_ids):
            collect(errors, "product_ids", "must contain valid ids")
        collect(errors, "total_price", check_range(self.total_price, ge=0))
        return errors
