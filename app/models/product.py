"""
app/models/product.py

Purpose: Product catalog entry
"""

from typing import List

from app.models.common import Document, FieldError, collect
from utils.validation_utils import check_range, check_required, validate_url


class Product(Document):
    name: str = ""
    description: str = ""
    price: float = 0
    rating: float = 0
    image: str = ""

    def validation_errors(self) -> List[FieldError]:
        errors: List[FieldError] = []
        collect(errors, "name", check_required(self.name))
        collect(errors, "description", check_required(self.description))
        collect(errors, "price", check_range(self.price, gt=0))
        collect(errors, "rating", check_range(self.rating, ge=0, le=5))
        collect(
            errors, "image",
            check_required(self.image),
            None if validate_url(self.image) else "must be a valid http(s) URL",
        )
        return errors
