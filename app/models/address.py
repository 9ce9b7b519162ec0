"""
app/models/address.py

Purpose: Address document model

- Embedded in the owning user document
- References its user by id
- All geographic fields are required
"""

from typing import ClassVar, List, Optional, Tuple

from app.models.common import Document, FieldError, ObjectIdStr, check_reference, collect
from utils.validation_utils import check_required


class Address(Document):
    object_id_fields: ClassVar[Tuple[str, ...]] = ("user_id",)

    user_id: Optional[ObjectIdStr] = None
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    def validation_errors(self) -> List[FieldError]:
        errors: List[FieldError] = []
        collect(errors, "user_id", check_reference(self.user_id))
        for field in ("street", "city", "state", "zip_code", "country"):
            collect(errors, field, check_required(getattr(self, field)))
        return errors
