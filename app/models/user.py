"""
app/models/user.py

Purpose: User document model

- Identity, contact details and one embedded address
- Role used by the admin access check
- Last issued access/refresh token pair
- `password` holds a bcrypt digest once stored, never plaintext
"""

from typing import Any, Dict, List, Optional

from app.core.security import MAX_PASSWORD_BYTES
from app.models.address import Address
from app.models.common import Document, FieldError, collect
from utils.constants import Role, enum_values
from utils.validation_utils import (
    check_byte_length,
    check_length,
    check_one_of,
    check_required,
    validate_email,
)

# Never returned to clients
PRIVATE_FIELDS = {"password", "token", "refresh_token"}


class User(Document):
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    password: str = ""
    email: str = ""
    phone: str = ""
    address: Optional[Address] = None
    role: str = Role.USER.value
    token: Optional[str] = None
    refresh_token: Optional[str] = None

    def validation_errors(self) -> List[FieldError]:
        """
        Checks credentials first, then contact details, then the address.
        Meant for a plaintext password, before it is hashed.
        """
        errors: List[FieldError] = []
        collect(
            errors, "username",
            check_required(self.username),
            check_length(self.username, min_length=3, max_length=20),
        )
        collect(
            errors, "password",
            check_required(self.password),
            check_length(self.password, min_length=8),
            check_byte_length(self.password, MAX_PASSWORD_BYTES),
        )
        collect(
            errors, "email",
            check_required(self.email),
            None if validate_email(self.email) else "must be a valid email address",
        )
        collect(errors, "first_name", check_required(self.first_name))
        collect(errors, "last_name", check_required(self.last_name))
        collect(errors, "phone", check_required(self.phone))
        collect(errors, "role", check_one_of(self.role, enum_values(Role)))

        if self.address is None:
            collect(errors, "address", "is required")
        else:
            errors.extend(error.nested("address") for error in self.address.validation_errors())

        return errors

    def public_view(self) -> Dict[str, Any]:
        return self.model_dump(exclude=PRIVATE_FIELDS)
