"""
app/models/common.py

Purpose: Shared document plumbing

- ObjectId <-> str conversion at the storage boundary
- Timestamped base document
- FieldError and the ensure_valid() gate used by every handler
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, List, Optional, Tuple

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from app.core.exceptions import ValidationError
from utils.validation_utils import is_object_id


def _stringify_object_id(value):
    if isinstance(value, ObjectId):
        return str(value)
    return value


# ObjectIds are stored natively and exposed as 24-char hex strings
ObjectIdStr = Annotated[str, BeforeValidator(_stringify_object_id)]


def to_object_id(value) -> Optional[ObjectId]:
    if value is None or isinstance(value, ObjectId):
        return value
    return ObjectId(value)


def parse_object_id(value: str, field: str) -> ObjectId:
    """
    Parses a client-supplied id, raising a 400 naming `field` if it is not
    a valid ObjectId.
    """
    if not is_object_id(value):
        raise ValidationError(f"{field}: must be a valid id", field=field)
    return to_object_id(value)


class FieldError(BaseModel):
    field: str
    message: str

    def nested(self, parent: str) -> "FieldError":
        return FieldError(field=f"{parent}.{self.field}", message=self.message)


def collect(errors: List[FieldError], field: str, *messages: Optional[str]) -> None:
    """
    Appends the first non-empty message for `field`, if any.
    """
    for message in messages:
        if message:
            errors.append(FieldError(field=field, message=message))
            return


class Document(BaseModel):
    """
    Base for every stored entity. Subclasses list the fields that hold
    references in `object_id_fields` so they are written as ObjectIds.
    """

    model_config = ConfigDict(populate_by_name=True)

    object_id_fields: ClassVar[Tuple[str, ...]] = ()

    id: Optional[ObjectIdStr] = Field(default=None, alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]):
        if doc is None:
            return None
        return cls.model_validate(doc)

    def to_document(self) -> Dict[str, Any]:
        """
        Converts the entity into a MongoDB document.
        """
        doc: Dict[str, Any] = {}
        for name in type(self).model_fields:
            if name == "id":
                continue
            value = getattr(self, name)
            if isinstance(value, Document):
                value = value.to_document()
            elif name in self.object_id_fields:
                if isinstance(value, list):
                    value = [to_object_id(item) for item in value]
                else:
                    value = to_object_id(value)
            doc[name] = value
        if self.id:
            doc["_id"] = to_object_id(self.id)
        return doc

    def validation_errors(self) -> List[FieldError]:
        return []


def ensure_valid(entity: Document) -> None:
    """
    Raises ValidationError naming the first failing field.

    Raises:
        ValidationError: details carry every failure in check order
    """
    errors = entity.validation_errors()
    if errors:
        first = errors[0]
        raise ValidationError(
            f"{first.field}: {first.message}",
            field=first.field,
            details=[error.model_dump() for error in errors]
        )


def check_reference(value) -> Optional[str]:
    if not value:
        return "is required"
    if not is_object_id(value):
        return "must be a valid id"
    return None
