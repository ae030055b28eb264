from datetime import datetime, timezone
from typing import Annotated, List, Optional

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from placement_portal.exceptions import ValidationError

# ObjectIds travel through the models as strings
PyObjectId = Annotated[str, BeforeValidator(str)]


def as_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_object_id(value) -> Optional[ObjectId]:
    """Convert a string id to ObjectId, returning None when it is not valid."""
    if isinstance(value, ObjectId):
        return value
    if value is not None and ObjectId.is_valid(str(value)):
        return ObjectId(str(value))
    return None


def to_object_ids(values, label: str = "college") -> List[ObjectId]:
    """Convert every id or raise ValidationError; nothing is silently dropped."""
    oids = []
    for value in values:
        oid = to_object_id(value)
        if oid is None:
            raise ValidationError(f"Invalid {label} ID")
        oids.append(oid)
    return oids


class MongoBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    @classmethod
    def from_mongo(cls, document: Optional[dict]):
        if not document:
            return None
        return cls.model_validate(document)
