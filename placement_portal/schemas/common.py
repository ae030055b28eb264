from datetime import datetime
from typing import Any

from bson import ObjectId


def serialize_document(document: Any) -> Any:
    """Make a Mongo document JSON friendly: ObjectIds become strings, _id becomes id."""
    if isinstance(document, list):
        return [serialize_document(item) for item in document]
    if isinstance(document, dict):
        result = {}
        for key, value in document.items():
            if key == "password":
                continue
            result["id" if key == "_id" else key] = serialize_document(value)
        return result
    if isinstance(document, ObjectId):
        return str(document)
    if isinstance(document, datetime):
        return document.isoformat()
    return document
