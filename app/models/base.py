# app/models/base.py
from typing import Optional, Dict
from datetime import datetime
from pydantic import BaseModel, Field, ValidationError


class DocumentInDB(BaseModel):
    id: str = Field(..., description="Firestore document ID")
    created_at: Optional[datetime] = None


def field_errors(exc: ValidationError) -> Dict[str, str]:
    """Collapse a pydantic ValidationError into one message per field."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__all__"
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value
