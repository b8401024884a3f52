# app/models/label.py
from typing import Optional
from pydantic import BaseModel, field_validator


class LabelCreate(BaseModel):
    label_name: str

    @field_validator("label_name")
    @classmethod
    def label_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Label name is required")
        return v


class LabelUpdate(LabelCreate):
    pass


class LabelToggle(BaseModel):
    is_active: bool


from app.models.base import DocumentInDB

class LabelInDB(DocumentInDB):
    label_name: Optional[str] = None
    is_active: bool = True

    @field_validator("is_active", mode="before")
    @classmethod
    def default_active(cls, v):
        # Records written without the flag are active
        return True if v is None else v
