# app/models/place.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from app.core.labels import normalize_labels
from app.models.base import blank_to_none

REQUIRED_MESSAGES = {
    "place_name": "Place name is required",
    "phone_number": "Phone number is required",
    "visit_time": "Visit time is required",
    "open_close_hour": "Open/close hours are required",
    "address": "Address is required",
    "description": "Description is required",
    "place_image_folder": "Image folder name is required",
}


class PlaceForm(BaseModel):
    """Editable fields of a place, shared by the create and edit forms."""

    model_config = ConfigDict(validate_default=True)

    place_name: str = ""
    place_label: List[str] = Field(default_factory=list)
    phone_number: str = ""
    visit_time: str = ""
    open_close_hour: str = ""
    address: str = ""
    description: str = ""
    like_number: Optional[int] = None
    comment: Optional[str] = None
    view_number: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_image_folder: str = ""
    price_from: Optional[float] = None
    price_to: Optional[float] = None
    ticket: Optional[str] = None

    @field_validator(*REQUIRED_MESSAGES, mode="before")
    @classmethod
    def required_text(cls, v, info: ValidationInfo):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(REQUIRED_MESSAGES[info.field_name])
        return v.strip() if isinstance(v, str) else v

    @field_validator("place_label", mode="before")
    @classmethod
    def labels_as_list(cls, v):
        return normalize_labels(v)

    @field_validator("place_label")
    @classmethod
    def at_least_one_label(cls, v: List[str]) -> List[str]:
        if not any(label.strip() for label in v):
            raise ValueError("At least one label is required")
        if not all(label.strip() for label in v):
            raise ValueError("Labels must not be blank")
        return [label.strip() for label in v]

    @field_validator("like_number", "view_number", "price_from", "price_to", "comment", "ticket", mode="before")
    @classmethod
    def optional_blank(cls, v):
        return blank_to_none(v)

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def coordinate_present(cls, v, info: ValidationInfo):
        v = blank_to_none(v)
        if v is None:
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return v

    @field_validator("latitude")
    @classmethod
    def latitude_range(cls, v: float) -> float:
        if not -90 <= v <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def longitude_range(cls, v: float) -> float:
        if not -180 <= v <= 180:
            raise ValueError("Longitude must be between -180 and 180")
        return v

    @field_validator("price_to")
    @classmethod
    def price_range_ordered(cls, v, info: ValidationInfo):
        price_from = info.data.get("price_from")
        if v is not None and price_from is not None and price_from > v:
            raise ValueError("Price to must not be lower than price from")
        return v


from app.models.base import DocumentInDB

class PlaceInDB(DocumentInDB):
    """A stored place. Stored records are not re-validated against the form rules."""

    place_name: Optional[str] = None
    place_label: List[str] = Field(default_factory=list)
    phone_number: Optional[str] = None
    visit_time: Optional[str] = None
    open_close_hour: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    like_number: Optional[int] = None
    comment: Optional[str] = None
    view_number: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    place_image_folder: Optional[str] = None
    price_from: Optional[float] = None
    price_to: Optional[float] = None
    ticket: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    @field_validator("place_label", mode="before")
    @classmethod
    def labels_as_list(cls, v):
        return normalize_labels(v)

    @field_validator("images", mode="before")
    @classmethod
    def images_as_list(cls, v):
        return v or []

    @field_validator("like_number", "view_number", "price_from", "price_to", mode="before")
    @classmethod
    def optional_blank(cls, v):
        return blank_to_none(v)


class PlaceRow(BaseModel):
    """One row of the places table."""

    id: str
    place_name: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    place_label: List[str] = Field(default_factory=list)

    @classmethod
    def from_place(cls, place: PlaceInDB) -> "PlaceRow":
        return cls(
            id=place.id,
            place_name=place.place_name,
            address=place.address,
            phone_number=place.phone_number,
            place_label=place.place_label,
        )
