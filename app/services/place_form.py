# app/services/place_form.py
import enum
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from app.config import PLACES_COLLECTION
from app.core.labels import normalize_labels
from app.core.storage import ImageFile, ImageUploader, check_image
from app.db.gateway import RecordGateway
from app.db.utils import convert_doc_to_model
from app.models.base import field_errors
from app.models.place import PlaceForm, PlaceInDB
from app.services.label_manager import LabelManager, LabelResult

logger = logging.getLogger(__name__)


class FormState(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class PlaceValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("Place form is invalid")
        self.errors = errors


class PlaceRecordForm:
    """Create/edit form for a place.

    ``place`` selects the mode: ``None`` creates a new record, an existing
    ``PlaceInDB`` edits it. Images are uploaded before the record is written;
    the write is skipped when any upload fails.
    """

    def __init__(
        self,
        gateway: RecordGateway,
        uploader: Optional[ImageUploader] = None,
        place: Optional[PlaceInDB] = None,
        on_saved: Optional[Callable[[PlaceInDB], Any]] = None,
    ):
        self.gateway = gateway
        self.uploader = uploader
        self.place = place
        self.on_saved = on_saved
        self.state = FormState.IDLE

    @property
    def is_edit(self) -> bool:
        return self.place is not None

    def initial_values(self) -> Dict[str, Any]:
        if self.place is None:
            return {}
        values = self.place.model_dump(exclude={"created_at"})
        values["place_label"] = normalize_labels(values.get("place_label"))
        return values

    def validate(self, data: Mapping[str, Any], files: Sequence[ImageFile] = ()) -> PlaceForm:
        self.state = FormState.VALIDATING
        errors: Dict[str, str] = {}
        form = None
        try:
            form = PlaceForm.model_validate(dict(data))
        except ValidationError as e:
            errors.update(field_errors(e))

        file_errors = [msg for msg in (check_image(f) for f in files) if msg]
        if file_errors:
            errors["files"] = "; ".join(file_errors)

        if errors:
            logger.debug("Place form rejected: %s", errors)
            self.state = FormState.IDLE
            raise PlaceValidationError(errors)
        return form

    def retained_images(self, keep_images: Optional[List[str]] = None) -> List[str]:
        """Existing images kept on edit; unknown or blank URLs are ignored."""
        if keep_images is None:
            return list(self.place.images)
        keep = {u.strip() for u in keep_images if u and u.strip()}
        return [u for u in self.place.images if u in keep]

    async def submit(
        self,
        data: Mapping[str, Any],
        files: Sequence[ImageFile] = (),
        keep_images: Optional[List[str]] = None,
    ) -> PlaceInDB:
        form = self.validate(data, files)

        self.state = FormState.SUBMITTING
        try:
            image_urls: List[str] = []
            if files:
                if self.uploader is None:
                    raise RuntimeError("No image uploader configured")
                image_urls = await self.uploader.upload_batch(form.place_image_folder, files)

            record = form.model_dump()
            if self.is_edit:
                record["images"] = self.retained_images(keep_images) + image_urls
                saved = await run_in_threadpool(self.gateway.update, PLACES_COLLECTION, self.place.id, record)
            else:
                record["images"] = image_urls
                saved = await run_in_threadpool(self.gateway.insert, PLACES_COLLECTION, record)
            place = convert_doc_to_model(saved, PlaceInDB)
        except Exception:
            logger.exception("Failed to save place %s", self.place.id if self.is_edit else "(new)")
            self.state = FormState.FAILED
            raise

        self.state = FormState.SUCCESS
        if self.on_saved is not None:
            self.on_saved(place)
        return place

    def add_label(self, name: str) -> LabelResult:
        """Quick-add a label without leaving the form."""
        return LabelManager(self.gateway).add_label(name)
