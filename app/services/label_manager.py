# app/services/label_manager.py
import logging
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from app.config import LABELS_COLLECTION, PAGE_SIZE
from app.core.pagination import Page
from app.db.gateway import GatewayError, RecordGateway
from app.db.utils import convert_doc_to_model
from app.models.label import LabelCreate, LabelInDB, LabelUpdate

logger = logging.getLogger(__name__)


class Notice(BaseModel):
    level: str  # "success" | "error"
    message: str


class LabelResult(BaseModel):
    """Outcome of a label action: a notice plus the refreshed page when there is one."""

    ok: bool
    reason: Optional[str] = None  # "invalid" | "remote" when not ok
    notice: Notice
    page: Optional[Page[LabelInDB]] = None


class LabelManager:
    def __init__(self, gateway: RecordGateway, page: int = 1):
        self.gateway = gateway
        self.current_page = page

    def fetch_page(self, page: Optional[int] = None) -> Page[LabelInDB]:
        if page is not None:
            self.current_page = page
        records, total_count = self.gateway.list(
            LABELS_COLLECTION, self.current_page, PAGE_SIZE, order_field="id", descending=True
        )
        return Page[LabelInDB](
            items=[convert_doc_to_model(r, LabelInDB) for r in records],
            page=self.current_page,
            page_size=PAGE_SIZE,
            total_count=total_count,
        )

    def active_labels(self) -> List[str]:
        """Names of every active label, for the place form's multi-select."""
        records = self.gateway.all(LABELS_COLLECTION, order_field="id", descending=True)
        labels = [convert_doc_to_model(r, LabelInDB) for r in records]
        return [l.label_name for l in labels if l.is_active and l.label_name]

    def _refreshed(self, message: str) -> LabelResult:
        # The write is stored; a failed re-fetch only drops the refreshed page
        try:
            page = self.fetch_page()
        except GatewayError:
            logger.exception("Failed to refresh labels page %s", self.current_page)
            page = None
        return LabelResult(ok=True, notice=Notice(level="success", message=message), page=page)

    def _failed(self, message: str, reason: str = "remote") -> LabelResult:
        return LabelResult(ok=False, reason=reason, notice=Notice(level="error", message=message))

    def add_label(self, name: str) -> LabelResult:
        try:
            label = LabelCreate(label_name=name)
        except ValidationError:
            return self._failed("Label name is required", reason="invalid")
        try:
            self.gateway.insert(LABELS_COLLECTION, label.model_dump())
        except GatewayError:
            logger.exception("Failed to add label %r", name)
            return self._failed("Could not add label")
        return self._refreshed("Label added")

    def rename_label(self, label_id: str, name: str) -> LabelResult:
        try:
            label = LabelUpdate(label_name=name)
        except ValidationError:
            return self._failed("Label name is required", reason="invalid")
        try:
            self.gateway.update(LABELS_COLLECTION, label_id, label.model_dump())
        except GatewayError:
            logger.exception("Failed to rename label %s", label_id)
            return self._failed("Could not update label")
        return self._refreshed("Label updated")

    def toggle_active(self, label_id: str, current_flag: bool) -> LabelResult:
        try:
            self.gateway.update(LABELS_COLLECTION, label_id, {"is_active": not current_flag})
        except GatewayError:
            logger.exception("Failed to toggle label %s", label_id)
            return self._failed("Could not update label status")
        return self._refreshed("Label status updated")
