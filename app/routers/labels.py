from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.core.pagination import Page
from app.db.gateway import GatewayError, RecordGateway, get_gateway
from app.models.label import LabelInDB, LabelToggle
from app.services.label_manager import LabelManager, LabelResult
from pydantic import BaseModel
import logging

router = APIRouter(prefix="/dashboard/labels", tags=["Labels"])
logger = logging.getLogger(__name__)


class LabelNameIn(BaseModel):
    # Blank names are rejected by LabelManager so the caller gets a notice
    label_name: str = ""


def label_response(result: LabelResult) -> LabelResult:
    if result.ok:
        return result
    code = status.HTTP_422_UNPROCESSABLE_ENTITY if result.reason == "invalid" else status.HTTP_502_BAD_GATEWAY
    raise HTTPException(status_code=code, detail=result.notice.model_dump())


@router.get("", response_model=Page[LabelInDB])
def list_labels(page: int = Query(1, ge=1), gateway: RecordGateway = Depends(get_gateway)):
    try:
        return LabelManager(gateway).fetch_page(page)
    except GatewayError as e:
        logger.exception("Failed to fetch labels")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to retrieve labels: {e}")


@router.post("", response_model=LabelResult, status_code=status.HTTP_201_CREATED)
def add_label(body: LabelNameIn, page: int = Query(1, ge=1), gateway: RecordGateway = Depends(get_gateway)):
    return label_response(LabelManager(gateway, page).add_label(body.label_name))


@router.put("/{label_id}", response_model=LabelResult)
def rename_label(label_id: str, body: LabelNameIn, page: int = Query(1, ge=1), gateway: RecordGateway = Depends(get_gateway)):
    return label_response(LabelManager(gateway, page).rename_label(label_id, body.label_name))


@router.post("/{label_id}/toggle", response_model=LabelResult)
def toggle_label(label_id: str, body: LabelToggle, page: int = Query(1, ge=1), gateway: RecordGateway = Depends(get_gateway)):
    return label_response(LabelManager(gateway, page).toggle_active(label_id, body.is_active))
