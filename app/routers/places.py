from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from app.config import PLACES_COLLECTION, ALLOWED_IMAGE_EXTENSIONS, MAX_IMAGE_BYTES
from app.core.pagination import Page
from app.core.storage import ImageUploader, UploadError, get_uploader, read_upload
from app.db.gateway import GatewayError, RecordGateway, RecordNotFound, get_gateway
from app.db.utils import convert_doc_to_model
from app.models.place import PlaceInDB, PlaceRow
from app.services.label_manager import LabelManager, LabelResult
from app.services.place_form import PlaceRecordForm, PlaceValidationError
from app.services.place_list import fetch_places_page
from app.routers.labels import LabelNameIn, label_response
import logging

router = APIRouter(prefix="/dashboard", tags=["Places"])
logger = logging.getLogger(__name__)


class PlaceSaved(BaseModel):
    place: PlaceInDB
    page: Optional[Page[PlaceRow]] = None


class FormOptions(BaseModel):
    labels: List[str]
    image_extensions: List[str]
    max_image_bytes: int


async def _read_place_form(request: Request):
    form = await request.form()
    data: Dict[str, Any] = {}
    for key in form.keys():
        if key in ("files", "images", "place_label"):
            continue
        value = form.get(key)
        if not isinstance(value, UploadFile):
            data[key] = value

    labels = form.getlist("place_label")
    data["place_label"] = labels[0] if len(labels) == 1 else labels

    files = [await read_upload(f) for f in form.getlist("files") if isinstance(f, UploadFile) and f.filename]
    keep_images = [u for u in form.getlist("images") if isinstance(u, str) and u.strip()] if "images" in form else None
    return data, files, keep_images


def _load_place(gateway: RecordGateway, place_id: str) -> PlaceInDB:
    try:
        return convert_doc_to_model(gateway.get(PLACES_COLLECTION, place_id), PlaceInDB)
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not found")
    except GatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to retrieve place: {e}")


async def _save(form: PlaceRecordForm, request: Request, gateway: RecordGateway) -> PlaceSaved:
    data, files, keep_images = await _read_place_form(request)
    try:
        place = await form.submit(data, files, keep_images=keep_images)
    except PlaceValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail={"errors": e.errors})
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to upload images: {e}")
    except RecordNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Place not found")
    except GatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to save place: {e}")

    # Saved; a failed re-fetch only drops the refreshed list
    try:
        page = await run_in_threadpool(fetch_places_page, gateway, 1)
    except GatewayError:
        logger.exception("Failed to refresh places after save")
        page = None
    return PlaceSaved(place=place, page=page)


@router.get("", response_model=Page[PlaceRow])
@router.get("/places", response_model=Page[PlaceRow])
def list_places(page: int = Query(1, ge=1), gateway: RecordGateway = Depends(get_gateway)):
    try:
        return fetch_places_page(gateway, page)
    except GatewayError as e:
        logger.exception("Failed to fetch places")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to retrieve places: {e}")


@router.get("/places/form-options", response_model=FormOptions)
def form_options(gateway: RecordGateway = Depends(get_gateway)):
    try:
        labels = LabelManager(gateway).active_labels()
    except GatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to retrieve labels: {e}")
    return FormOptions(labels=labels, image_extensions=list(ALLOWED_IMAGE_EXTENSIONS), max_image_bytes=MAX_IMAGE_BYTES)


@router.post("/places/labels", response_model=LabelResult, status_code=status.HTTP_201_CREATED)
def quick_add_label(body: LabelNameIn, gateway: RecordGateway = Depends(get_gateway)):
    return label_response(PlaceRecordForm(gateway).add_label(body.label_name))


@router.get("/places/{place_id}")
def get_place_form(place_id: str, gateway: RecordGateway = Depends(get_gateway)):
    place = _load_place(gateway, place_id)
    return PlaceRecordForm(gateway, place=place).initial_values()


@router.post("/places", response_model=PlaceSaved, status_code=status.HTTP_201_CREATED)
async def create_place(
    request: Request,
    gateway: RecordGateway = Depends(get_gateway),
    uploader: ImageUploader = Depends(get_uploader),
):
    return await _save(PlaceRecordForm(gateway, uploader), request, gateway)


@router.put("/places/{place_id}", response_model=PlaceSaved)
async def update_place(
    place_id: str,
    request: Request,
    gateway: RecordGateway = Depends(get_gateway),
    uploader: ImageUploader = Depends(get_uploader),
):
    place = await run_in_threadpool(_load_place, gateway, place_id)
    return await _save(PlaceRecordForm(gateway, uploader, place=place), request, gateway)
