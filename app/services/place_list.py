# app/services/place_list.py
from app.config import PLACES_COLLECTION, PAGE_SIZE
from app.core.pagination import Page
from app.db.gateway import RecordGateway
from app.db.utils import convert_doc_to_model
from app.models.place import PlaceInDB, PlaceRow


def fetch_places_page(gateway: RecordGateway, page: int = 1) -> Page[PlaceRow]:
    records, total_count = gateway.list(PLACES_COLLECTION, page, PAGE_SIZE, order_field="id", descending=True)
    rows = [PlaceRow.from_place(convert_doc_to_model(r, PlaceInDB)) for r in records]
    return Page[PlaceRow](items=rows, page=page, page_size=PAGE_SIZE, total_count=total_count)
