# app/db/gateway.py
from typing import Any, Dict, List, Tuple
import logging

from fastapi import HTTPException, status
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, Query
from google.cloud.firestore_v1.field_path import FieldPath

from app.config import db
from app.core.pagination import page_range
from app.db.utils import doc_to_record

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A remote read or write against the data store failed."""


class RecordNotFound(GatewayError):
    pass


class RecordGateway:
    """List/count/insert/update against Firestore collections.

    Every call is a round trip; nothing is cached or retried.
    """

    def __init__(self, client):
        self.client = client

    def _order_key(self, order_field: str):
        if order_field == "id":
            return FieldPath.document_id()
        return order_field

    def count(self, collection: str) -> int:
        try:
            result = self.client.collection(collection).count().get()  # synchronous
            return int(result[0][0].value)
        except Exception as e:
            raise GatewayError(f"Failed to count {collection}: {e}") from e

    def list(
        self,
        collection: str,
        page: int,
        page_size: int,
        order_field: str = "id",
        descending: bool = True,
    ) -> Tuple[List[Dict[str, Any]], int]:
        start, _ = page_range(page, page_size)
        total_count = self.count(collection)
        direction = Query.DESCENDING if descending else Query.ASCENDING
        try:
            query = (
                self.client.collection(collection)
                .order_by(self._order_key(order_field), direction=direction)
                .offset(start)
                .limit(page_size)
            )
            items = [doc_to_record(doc) for doc in query.stream()]  # synchronous
        except Exception as e:
            raise GatewayError(f"Failed to list {collection}: {e}") from e
        return items, total_count

    def all(self, collection: str, order_field: str = "id", descending: bool = True) -> List[Dict[str, Any]]:
        """Every record of ``collection`` in one streamed query."""
        direction = Query.DESCENDING if descending else Query.ASCENDING
        try:
            query = self.client.collection(collection).order_by(self._order_key(order_field), direction=direction)
            return [doc_to_record(doc) for doc in query.stream()]  # synchronous
        except Exception as e:
            raise GatewayError(f"Failed to list {collection}: {e}") from e

    def get(self, collection: str, record_id: str) -> Dict[str, Any]:
        try:
            doc = self.client.collection(collection).document(record_id).get()  # synchronous
        except Exception as e:
            raise GatewayError(f"Failed to read {collection}/{record_id}: {e}") from e
        record = doc_to_record(doc)
        if record is None:
            raise RecordNotFound(f"{collection}/{record_id} not found")
        return record

    def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        try:
            doc_ref = self.client.collection(collection).document()
            doc_ref.set({**record, "created_at": SERVER_TIMESTAMP})  # synchronous
            created = doc_to_record(doc_ref.get())
        except Exception as e:
            raise GatewayError(f"Failed to insert into {collection}: {e}") from e
        logger.info("Inserted %s/%s", collection, created["id"])
        return created

    def update(self, collection: str, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        try:
            doc_ref = self.client.collection(collection).document(record_id)
            if not doc_ref.get().exists:
                raise RecordNotFound(f"{collection}/{record_id} not found")
            doc_ref.update(patch)  # synchronous
            updated = doc_to_record(doc_ref.get())
        except GatewayError:
            raise
        except Exception as e:
            raise GatewayError(f"Failed to update {collection}/{record_id}: {e}") from e
        logger.info("Updated %s/%s", collection, record_id)
        return updated


def get_gateway() -> RecordGateway:
    if db is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Firestore not initialized.")
    return RecordGateway(db)
