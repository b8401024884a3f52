from typing import Dict, Any, Type, Optional
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


def doc_to_record(doc) -> Optional[Dict[str, Any]]:
    """Flatten a Firestore snapshot into ``{"id": ..., **fields}``."""
    if not doc.exists:
        return None
    return {"id": doc.id, **(doc.to_dict() or {})}


def convert_doc_to_model(record: Dict[str, Any], Model: Type) -> Any:
    try:
        data = dict(record)
        for key, value in data.items():
            # Unresolved sentinels (e.g. SERVER_TIMESTAMP) are not datetimes yet
            if not isinstance(value, datetime) and str(value).startswith("Sentinel"):
                data[key] = None
        return Model.model_validate(data)
    except Exception:
        logger.exception("Could not convert record %s to %s", record.get("id"), Model.__name__)
        raise
