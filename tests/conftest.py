"""Shared fixtures: an in-memory record store, a fake uploader and an app client."""

import itertools
import threading
import time
from datetime import datetime, timezone

import pytest
from starlette.testclient import TestClient

from app.core.pagination import page_range
from app.db.gateway import GatewayError, RecordNotFound


# ---------------------------------------------------------------------------
# Backend fakes
# ---------------------------------------------------------------------------

class FakeGateway:
    """In-memory stand-in for RecordGateway that records every call."""

    def __init__(self):
        self.collections = {}
        self.calls = []
        self.fail_writes = False
        self.fail_reads = False
        self.read_delay = 0
        self.write_threads = []
        self._ids = itertools.count(1)

    def seed(self, collection, record):
        record_id = f"{next(self._ids):06d}"
        stored = {"id": record_id, "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc), **record}
        self.collections.setdefault(collection, {})[record_id] = stored
        return dict(stored)

    def writes(self, kind=None):
        return [c for c in self.calls if c[0] in (("insert", "update") if kind is None else (kind,))]

    def count(self, collection):
        return len(self.collections.get(collection, {}))

    def _read(self):
        if self.read_delay:
            time.sleep(self.read_delay)
        if self.fail_reads:
            raise GatewayError("read rejected")

    def list(self, collection, page, page_size, order_field="id", descending=True):
        self.calls.append(("list", collection, page, page_size))
        self._read()
        start, end = page_range(page, page_size)
        rows = sorted(self.collections.get(collection, {}).values(), key=lambda r: r[order_field], reverse=descending)
        return [dict(r) for r in rows[start:end]], len(rows)

    def all(self, collection, order_field="id", descending=True):
        self.calls.append(("all", collection))
        self._read()
        rows = sorted(self.collections.get(collection, {}).values(), key=lambda r: r[order_field], reverse=descending)
        return [dict(r) for r in rows]

    def get(self, collection, record_id):
        self.calls.append(("get", collection, record_id))
        try:
            return dict(self.collections[collection][record_id])
        except KeyError:
            raise RecordNotFound(f"{collection}/{record_id} not found")

    def insert(self, collection, record):
        self.calls.append(("insert", collection, dict(record)))
        self.write_threads.append(threading.get_ident())
        if self.fail_writes:
            raise GatewayError("insert rejected")
        return self.seed(collection, record)

    def update(self, collection, record_id, patch):
        self.calls.append(("update", collection, record_id, dict(patch)))
        self.write_threads.append(threading.get_ident())
        if self.fail_writes:
            raise GatewayError("update rejected")
        if record_id not in self.collections.get(collection, {}):
            raise RecordNotFound(f"{collection}/{record_id} not found")
        self.collections[collection][record_id].update(patch)
        return dict(self.collections[collection][record_id])


class FakeUploader:
    """Stand-in for ImageUploader; fails on filenames listed in ``reject``."""

    def __init__(self, reject=()):
        self.reject = set(reject)
        self.uploads = []

    def upload(self, folder, image):
        from app.core.storage import UploadError
        if image.filename in self.reject:
            raise UploadError(f"Failed to upload {image.filename}")
        self.uploads.append((folder, image.filename))
        return f"https://storage.example.com/places/{folder}/{len(self.uploads)}{image.extension}"

    async def upload_batch(self, folder, images):
        return [self.upload(folder, image) for image in images]


def valid_place(**overrides):
    data = {
        "place_name": "Ha Long Bay",
        "place_label": ["Beach", "Eco Tourism"],
        "phone_number": "0203 3846 592",
        "visit_time": "All year",
        "open_close_hour": "07:00 - 17:30",
        "address": "Quang Ninh, Vietnam",
        "description": "Limestone islands in emerald water.",
        "latitude": 20.9101,
        "longitude": 107.1839,
        "place_image_folder": "ha-long-bay",
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def dashboard_app(gateway, uploader):
    from app.main import app
    from app.db.gateway import get_gateway
    from app.core.storage import get_uploader

    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_uploader] = lambda: uploader
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(dashboard_app):
    """Anonymous client (no isAuthenticated cookie)."""
    return TestClient(dashboard_app)


@pytest.fixture
def auth_client(dashboard_app):
    """Client carrying the isAuthenticated cookie."""
    c = TestClient(dashboard_app)
    c.cookies.set("isAuthenticated", "true")
    return c
