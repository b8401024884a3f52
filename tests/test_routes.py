"""HTTP tests for the places and labels dashboard routes."""

import asyncio
import time
from unittest.mock import patch

import httpx

from conftest import valid_place


def place_form(**overrides):
    data = valid_place(**overrides)
    data["latitude"] = str(data["latitude"])
    data["longitude"] = str(data["longitude"])
    return data


def jpg(name):
    return ("files", (name, b"\xff\xd8\xff\xe0", "image/jpeg"))


class TestPlaceList:

    def test_dashboard_lists_places(self, auth_client, gateway):
        gateway.seed("place_destination", valid_place(place_label="Beach, Food"))
        gateway.seed("place_destination", valid_place(place_name="Hoi An", place_label=["Heritage"]))

        response = auth_client.get("/dashboard")

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 2
        assert [row["place_name"] for row in body["items"]] == ["Hoi An", "Ha Long Bay"]
        assert body["items"][1]["place_label"] == ["Beach", "Food"]

    def test_second_page(self, auth_client, gateway):
        for i in range(12):
            gateway.seed("place_destination", valid_place(place_name=f"Place {i}"))
        body = auth_client.get("/dashboard/places", params={"page": 2}).json()
        assert len(body["items"]) == 2
        assert body["has_next"] is False
        assert body["has_previous"] is True

    def test_page_zero_rejected(self, auth_client):
        assert auth_client.get("/dashboard/places", params={"page": 0}).status_code == 422


class TestCreatePlace:

    def test_create_with_two_images(self, auth_client, gateway, uploader):
        data = place_form()
        data["place_label"] = ["Beach", "Eco Tourism"]

        response = auth_client.post("/dashboard/places", data=data, files=[jpg("a.jpg"), jpg("b.jpg")])

        assert response.status_code == 201, response.text
        assert len(uploader.uploads) == 2
        inserts = gateway.writes("insert")
        assert len(inserts) == 1
        assert len(inserts[0][2]["images"]) == 2
        body = response.json()
        assert body["place"]["place_label"] == ["Beach", "Eco Tourism"]
        assert body["page"]["total_count"] == 1

    def test_single_comma_label_field(self, auth_client, gateway):
        response = auth_client.post("/dashboard/places", data=place_form(place_label="Beach, Food"))
        assert response.status_code == 201, response.text
        assert gateway.writes("insert")[0][2]["place_label"] == ["Beach", "Food"]

    def test_missing_field_is_422_without_write(self, auth_client, gateway, uploader):
        response = auth_client.post("/dashboard/places", data=place_form(address=""), files=[jpg("a.jpg")])
        assert response.status_code == 422
        assert "address" in response.json()["detail"]["errors"]
        assert gateway.writes() == []
        assert uploader.uploads == []

    def test_bad_latitude_is_422(self, auth_client, gateway):
        response = auth_client.post("/dashboard/places", data=place_form(latitude="91"))
        assert response.status_code == 422
        assert "latitude" in response.json()["detail"]["errors"]
        assert gateway.writes() == []

    def test_upload_failure_is_502_without_write(self, auth_client, gateway, uploader):
        uploader.reject = {"b.jpg"}
        response = auth_client.post("/dashboard/places", data=place_form(), files=[jpg("a.jpg"), jpg("b.jpg")])
        assert response.status_code == 502
        assert gateway.writes() == []

    def test_write_failure_is_502(self, auth_client, gateway):
        gateway.fail_writes = True
        response = auth_client.post("/dashboard/places", data=place_form())
        assert response.status_code == 502


class TestEditPlace:

    def test_prefill_and_update(self, auth_client, gateway):
        stored = gateway.seed("place_destination", {**valid_place(place_label="Beach,Food"), "images": ["old.jpg"]})

        prefill = auth_client.get(f"/dashboard/places/{stored['id']}").json()
        assert prefill["place_label"] == ["Beach", "Food"]

        response = auth_client.put(f"/dashboard/places/{stored['id']}", data=place_form(place_name="Renamed"))

        assert response.status_code == 200, response.text
        assert gateway.writes("insert") == []
        assert response.json()["place"]["place_name"] == "Renamed"
        assert response.json()["place"]["images"] == ["old.jpg"]

    def test_blank_images_field_keeps_none(self, auth_client, gateway):
        stored = gateway.seed("place_destination", {**valid_place(), "images": ["old.jpg"]})

        response = auth_client.put(f"/dashboard/places/{stored['id']}", data={**place_form(), "images": ""})

        assert response.status_code == 200, response.text
        assert response.json()["place"]["images"] == []

    def test_foreign_image_url_is_dropped(self, auth_client, gateway):
        stored = gateway.seed("place_destination", {**valid_place(), "images": ["old.jpg", "keep.jpg"]})

        response = auth_client.put(
            f"/dashboard/places/{stored['id']}",
            data={**place_form(), "images": ["keep.jpg", "https://elsewhere.example.com/x.jpg"]},
        )

        assert response.json()["place"]["images"] == ["keep.jpg"]

    def test_unknown_place_is_404(self, auth_client):
        assert auth_client.get("/dashboard/places/missing").status_code == 404
        assert auth_client.put("/dashboard/places/missing", data=place_form()).status_code == 404


class TestFormOptions:

    def test_active_labels_only(self, auth_client, gateway):
        gateway.seed("labels", {"label_name": "Beach", "is_active": True})
        gateway.seed("labels", {"label_name": "Closed", "is_active": False})
        body = auth_client.get("/dashboard/places/form-options").json()
        assert body["labels"] == ["Beach"]
        assert ".png" in body["image_extensions"]

    def test_quick_add_label(self, auth_client, gateway):
        response = auth_client.post("/dashboard/places/labels", json={"label_name": "Eco Tourism"})
        assert response.status_code == 201
        assert gateway.writes() == [("insert", "labels", {"label_name": "Eco Tourism"})]


class TestLabelRoutes:

    def test_add_then_list(self, auth_client, gateway):
        response = auth_client.post("/dashboard/labels", json={"label_name": "Eco Tourism"})
        assert response.status_code == 201
        assert response.json()["notice"]["level"] == "success"

        body = auth_client.get("/dashboard/labels").json()
        assert body["items"][0]["label_name"] == "Eco Tourism"
        assert body["items"][0]["is_active"] is True

    def test_blank_add_is_422(self, auth_client, gateway):
        response = auth_client.post("/dashboard/labels", json={"label_name": " "})
        assert response.status_code == 422
        assert response.json()["detail"]["level"] == "error"
        assert gateway.writes() == []

    def test_rename(self, auth_client, gateway):
        label = gateway.seed("labels", {"label_name": "Beach", "is_active": True})
        response = auth_client.put(f"/dashboard/labels/{label['id']}", json={"label_name": "Beaches"})
        assert response.status_code == 200
        assert response.json()["page"]["items"][0]["label_name"] == "Beaches"

    def test_toggle(self, auth_client, gateway):
        label = gateway.seed("labels", {"label_name": "Beach", "is_active": True})
        response = auth_client.post(f"/dashboard/labels/{label['id']}/toggle", json={"is_active": True})
        assert response.status_code == 200
        assert response.json()["page"]["items"][0]["is_active"] is False

    def test_failed_refresh_still_reports_stored_write(self, auth_client, gateway):
        gateway.fail_reads = True

        response = auth_client.post("/dashboard/labels", json={"label_name": "Eco Tourism"})

        assert response.status_code == 201
        assert response.json()["ok"] is True
        assert response.json()["page"] is None
        assert len(gateway.writes("insert")) == 1

    def test_remote_failure_is_502(self, auth_client, gateway):
        label = gateway.seed("labels", {"label_name": "Beach"})
        gateway.fail_writes = True
        response = auth_client.post(f"/dashboard/labels/{label['id']}/toggle", json={"is_active": True})
        assert response.status_code == 502
        assert response.json()["detail"]["message"] == "Could not update label status"


class TestBackendNotInitialized:

    def test_missing_firestore_is_500(self, auth_client, dashboard_app):
        from app.db.gateway import get_gateway
        dashboard_app.dependency_overrides.pop(get_gateway)

        with patch("app.db.gateway.db", None):
            response = auth_client.get("/dashboard/labels")

        assert response.status_code == 500
        assert response.json()["detail"] == "Firestore not initialized."


class TestConcurrentRequests:
    """Slow store reads hold up only the request that made them."""

    def test_label_pages_are_served_concurrently(self, dashboard_app, gateway):
        gateway.read_delay = 0.3

        async def fetch_four():
            transport = httpx.ASGITransport(app=dashboard_app)
            async with httpx.AsyncClient(
                transport=transport, base_url="http://testserver", cookies={"isAuthenticated": "true"}
            ) as ac:
                return await asyncio.gather(*(ac.get("/dashboard/labels") for _ in range(4)))

        started = time.monotonic()
        responses = asyncio.run(fetch_four())
        elapsed = time.monotonic() - started

        assert [r.status_code for r in responses] == [200] * 4
        assert elapsed < 0.9
