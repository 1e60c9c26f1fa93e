"""Test the HTTP API routes with an in-memory catalog and archive."""

from __future__ import annotations

import json
import random

import numpy as np
import pytest
from starlette.testclient import TestClient

from conftest import BACKGROUND_ID, BASE_ID, FIRE_ID, noise_raster, png_pixels
from dat_icons.api.app import create_app
from dat_icons.core.config import IconConfig, Settings
from dat_icons.core.enums import FileSubtype
from dat_icons.core.errors import StoreError
from dat_icons.names import TRANSPARENT_EFFECT


def _client(world, settings: Settings | None = None, seed: int = 0) -> TestClient:
    app = create_app(
        store=world.store,
        archive=world.archive,
        settings=settings,
        rng=random.Random(seed),
    )
    return TestClient(app)


class FailingStore:
    async def lookup(self, record_id):
        raise StoreError("Catalog lookup failed: database is locked")

    async def list_records(self, subtype=None):
        raise StoreError("Catalog listing failed: database is locked")

    async def add_records(self, records):
        return 0


class TestIconRoute:
    def test_png_response(self, world, base_raster):
        resp = _client(world).get("/icons/0x6957")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.headers["content-disposition"] == "inline"
        assert "x-request-id" in resp.headers
        assert np.array_equal(png_pixels(resp.content), base_raster.pixels)

    @pytest.mark.parametrize("icon_id", ["0x6957", "0x06006957", "26967", "100690263"])
    def test_equivalent_spellings_same_bytes(self, world, icon_id):
        client = _client(world)
        assert client.get(f"/icons/{icon_id}").content == client.get("/icons/0x6957").content

    def test_scale(self, world):
        resp = _client(world).get("/icons/0x6957", params={"scale": "4"})
        assert resp.status_code == 200
        assert png_pixels(resp.content).shape == (128, 128, 4)

    def test_background_by_name(self, world, background_raster):
        world.add(BACKGROUND_ID, background_raster)
        client = _client(world)
        by_name = client.get("/icons/0x6957", params={"background": "Armor"})
        by_id = client.get("/icons/0x6957", params={"background": "0x060011CF"})
        assert by_name.status_code == 200
        assert by_name.content == by_id.content

    def test_random_background_uses_configured_table(self, world, background_raster):
        world.add(BACKGROUND_ID, background_raster)
        settings = Settings(icons=IconConfig(backgrounds={"Armor": BACKGROUND_ID}))
        resp = _client(world, settings).get("/icons/0x6957", params={"background": "random"})
        assert resp.status_code == 200
        assert BACKGROUND_ID in world.store.lookups

    def test_ui_effect_by_name(self, world):
        world.add(FIRE_ID, noise_raster(12, alpha=255))
        resp = _client(world).get("/icons/0x6957", params={"ui_effect": "FIRE"})
        assert resp.status_code == 200
        assert np.array_equal(png_pixels(resp.content), noise_raster(12, alpha=255).pixels)
        assert TRANSPARENT_EFFECT not in world.store.lookups

    def test_underlay_overlay_by_id(self, world):
        world.add(0x06000100, noise_raster(20))
        world.add(0x06000200, noise_raster(21))
        world.add(0x06000300, noise_raster(22))
        resp = _client(world).get(
            "/icons/0x6957",
            params={"underlay": "256", "overlay": "0x0200", "overlay2": "0x06000300"},
        )
        assert resp.status_code == 200
        assert {0x06000100, 0x06000200, 0x06000300} <= set(world.store.lookups)


class TestIconRouteErrors:
    def test_bad_identifier_is_400_text(self, world):
        resp = _client(world).get("/icons/0x1")
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/plain")
        assert "4 or 8 digits" in resp.text

    @pytest.mark.parametrize("icon_id", ["text", "12.34", "0x12345"])
    def test_malformed_identifiers(self, world, icon_id):
        assert _client(world).get(f"/icons/{icon_id}").status_code == 400

    @pytest.mark.parametrize("scale", ["0", "9", "abc", "", "0_8", " 8 ", "\u0664"])
    def test_bad_scale_is_400(self, world, scale):
        resp = _client(world).get("/icons/0x6957", params={"scale": scale})
        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/plain")

    def test_unknown_background_is_400(self, world):
        resp = _client(world).get("/icons/0x6957", params={"background": "dragon"})
        assert resp.status_code == 400
        assert "dragon" in resp.text

    def test_bad_layer_identifier_is_400(self, world):
        resp = _client(world).get("/icons/0x6957", params={"overlay": "0x1"})
        assert resp.status_code == 400

    def test_missing_record_is_404(self, world):
        resp = _client(world).get("/icons/0x1234")
        assert resp.status_code == 404
        assert resp.text == "Failed to find record for ID 0x06001234"

    def test_missing_layer_is_404(self, world):
        resp = _client(world).get("/icons/0x6957", params={"overlay": "0x1234"})
        assert resp.status_code == 404

    def test_fetch_failure_is_500(self, world):
        world.store.put(world.store._records[BASE_ID].model_copy(update={"offset": 10**9}))
        resp = _client(world).get("/icons/0x6957")
        assert resp.status_code == 500
        assert "no data" in resp.text

    def test_decode_failure_is_500(self, world):
        world.add(0x06001234, payload=b"\x01" * 64, length=64)
        resp = _client(world).get("/icons/0x6957", params={"overlay": "0x1234"})
        assert resp.status_code == 500
        assert "4096" in resp.text

    def test_store_failure_is_500(self, world):
        app = create_app(store=FailingStore(), archive=world.archive)
        resp = TestClient(app).get("/icons/0x6957")
        assert resp.status_code == 500
        assert "database is locked" in resp.text


class TestListingRoutes:
    def _world_with_mixed_subtypes(self, world):
        world.add(0x06000001, subtype=FileSubtype.UNKNOWN)
        return world

    def test_files_lists_every_record(self, world):
        client = _client(self._world_with_mixed_subtypes(world))
        resp = client.get("/files")
        assert resp.status_code == 200
        rows = [json.loads(line) for line in resp.text.splitlines()]
        assert [row["id"] for row in rows] == sorted([0x06000001, TRANSPARENT_EFFECT, BASE_ID])
        assert rows[0]["file_type"] == "texture"
        assert rows[0]["file_subtype"] == "unknown"

    def test_icons_lists_only_icons(self, world):
        client = _client(self._world_with_mixed_subtypes(world))
        rows = [json.loads(line) for line in client.get("/icons").text.splitlines()]
        assert {row["id"] for row in rows} == {TRANSPARENT_EFFECT, BASE_ID}
        assert all(row["file_subtype"] == "icon" for row in rows)

    def test_listing_store_failure_is_500(self, world):
        app = create_app(store=FailingStore(), archive=world.archive)
        assert TestClient(app).get("/files").status_code == 500


class TestMetaRoutes:
    def test_health(self, world):
        assert _client(world).get("/health").json() == {"status": "ok"}

    def test_root_serves_openapi(self, world):
        doc = _client(world).get("/").json()
        assert "/icons/{icon_id}" in doc["paths"]
        params = {p["name"]: p for p in doc["paths"]["/icons/{icon_id}"]["get"]["parameters"]}
        assert set(params) == {
            "icon_id", "scale", "background", "underlay", "overlay", "overlay2", "ui_effect",
        }
        assert params["scale"]["schema"]["maximum"] == 8
        assert params["scale"]["schema"]["minimum"] == 1
        assert "random" in params["ui_effect"]["description"]

    def test_root_hidden_from_schema(self, world):
        doc = _client(world).get("/").json()
        assert "/" not in doc["paths"]
