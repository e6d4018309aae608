"""
Tests for the aiohttp web application.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import aiohttp
import pytest

from poster_extractor.analyzer import PosterAnalyzer
from poster_extractor.exceptions import MalformedResponseError
from poster_extractor.web import COPY_FEEDBACK_MS, create_app


@pytest.fixture
def mock_client(sample_metadata):
    client = Mock()
    client.extract_metadata = AsyncMock(return_value=sample_metadata)
    client.reanalyze_field = AsyncMock(return_value="Rp 30.000")
    return client


@pytest.fixture
def analyzer(mock_client):
    return PosterAnalyzer(mock_client)


@pytest.fixture
async def client(aiohttp_client, analyzer):
    return await aiohttp_client(create_app(analyzer))


def _poster_form(data: bytes) -> aiohttp.FormData:
    form = aiohttp.FormData()
    form.add_field("poster", data, filename="poster.png", content_type="image/png")
    return form


async def _upload(client, data: bytes):
    return await client.post("/api/extract", data=_poster_form(data))


async def test_index_page(client):
    resp = await client.get("/")

    assert resp.status == 200
    html = await resp.text()
    assert "SOS Poster Meta Data Extractor" in html
    assert f"const COPY_FEEDBACK_MS = {COPY_FEEDBACK_MS};" in html
    assert COPY_FEEDBACK_MS == 2000
    assert "Satu sesi dipakai bersama oleh semua tab" in html


async def test_initial_state(client):
    resp = await client.get("/api/state")

    assert resp.status == 200
    state = await resp.json()
    assert state["metadata"] is None
    assert state["labels"]["competitionName"] == "Nama Kompetisi"
    assert "eventDateIso" not in state["displayKeys"]
    assert state["multilineKeys"] == ["broadcastMessage"]


async def test_extract_success(client, sample_png_bytes, metadata_payload):
    resp = await _upload(client, sample_png_bytes)

    assert resp.status == 200
    state = await resp.json()
    assert state["metadata"] == metadata_payload
    assert state["loading"] is False
    assert state["image"].startswith("data:image/png;base64,")
    assert set(state["calendarLinks"]) == {"registration", "event"}


async def test_extract_without_file(client):
    resp = await client.post("/api/extract", data=aiohttp.FormData({"other": "x"}))

    assert resp.status == 400
    assert "error" in await resp.json()


async def test_extract_not_multipart(client):
    resp = await client.post("/api/extract", json={"poster": "x"})

    assert resp.status == 400


async def test_extract_malformed_response(client, mock_client, sample_png_bytes):
    mock_client.extract_metadata.side_effect = MalformedResponseError()

    resp = await _upload(client, sample_png_bytes)

    assert resp.status == 502
    state = await resp.json()
    assert state["error"] == "Format respon AI tidak valid."
    assert state["metadata"] is None
    assert state["loading"] is False


async def test_update_field(client, sample_png_bytes):
    await _upload(client, sample_png_bytes)

    resp = await client.patch("/api/fields/cost", json={"value": "Rp 10.000"})

    assert resp.status == 200
    assert (await resp.json())["metadata"]["cost"] == "Rp 10.000"


async def test_update_field_changes_calendar_links(client, sample_png_bytes):
    await _upload(client, sample_png_bytes)

    resp = await client.patch("/api/fields/eventDateIso", json={"value": ""})

    assert set((await resp.json())["calendarLinks"]) == {"registration"}


async def test_update_field_invalid_body(client, sample_png_bytes):
    await _upload(client, sample_png_bytes)

    resp = await client.patch("/api/fields/cost", json={"value": 5})

    assert resp.status == 400


async def test_update_field_without_record(client):
    resp = await client.patch("/api/fields/cost", json={"value": "x"})

    assert resp.status == 409


async def test_unknown_field(client, sample_png_bytes):
    await _upload(client, sample_png_bytes)

    resp = await client.patch("/api/fields/organizer", json={"value": "x"})
    assert resp.status == 404

    resp = await client.post("/api/fields/organizer/refresh")
    assert resp.status == 404


async def test_refresh_field(client, mock_client, sample_png_bytes, metadata_payload):
    await _upload(client, sample_png_bytes)

    resp = await client.post("/api/fields/cost/refresh")

    assert resp.status == 200
    metadata = (await resp.json())["metadata"]
    assert metadata["cost"] == "Rp 30.000"
    assert {k: v for k, v in metadata.items() if k != "cost"} == \
        {k: v for k, v in metadata_payload.items() if k != "cost"}


async def test_refresh_field_failure(client, mock_client, sample_png_bytes):
    await _upload(client, sample_png_bytes)
    mock_client.reanalyze_field.side_effect = RuntimeError("overloaded")

    resp = await client.post("/api/fields/cost/refresh")

    assert resp.status == 502
    assert (await resp.json())["error"] == "Gagal memperbarui data. Silakan coba lagi."

    state = await (await client.get("/api/state")).json()
    assert state["metadata"]["cost"] == "GRATIS"
    assert state["refreshing"] == []


async def test_refresh_without_record(client):
    resp = await client.post("/api/fields/cost/refresh")

    assert resp.status == 409


async def test_reset(client, sample_png_bytes):
    await _upload(client, sample_png_bytes)

    resp = await client.post("/api/reset")

    assert resp.status == 200
    state = await resp.json()
    assert state["metadata"] is None
    assert state["image"] is None
    assert state["calendarLinks"] == {}


async def test_superseded_upload_reports_conflict(client, mock_client, sample_metadata,
                                                  sample_png_bytes):
    started = asyncio.Event()
    release = asyncio.Event()
    calls = []

    async def extract_metadata(image):
        calls.append(image)
        if len(calls) == 1:
            started.set()
            await release.wait()
            return sample_metadata
        raise MalformedResponseError()

    mock_client.extract_metadata.side_effect = extract_metadata

    first = asyncio.ensure_future(_upload(client, sample_png_bytes))
    await started.wait()
    second = await _upload(client, sample_png_bytes)
    release.set()
    first_resp = await first

    assert second.status == 502
    assert first_resp.status == 409
    state = await first_resp.json()
    assert state["metadata"] is None
    assert state["error"] == "Format respon AI tidak valid."
