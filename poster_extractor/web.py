"""
aiohttp web application serving the poster extractor UI and JSON API.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from aiohttp import web

from .analyzer import PosterAnalyzer
from .calendar_links import calendar_links
from .data_models import DISPLAY_KEYS, LABELS, MULTILINE_KEYS
from .exceptions import FieldRefreshError, RefreshInProgressError, UnknownFieldError


logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
INDEX_TEMPLATE = STATIC_DIR / "index.html"

# How long the "copied" indicator stays visible in the page.
COPY_FEEDBACK_MS = 2000

ANALYZER_KEY = web.AppKey("analyzer", PosterAnalyzer)


def _state(analyzer: PosterAnalyzer) -> Dict[str, Any]:
    state = analyzer.store.snapshot()
    metadata = analyzer.store.metadata
    state["calendarLinks"] = calendar_links(metadata) if metadata else {}
    return state


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _field_key(request: web.Request) -> str:
    key = request.match_info["key"]
    if key not in LABELS:
        raise web.HTTPNotFound(text=f"Unknown field: {key}")
    return key


async def index(request: web.Request) -> web.Response:
    html = INDEX_TEMPLATE.read_text(encoding="utf-8")
    html = html.replace("__COPY_FEEDBACK_MS__", str(COPY_FEEDBACK_MS))
    return web.Response(text=html, content_type="text/html")


async def get_state(request: web.Request) -> web.Response:
    state = _state(request.app[ANALYZER_KEY])
    state["labels"] = LABELS
    state["displayKeys"] = DISPLAY_KEYS
    state["multilineKeys"] = sorted(MULTILINE_KEYS)
    return web.json_response(state)


async def extract(request: web.Request) -> web.Response:
    analyzer = request.app[ANALYZER_KEY]

    if not request.content_type.startswith("multipart/"):
        return _error("Upload harus berupa multipart/form-data.", 400)

    data = b""
    filename = None
    reader = await request.multipart()
    async for part in reader:
        if part.name == "poster":
            filename = part.filename
            data = await part.read()
            break

    if not data:
        return _error("File poster tidak ditemukan.", 400)

    generation, metadata = await analyzer.upload(data, filename)
    state = _state(analyzer)
    if metadata is None:
        if not analyzer.store.is_current(generation):
            status = 409
        elif analyzer.store.image is None:
            status = 400
        else:
            status = 502
        return web.json_response(state, status=status)
    return web.json_response(state)


async def update_field(request: web.Request) -> web.Response:
    analyzer = request.app[ANALYZER_KEY]
    key = _field_key(request)

    try:
        body = await request.json()
    except ValueError:
        return _error("Body harus berupa JSON.", 400)
    value = body.get("value") if isinstance(body, dict) else None
    if not isinstance(value, str):
        return _error("Field 'value' harus berupa teks.", 400)

    try:
        analyzer.update_field(key, value)
    except LookupError as e:
        return _error(str(e), 409)
    return web.json_response(_state(analyzer))


async def refresh_field(request: web.Request) -> web.Response:
    analyzer = request.app[ANALYZER_KEY]
    key = _field_key(request)

    try:
        await analyzer.refresh_field(key)
    except RefreshInProgressError as e:
        return _error(str(e), 409)
    except FieldRefreshError as e:
        return _error(str(e), 502)
    except UnknownFieldError as e:
        return _error(str(e), 404)
    except LookupError as e:
        return _error(str(e), 409)
    return web.json_response(_state(analyzer))


async def reset(request: web.Request) -> web.Response:
    analyzer = request.app[ANALYZER_KEY]
    analyzer.reset()
    return web.json_response(_state(analyzer))


def create_app(analyzer: PosterAnalyzer) -> web.Application:
    """
    Create the web application.

    Args:
        analyzer: Poster analyzer holding the session state

    Returns:
        Configured aiohttp application
    """
    app = web.Application()
    app[ANALYZER_KEY] = analyzer
    app.add_routes([
        web.get("/", index),
        web.get("/api/state", get_state),
        web.post("/api/extract", extract),
        web.patch("/api/fields/{key}", update_field),
        web.post("/api/fields/{key}/refresh", refresh_field),
        web.post("/api/reset", reset),
    ])
    logger.info("Web application created")
    return app
