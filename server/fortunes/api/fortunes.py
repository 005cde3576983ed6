"""Fortune API endpoints.

This is the thin FastAPI adapter. It parses HTTP requests, calls the store,
and maps store errors to status codes.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from fortunes.core.errors import EmptyStore, InvalidInput
from fortunes.core.store import FortuneStore

router = APIRouter(prefix="/fortunes")


def get_store(request: Request) -> FortuneStore:
    return request.app.state.store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


@router.get("")
async def list_fortunes(store: FortuneStore = Depends(get_store)) -> JSONResponse:
    """Return every fortune in insertion order."""
    return JSONResponse(content=[f.to_dict() for f in store.list()])


@router.get("/random")
async def random_fortune(store: FortuneStore = Depends(get_store)) -> JSONResponse:
    try:
        fortune = store.random()
    except EmptyStore as exc:
        return _error(500, str(exc))
    return JSONResponse(content=fortune.to_dict())


@router.get("/{fortune_id}")
async def get_fortune(
    fortune_id: str,
    store: FortuneStore = Depends(get_store),
) -> JSONResponse:
    # Ids are decimal; anything else cannot name a fortune.
    fortune = None
    if fortune_id.isascii() and fortune_id.isdigit():
        fortune = store.get(int(fortune_id))
    if fortune is None:
        return _error(404, "fortune not found")
    return JSONResponse(content=fortune.to_dict())


@router.post("")
async def create_fortune(
    request: Request,
    store: FortuneStore = Depends(get_store),
) -> JSONResponse:
    """Create a fortune from a ``{"text": ...}`` body.

    Returns 201 with the created fortune, or 400 if the body is not a JSON
    object with non-blank ``text``.
    """
    try:
        body = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "invalid JSON")
    if not isinstance(body, dict):
        return _error(400, "expected a JSON object")

    try:
        fortune = await store.add(body.get("text"))
    except InvalidInput as exc:
        return _error(400, str(exc))
    return JSONResponse(content=fortune.to_dict(), status_code=201)
