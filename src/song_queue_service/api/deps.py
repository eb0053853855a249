"""
Request dependencies shared by the API routers.
"""

from typing import Any, Dict, Optional

from fastapi import Request
from pydantic import BaseModel, ValidationError

from ..errors import MalformedBody
from ..queue_store import SongQueueStore


class SongRequest(BaseModel):
    """Body of POST /url."""
    url: str
    title: Optional[str] = None
    user: Optional[str] = None


class DeleteSongRequest(BaseModel):
    """Body of DELETE /url."""
    url: str


def get_store(request: Request) -> SongQueueStore:
    """The store owned by the running application."""
    return request.app.state.store


async def _read_json(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except (ValueError, RecursionError):
        raise MalformedBody()
    if not isinstance(body, dict):
        raise MalformedBody()
    return body


async def read_song_request(request: Request) -> SongRequest:
    """Parse the POST /url body, rejecting anything that is not ``{"url": "..."}``."""
    body = await _read_json(request)
    try:
        return SongRequest.model_validate(body)
    except ValidationError:
        raise MalformedBody()


async def read_delete_request(request: Request) -> DeleteSongRequest:
    body = await _read_json(request)
    try:
        return DeleteSongRequest.model_validate(body)
    except ValidationError:
        raise MalformedBody()
