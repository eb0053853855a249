"""
Song API endpoints - submit, list, peek, pop and remove queued songs.

Handlers are plain functions so FastAPI runs them on its worker threads;
the store serializes access to the queue itself.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..queue_store import SongQueueStore
from .deps import (
    DeleteSongRequest,
    SongRequest,
    get_store,
    read_delete_request,
    read_song_request,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/url", status_code=201)
def add_song(
    payload: SongRequest = Depends(read_song_request),
    store: SongQueueStore = Depends(get_store),
):
    """
    Queue a song URL as the newest entry.

    Returns:
        201 with the created entry. Empty or malformed URLs give 400.
    """
    entry = store.enqueue(payload.url, title=payload.title, user=payload.user)
    return JSONResponse(status_code=201, content=entry.to_dict())


@router.get("/urls")
def list_songs(store: SongQueueStore = Depends(get_store)):
    """All queued songs, oldest first."""
    return [entry.to_dict() for entry in store.list_all()]


@router.get("/url/oldest")
def peek_oldest(store: SongQueueStore = Depends(get_store)):
    """The next song for the host, left in the queue."""
    return store.peek_oldest().to_dict()


@router.delete("/url/oldest")
def pop_oldest(store: SongQueueStore = Depends(get_store)):
    """Remove and return the next song for the host."""
    return store.pop_oldest().to_dict()


@router.delete("/url/{entry_id}")
def remove_song(entry_id: str, store: SongQueueStore = Depends(get_store)):
    if store.remove(entry_id):
        return {"removed": True}
    logger.info(f"Remove requested for unknown song id {entry_id}")
    return JSONResponse(status_code=404, content={"removed": False})


@router.delete("/url")
def remove_song_by_url(
    payload: DeleteSongRequest = Depends(read_delete_request),
    store: SongQueueStore = Depends(get_store),
):
    """Remove the oldest queued entry with the given URL."""
    if store.remove_by_url(payload.url):
        return {"removed": True}
    return JSONResponse(status_code=404, content={"removed": False})
