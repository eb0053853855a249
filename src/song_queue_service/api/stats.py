"""
Stats API endpoints - queue statistics and played-song history.
"""

from fastapi import APIRouter, Depends, Query

from ..queue_store import SongQueueStore
from .deps import get_store

router = APIRouter()


@router.get("/stats")
def get_stats(store: SongQueueStore = Depends(get_store)):
    """Get current queue statistics."""
    return store.get_stats().to_dict()


@router.get("/history")
def get_history(
    limit: int = Query(default=20, ge=1, le=100),
    store: SongQueueStore = Depends(get_store),
):
    """
    Get songs recently popped by the host.

    Args:
        limit: Maximum number of songs to return (1-100, default 20)

    Returns:
        Played songs, newest first, with how long each one waited
    """
    songs = store.get_played_history(limit=limit)
    return {
        "songs": songs,
        "count": len(songs),
    }
