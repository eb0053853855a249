"""
Health API endpoints - service info and health checks.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from .. import __version__
from ..queue_store import SongQueueStore
from .deps import get_store

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root(store: SongQueueStore = Depends(get_store)):
    """Root endpoint with service information."""
    return (
        f"Song Request Manager v{__version__} - queue service is running\n"
        f"Songs in queue: {len(store)}\n"
    )


@router.get("/host", response_class=PlainTextResponse)
def host_info():
    """Pointers for the host consumer."""
    return (
        "Host Interface\n"
        "GET /url/oldest peeks the next song, DELETE /url/oldest pops it.\n"
        "Run 'song-queue-dashboard' for a terminal view of the queue.\n"
    )


@router.get("/health")
def health(store: SongQueueStore = Depends(get_store)):
    """Basic health check endpoint."""
    stats = store.get_stats()

    return {
        "status": "healthy",
        "service": "song-queue-service",
        "version": __version__,
        "queue_size": stats.current_queue_size,
        "uptime_seconds": round(stats.uptime_seconds, 1),
    }
