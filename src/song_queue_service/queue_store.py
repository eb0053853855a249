"""
Queue Store - Core queue logic for song requests.

Keeps submitted songs in arrival order and hands the oldest one to the host.
Every operation runs under a single lock, so enqueue, pop and remove are
linearizable even when request handlers run on many threads.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional
from urllib.parse import urlparse

from .errors import EmptyQueue, InvalidInput, QueueFull

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class SongEntry:
    """A queued song request. Instances are immutable copies."""
    id: str
    url: str
    submitted_at: int
    title: Optional[str] = None
    user: Optional[str] = None
    enqueued_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "submittedAt": self.submitted_at,
            "title": self.title,
            "user": self.user,
            "enqueuedAt": self.enqueued_at.isoformat(),
        }


@dataclass
class PlayedRecord:
    """Record of a song handed to the host, for history."""
    entry: SongEntry
    played_at: datetime

    @property
    def wait_seconds(self) -> float:
        """Time the song spent in the queue."""
        return (self.played_at - self.entry.enqueued_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.to_dict()
        data["playedAt"] = self.played_at.isoformat()
        data["waitSeconds"] = round(self.wait_seconds, 3)
        return data


@dataclass
class QueueStats:
    """Current queue statistics."""
    total_submitted: int = 0
    total_popped: int = 0
    total_removed: int = 0
    rejected_submissions: int = 0
    current_queue_size: int = 0
    max_queue_size: int = 0
    uptime_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_submitted": self.total_submitted,
            "total_popped": self.total_popped,
            "total_removed": self.total_removed,
            "rejected_submissions": self.rejected_submissions,
            "current_queue_size": self.current_queue_size,
            "max_queue_size": self.max_queue_size,
            "uptime_seconds": round(self.uptime_seconds, 1),
        }


def validate_url(url: Any) -> str:
    """
    Check that a submitted value is a well-formed absolute http(s) URL.

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        InvalidInput: if the value is not a string, is blank, or is not a URL
    """
    if not isinstance(url, str):
        raise InvalidInput("URL must be a string")

    url = url.strip()
    if not url:
        raise InvalidInput("URL must not be empty")
    if any(ch.isspace() for ch in url):
        raise InvalidInput(f"URL must not contain whitespace: {url!r}")

    parsed = urlparse(url)
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidInput(f"URL must start with http:// or https://: {url!r}")
    if not parsed.hostname:
        raise InvalidInput(f"URL has no host: {url!r}")

    return url


class SongQueueStore:
    """FIFO queue of song requests shared by all request handlers."""

    def __init__(self, max_queue_size: int = 0, history_size: int = 50):
        self.max_queue_size = max_queue_size
        self._lock = threading.Lock()
        self._entries: Deque[SongEntry] = deque()
        self._sequence = 0

        self._stats = QueueStats(max_queue_size=max_queue_size)
        self._start_time = datetime.now()
        self._played_history: Deque[PlayedRecord] = deque(maxlen=history_size)

        limit = max_queue_size if max_queue_size > 0 else "unbounded"
        logger.info(f"SongQueueStore initialized (max size: {limit})")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def enqueue(self, url: Any, title: Optional[str] = None, user: Optional[str] = None) -> SongEntry:
        """
        Append a new song as the newest entry.

        Args:
            url: Song URL (http or https)
            title: Optional display title supplied by the requester
            user: Optional name of the requester

        Returns:
            The created entry

        Raises:
            InvalidInput: if the URL is empty or malformed
            QueueFull: if a maximum size is configured and reached
        """
        try:
            url = validate_url(url)
        except InvalidInput:
            with self._lock:
                self._stats.rejected_submissions += 1
            raise

        with self._lock:
            if 0 < self.max_queue_size <= len(self._entries):
                self._stats.rejected_submissions += 1
                logger.warning(f"Queue full ({len(self._entries)}/{self.max_queue_size}), rejecting {url}")
                raise QueueFull(self.max_queue_size)

            self._sequence += 1
            entry = SongEntry(
                id=str(self._sequence),
                url=url,
                submitted_at=self._sequence,
                title=title,
                user=user,
            )
            self._entries.append(entry)
            self._stats.total_submitted += 1
            position = len(self._entries)

        logger.info(f"Song {entry.id} queued at position {position}: {url}")
        return entry

    def list_all(self) -> List[SongEntry]:
        """Snapshot of all entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def peek_oldest(self) -> SongEntry:
        """Return the oldest entry without removing it."""
        with self._lock:
            if not self._entries:
                raise EmptyQueue()
            return self._entries[0]

    def pop_oldest(self) -> SongEntry:
        """Remove and return the oldest entry."""
        with self._lock:
            if not self._entries:
                raise EmptyQueue()
            entry = self._entries.popleft()
            self._stats.total_popped += 1
            self._played_history.appendleft(PlayedRecord(entry=entry, played_at=datetime.now()))
            remaining = len(self._entries)

        logger.info(f"Song {entry.id} popped ({remaining} remaining): {entry.url}")
        return entry

    def remove(self, entry_id: str) -> bool:
        """
        Remove an arbitrary entry by id.

        Returns:
            True if an entry was removed, False if no entry has that id
        """
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    self._entries.remove(entry)
                    self._stats.total_removed += 1
                    break
            else:
                return False

        logger.info(f"Song {entry_id} removed: {entry.url}")
        return True

    def remove_by_url(self, url: str) -> bool:
        """Remove the oldest entry whose URL matches exactly."""
        url = url.strip() if isinstance(url, str) else url
        with self._lock:
            for entry in self._entries:
                if entry.url == url:
                    self._entries.remove(entry)
                    self._stats.total_removed += 1
                    break
            else:
                return False

        logger.info(f"Song {entry.id} removed by URL: {url}")
        return True

    def get_stats(self) -> QueueStats:
        """Get a copy of the current queue statistics."""
        with self._lock:
            self._stats.current_queue_size = len(self._entries)
            self._stats.uptime_seconds = (datetime.now() - self._start_time).total_seconds()
            return replace(self._stats)

    def get_played_history(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Get recently popped songs, newest first."""
        with self._lock:
            return [record.to_dict() for record in list(self._played_history)[:limit]]
