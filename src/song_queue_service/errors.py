"""Typed failures raised by the song queue and mapped to HTTP responses."""

from typing import Optional


class SongQueueError(Exception):
    """Base exception for all song queue errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(SongQueueError):
    """Raised when a submitted URL is empty or malformed."""

    status_code = 400
    default_message = "Invalid URL"


class MalformedBody(SongQueueError):
    """Raised when a request body is not valid JSON or has the wrong shape."""

    status_code = 400
    default_message = "Invalid request body"


class EmptyQueue(SongQueueError):
    """Raised when peeking or popping an empty queue."""

    status_code = 404
    default_message = "No songs in queue"


class NotFound(SongQueueError):
    status_code = 404
    default_message = "Not Found"


class QueueFull(SongQueueError):
    """Raised when the configured queue capacity is reached."""

    status_code = 503

    def __init__(self, max_size: int) -> None:
        super().__init__(f"Queue is full ({max_size} songs), please retry later")
        self.max_size = max_size
