"""
Client for Song Queue Service.
Used by requesters to submit songs and by the host to take the next one.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class SongQueueClientError(Exception):
    """Raised when the service answers with an unexpected status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SongQueueClient:
    """
    Async client for the song queue HTTP API.

    Every call opens a short-lived httpx.AsyncClient, so an instance can be
    shared freely between tasks.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._available = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text
        if isinstance(data, dict) and "error" in data:
            return str(data["error"])
        return response.text

    def _raise_for_status(self, response: httpx.Response, *expected: int) -> None:
        if response.status_code not in expected:
            raise SongQueueClientError(response.status_code, self._error_message(response))

    async def submit_song(
        self,
        url: str,
        title: Optional[str] = None,
        user: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Queue a song.

        Args:
            url: Song URL
            title: Optional display title
            user: Optional requester name

        Returns:
            The created entry as returned by the service
        """
        payload: Dict[str, Any] = {"url": url}
        if title is not None:
            payload["title"] = title
        if user is not None:
            payload["user"] = user

        async with self._client() as client:
            response = await client.post("/url", json=payload)
        self._raise_for_status(response, 201)
        return response.json()

    async def list_songs(self) -> List[Dict[str, Any]]:
        """All queued songs, oldest first."""
        async with self._client() as client:
            response = await client.get("/urls")
        self._raise_for_status(response, 200)
        return response.json()

    async def peek_oldest(self) -> Optional[Dict[str, Any]]:
        """Next song without removing it, or None when the queue is empty."""
        async with self._client() as client:
            response = await client.get("/url/oldest")
        if response.status_code == 404:
            return None
        self._raise_for_status(response, 200)
        return response.json()

    async def pop_oldest(self) -> Optional[Dict[str, Any]]:
        """Take the next song off the queue, or None when the queue is empty."""
        async with self._client() as client:
            response = await client.delete("/url/oldest")
        if response.status_code == 404:
            return None
        self._raise_for_status(response, 200)
        return response.json()

    async def remove_song(self, entry_id: str) -> bool:
        """Remove a queued song by id. Returns False if it was not queued."""
        async with self._client() as client:
            response = await client.delete(f"/url/{entry_id}")
        if response.status_code == 404:
            return False
        self._raise_for_status(response, 200, 204)
        return True

    async def get_stats(self) -> Dict[str, Any]:
        """Get queue statistics."""
        async with self._client() as client:
            response = await client.get("/stats")
        self._raise_for_status(response, 200)
        return response.json()

    async def get_history(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Get songs recently popped by the host."""
        async with self._client() as client:
            response = await client.get("/history", params={"limit": limit})
        self._raise_for_status(response, 200)
        return response.json().get("songs", [])

    async def get_health(self) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.get("/health")
        self._raise_for_status(response, 200)
        return response.json()

    async def is_available(self) -> bool:
        """Check if the service answers its health endpoint."""
        try:
            await self.get_health()
            self._available = True
        except (httpx.HTTPError, SongQueueClientError):
            self._available = False
        return self._available

    async def wait_for_service(self, max_retries: int = 10, delay: float = 1.0) -> bool:
        """Wait for the service to become available with exponential backoff."""
        current_delay = delay
        for attempt in range(max_retries):
            if await self.is_available():
                logger.info(f"Song Queue Service available after {attempt + 1} attempts")
                return True

            logger.warning(
                f"Song Queue Service not available, attempt {attempt + 1}/{max_retries}, "
                f"retrying in {current_delay:.1f}s..."
            )
            await asyncio.sleep(current_delay)
            current_delay = min(current_delay * 2, 30)

        logger.error(f"Song Queue Service not available after {max_retries} attempts")
        return False
