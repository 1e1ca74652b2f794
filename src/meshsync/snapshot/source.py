"""Snapshot sources polled by the poll loop.

Provides a protocol for sources and two implementations:
- HttpSnapshotSource: GETs a NetJSON document with httpx
- FileSnapshotSource: re-reads a JSON file written by a local daemon
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol

import httpx

from meshsync.exceptions import TransportError
from meshsync.snapshot.types import decode_json

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class SnapshotSource(Protocol):
    """Protocol for snapshot sources.

    ``fetch`` returns the decoded JSON payload. Transport problems raise
    TransportError, undecodable bodies raise MalformedSnapshotError.
    """

    async def fetch(self) -> Any: ...


class HttpSnapshotSource:
    """Fetch snapshots over HTTP(S).

    Args:
        url: NetJSON endpoint
        timeout: Request timeout in seconds
        client: Optional shared ``httpx.AsyncClient``. When omitted, a client
            is created lazily and closed by ``aclose()``.

    Example:
        >>> source = HttpSnapshotSource("http://127.0.0.1:8080/netjson")
        >>> source.url
        'http://127.0.0.1:8080/netjson'
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    async def fetch(self) -> Any:
        client = self._get_client()
        try:
            response = await client.get(self.url)
        except httpx.TimeoutException as e:
            raise TransportError(self.url, message=f"Fetching {self.url} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(self.url, message=f"Fetching {self.url} failed: {e}") from e

        if not response.is_success:
            raise TransportError(self.url, status_code=response.status_code)
        logger.debug("Fetched %d bytes from %s", len(response.content), self.url)
        return decode_json(response.content)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def __repr__(self) -> str:
        return f"HttpSnapshotSource({self.url!r})"


class FileSnapshotSource:
    """Read snapshots from a JSON file on every fetch.

    A missing or unreadable file is reported as a TransportError so the
    poll loop simply tries again on the next tick.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def fetch(self) -> Any:
        try:
            raw = await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise TransportError(str(self.path), message=f"Reading {self.path} failed: {e}") from e
        return decode_json(raw)

    async def aclose(self) -> None:
        """Nothing to release."""

    def __repr__(self) -> str:
        return f"FileSnapshotSource({str(self.path)!r})"


def source_for(location: str, *, timeout: float = DEFAULT_TIMEOUT) -> HttpSnapshotSource | FileSnapshotSource:
    """Pick a source for *location*: http(s) URLs use HTTP, anything else is a file path."""
    if location.startswith(("http://", "https://")):
        return HttpSnapshotSource(location, timeout=timeout)
    return FileSnapshotSource(location)
