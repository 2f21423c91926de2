"""Note store backed by a Document-MCP style vault HTTP API.

Endpoints used:
- GET  /api/notes              list every note (empty query)
- GET  /api/search?q=&limit=   full-text search, ranked by the server
- GET  /api/notes/{path}       full note, displayed content is ``body``
- POST /api/index/rebuild      refresh the server-side index after a save

Error responses follow the API envelope ``{"error", "message", "detail"}``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from notelens.config import Settings, get_settings
from notelens.core.errors import NoteNotFoundError, NoteStoreError, NoteStoreUnavailableError
from notelens.core.interfaces import INoteStore

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("detail")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


def _identifiers(payload: Any) -> List[str]:
    # /api/search returns a bare list; some deployments wrap it in {"results": [...]}
    if isinstance(payload, dict):
        payload = payload.get("results", [])
    identifiers = []
    for item in payload or []:
        if isinstance(item, str):
            identifiers.append(item)
            continue
        path = item.get("note_path") or item.get("path")
        if path:
            identifiers.append(path)
    return identifiers


class HttpNoteStore(INoteStore):
    """Note store talking to a vault server over HTTP.

    Attributes:
        base_url: Vault server URL (e.g., "http://localhost:8000")
        limit: Maximum search results requested per query
        timeout: HTTP request timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the HTTP note store.

        Args:
            base_url: Vault server URL (defaults to settings.vault_url)
            settings: Optional settings instance (uses cached settings if None)
            client: Optional preconfigured client; the store then does not close it
        """
        settings = settings or get_settings()
        self.base_url = (base_url or settings.vault_url).rstrip("/")
        self.limit = settings.search_limit
        self.timeout = settings.request_timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

        logger.info(f"Initialized HttpNoteStore with URL: {self.base_url}")

    async def __aenter__(self) -> "HttpNoteStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def search(self, query: str) -> List[str]:
        if query.strip():
            response = await self._request("GET", "/api/search", params={"q": query, "limit": self.limit})
        else:
            response = await self._request("GET", "/api/notes")
        identifiers = _identifiers(response.json())
        logger.debug(f"Vault search for '{query}' returned {len(identifiers)} notes")
        return identifiers

    async def get_content(self, identifier: str) -> str:
        response = await self._request(
            "GET", f"/api/notes/{quote(identifier, safe='/')}", identifier=identifier
        )
        data = response.json()
        if not isinstance(data, dict):
            raise NoteStoreError(f"Unexpected note payload for {identifier}", identifier=identifier)
        return data.get("body") or ""

    async def invalidate_cache(self) -> None:
        try:
            await self._request("POST", "/api/index/rebuild")
        except NoteStoreError as e:
            logger.warning(f"Index rebuild request failed: {e}")

    async def _request(
        self,
        method: str,
        path: str,
        identifier: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.ConnectError as e:
            raise NoteStoreUnavailableError(
                f"Vault server not reachable at {self.base_url}", identifier=identifier
            ) from e
        except httpx.TimeoutException as e:
            raise NoteStoreUnavailableError(
                f"Vault request timed out: {method} {path}", identifier=identifier
            ) from e
        except httpx.HTTPError as e:
            raise NoteStoreError(f"Vault request failed: {e}", identifier=identifier) from e

        if response.status_code == 404:
            raise NoteNotFoundError(
                _error_message(response) if identifier is None else f"Note not found: {identifier}",
                identifier=identifier,
            )
        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"Vault {method} {path} failed with status {response.status_code}: {message}")
            raise NoteStoreError(message, identifier=identifier)
        return response


__all__ = ["HttpNoteStore"]
