"""Shared HTTP client utilities: fetches the published JSON artifacts."""

import logging
from typing import Any

import httpx

from blog.config import get_settings

logger = logging.getLogger(__name__)

# Module-level shared client (created lazily, lives for the process lifetime)
_client: httpx.AsyncClient | None = None


class ArtifactFetchError(Exception):
    """Raised when an artifact cannot be fetched or decoded."""

    def __init__(self, path: str, reason: str, status_code: int | None = None):
        self.path = path
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {path}: {reason}")


def get_shared_client() -> httpx.AsyncClient:
    """Return a shared httpx.AsyncClient rooted at the artifact base URL."""
    global _client
    if _client is None or _client.is_closed:
        settings = get_settings()
        _client = httpx.AsyncClient(
            base_url=settings.data_base_url.rstrip("/") + "/",
            timeout=settings.http_timeout,
        )
    return _client


async def fetch_artifact(client: httpx.AsyncClient, path: str) -> Any:
    """GET a JSON artifact relative to the client's base URL.

    Any transport error, non-200 status, or undecodable body raises
    ArtifactFetchError. There is no retry.
    """
    try:
        resp = await client.get(path)
    except httpx.HTTPError as exc:
        logger.warning("Fetch failed for %s: %s", path, exc)
        raise ArtifactFetchError(path, str(exc)) from exc

    if resp.status_code != 200:
        logger.warning("HTTP %d for %s", resp.status_code, path)
        raise ArtifactFetchError(
            path, f"HTTP error! status: {resp.status_code}", resp.status_code
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise ArtifactFetchError(path, "invalid JSON") from exc
