"""
YouTube Catalog Client

Resolves channel handles and lists recent uploads using the YouTube Data
API v3, with bounded retries and daily quota accounting.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config import get_settings
from ..core.exceptions import (
    CatalogRequestError,
    InsightFeedException,
    NotFoundError,
    QuotaExceededError,
    TransientNetworkError,
)
from ..core.logging import get_logger
from ..models.channel import Channel
from .quota_manager import QuotaManager

logger = get_logger(__name__)

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"

# playlistItems.list accepts at most 50 per page
MAX_PAGE_SIZE = 50

THUMBNAIL_PRIORITY = ("high", "medium", "standard", "maxres", "default")


def best_thumbnail(
    thumbnails: Optional[Dict[str, Any]],
    qualities: Sequence[str] = THUMBNAIL_PRIORITY,
) -> Optional[str]:
    """Pick the first available thumbnail URL in priority order."""
    for quality in qualities:
        url = ((thumbnails or {}).get(quality) or {}).get("url")
        if url:
            return url
    return None


class RetryableCatalogError(Exception):
    """5xx or unreadable body; another attempt may succeed."""


def _should_retry(exc: BaseException) -> bool:
    return isinstance(exc, (httpx.TransportError, RetryableCatalogError))


def _describe(exc: Optional[BaseException]) -> Optional[str]:
    if exc is None:
        return None
    if isinstance(exc, RetryableCatalogError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


async def _backoff_sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _provider_message(response: httpx.Response) -> str:
    """Extract ``error.message`` from a YouTube error body when present."""
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"HTTP {response.status_code}"


class YouTubeCatalogClient:
    """
    YouTube Data API v3 client.

    Every request goes through `_get`, which applies the retry policy:
    up to `max_retries` attempts with 1s, 2s, 4s... backoff between them.
    4xx responses are never retried since repeating a bad or not-found
    request cannot change the answer.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        quota_manager: Optional[QuotaManager] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.youtube_api_key
        self.quota_manager = quota_manager or QuotaManager()
        self.max_retries = max(1, max_retries if max_retries is not None else settings.max_retries)
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._client = http_client

        if not self.api_key:
            logger.warning("youtube_api_key_not_set")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _send(self, url: str, params: Dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, params=params, timeout=self.timeout)

    def _client_error(self, endpoint: str, response: httpx.Response, params: Dict[str, Any]) -> InsightFeedException:
        message = _provider_message(response)
        status = response.status_code

        if status in (403, 429):
            return QuotaExceededError("YouTube", message)
        if status == 404:
            resource_id = params.get("id") or params.get("playlistId") or params.get("forHandle") or ""
            return NotFoundError(f"YouTube {endpoint}", str(resource_id))
        return CatalogRequestError(status, f"YouTube {endpoint} request rejected: {message}")

    async def _attempt(
        self, endpoint: str, url: str, query: Dict[str, Any], params: Dict[str, Any], cost: int
    ) -> Dict[str, Any]:
        """One request. Raises RetryableCatalogError for outcomes worth repeating."""
        response = await self._send(url, query)
        self.quota_manager.record_usage(cost)

        if 400 <= response.status_code < 500:
            raise self._client_error(endpoint, response, params)
        if response.status_code >= 500:
            raise RetryableCatalogError(f"HTTP {response.status_code}: {_provider_message(response)}")

        try:
            return response.json()
        except ValueError as e:
            raise RetryableCatalogError(f"invalid JSON from YouTube {endpoint}: {e}") from e

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET a Data API endpoint with retry/backoff.

        Raises:
            QuotaExceededError: local budget exhausted, or provider 403/429
            NotFoundError: provider 404
            CatalogRequestError: any other 4xx
            TransientNetworkError: network/timeout/5xx after all attempts
        """
        if not self.api_key:
            raise InsightFeedException(
                "YouTube API key not found. Set YOUTUBE_API_KEY in the environment or .env file."
            )

        cost = QuotaManager.cost_of(endpoint)
        self.quota_manager.require_quota(cost)

        url = f"{YOUTUBE_API_BASE}/{endpoint}"
        query = {**params, "key": self.api_key}

        def log_retry(retry_state: RetryCallState):
            logger.warning(
                "youtube_request_retry",
                endpoint=endpoint,
                attempt=retry_state.attempt_number,
                max_retries=self.max_retries,
                delay_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
                error=_describe(retry_state.outcome.exception()),
            )

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(_should_retry),
                stop=stop_after_attempt(self.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=30),
                sleep=_backoff_sleep,
                before_sleep=log_retry,
            ):
                with attempt:
                    return await self._attempt(endpoint, url, query, params, cost)
        except RetryError as e:
            last_exc = e.last_attempt.exception()
            last_error = _describe(last_exc)
            logger.error("youtube_request_failed", endpoint=endpoint, attempts=self.max_retries, error=last_error)
            raise TransientNetworkError(
                f"YouTube {endpoint} request failed after {self.max_retries} attempts: {last_error}"
            ) from last_exc

    @staticmethod
    def _channel_from_item(item: Dict[str, Any], handle: str) -> Optional[Channel]:
        """
        Normalise a channels.list or search.list item.

        channels.list returns ``id`` as a string; search.list nests it
        under ``id.channelId``.
        """
        raw_id = item.get("id")
        channel_id = raw_id.get("channelId") if isinstance(raw_id, dict) else raw_id
        if not channel_id:
            return None

        snippet = item.get("snippet") or {}
        return Channel(
            id=channel_id,
            title=snippet.get("title") or snippet.get("channelTitle") or handle,
            handle=handle,
            thumbnail=best_thumbnail(snippet.get("thumbnails"), ("default",)),
        )

    async def resolve_handle(self, handle: str) -> Channel:
        """
        Resolve an ``@handle`` to a Channel.

        Tries the exact ``forHandle`` lookup (1 unit) first and falls back
        to a channel search (100 units), taking the first result.

        Raises:
            NotFoundError: if neither lookup returns a channel
        """
        data = await self._get("channels", {"part": "snippet", "forHandle": handle})
        for item in data.get("items") or []:
            channel = self._channel_from_item(item, handle)
            if channel:
                logger.info("channel_resolved", handle=handle, channel_id=channel.id, via="forHandle")
                return channel

        logger.info("channel_handle_lookup_empty_trying_search", handle=handle)
        data = await self._get(
            "search",
            {"part": "snippet", "q": handle, "type": "channel", "maxResults": 1},
        )
        for item in data.get("items") or []:
            channel = self._channel_from_item(item, handle)
            if channel:
                logger.info("channel_resolved", handle=handle, channel_id=channel.id, via="search")
                return channel

        raise NotFoundError("Channel", handle)

    async def resolve_uploads_playlist(self, channel_id: str) -> str:
        """
        Get the uploads playlist ID for a channel (1 unit).

        Raises:
            NotFoundError: if the channel does not exist upstream
        """
        data = await self._get("channels", {"part": "contentDetails", "id": channel_id})
        items = data.get("items") or []
        if not items:
            raise NotFoundError("Channel", channel_id)

        uploads = (
            items[0].get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")
        )
        if not uploads:
            raise NotFoundError("Uploads playlist for channel", channel_id)
        return uploads

    async def list_recent_items(self, playlist_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        List the most recent items of a playlist (1 unit).

        Items come back in provider order (newest first); no re-sorting here.
        """
        if limit is None:
            limit = get_settings().max_results
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        data = await self._get(
            "playlistItems",
            {"part": "snippet", "playlistId": playlist_id, "maxResults": limit},
        )
        return list(data.get("items") or [])[:limit]


# Singleton instance
_catalog_client: Optional[YouTubeCatalogClient] = None


def get_catalog_client() -> YouTubeCatalogClient:
    """Get singleton catalog client instance."""
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = YouTubeCatalogClient()
    return _catalog_client
