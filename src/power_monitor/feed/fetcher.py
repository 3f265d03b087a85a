"""Raw feed fetchers (HTTP and local file)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from power_monitor.config.schema import FeedConfig
from power_monitor.feed.base import FeedFetcher, FeedTransportError

logger = logging.getLogger(__name__)


class HttpFeedFetcher:
    """Fetches the YAML feed over HTTP(S)."""

    def __init__(self, config: FeedConfig, client: httpx.AsyncClient | None = None) -> None:
        self._url = config.url
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def fetch_raw_series(self) -> str:
        try:
            resp = await self._client.get(self._url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise FeedTransportError(f"fetching {self._url} failed: {exc}") from exc
        logger.info("Feed fetched from %s (%d bytes)", self._url, len(resp.content))
        return resp.text

    async def close(self) -> None:
        await self._client.aclose()


class FileFeedFetcher:
    """Reads the YAML feed from a local file."""

    def __init__(self, path: Path) -> None:
        self._path = path

    async def fetch_raw_series(self) -> str:
        try:
            text = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        except OSError as exc:
            raise FeedTransportError(f"reading {self._path} failed: {exc}") from exc
        logger.info("Feed read from %s (%d chars)", self._path, len(text))
        return text

    async def close(self) -> None:
        return None


def create_fetcher(config: FeedConfig) -> FeedFetcher | None:
    """Build the fetcher for the configured feed location, if any."""
    if config.url:
        return HttpFeedFetcher(config)
    if config.path:
        return FileFeedFetcher(Path(config.path))
    logger.warning("No feed url or path configured")
    return None
