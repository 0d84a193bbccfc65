"""Async HTTP client for downloading ranking source data."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from language_tops.config import LanguageTopsConfig, load_config
from language_tops.exceptions import SourceFetchError, SourceParseError
from language_tops.models import SourceDocument
from language_tops.parsers import (
    GITHUT_METRIC_FILES,
    build_githut_document,
    build_stackoverflow_document,
    parse_pypl,
    parse_tiobe,
    process_githut_metric,
)

logger = logging.getLogger(__name__)


class SourceClient:
    """Async client that downloads and parses each ranking source."""

    def __init__(self, config: LanguageTopsConfig | None = None) -> None:
        self._config = config if config is not None else load_config()
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._config.fetch.user_agent},
            timeout=self._config.fetch.timeout,
            follow_redirects=True,
        )
        self._fetchers: dict[str, Callable[[], Awaitable[SourceDocument]]] = {
            "pypl": self.fetch_pypl,
            "tiobe": self.fetch_tiobe,
            "githut": self.fetch_githut,
            "stackoverflow": self.fetch_stackoverflow,
        }

    async def __aenter__(self) -> SourceClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._client.aclose()

    @property
    def available_sources(self) -> list[str]:
        return list(self._fetchers)

    async def fetch(self, source_name: str) -> SourceDocument:
        """Fetch one source by its identifier."""
        try:
            fetcher = self._fetchers[source_name]
        except KeyError:
            raise SourceFetchError(f"Unknown source: {source_name}") from None
        return await fetcher()

    async def _get(self, url: str) -> httpx.Response:
        """GET *url*, raising :class:`SourceFetchError` on any non-200 result."""
        logger.info("Fetching %s", url)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise SourceFetchError(f"Failed to fetch {url}: {e}", url=url) from e

        if response.status_code != 200:
            raise SourceFetchError(
                f"Failed to fetch {url}: {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return response

    async def fetch_pypl(self) -> SourceDocument:
        response = await self._get(self._config.fetch.pypl_url)
        return parse_pypl(response.text)

    async def fetch_tiobe(self) -> SourceDocument:
        """Try each configured TIOBE CSV in order; the first usable one wins."""
        for url in self._config.fetch.tiobe_urls:
            try:
                response = await self._get(url)
            except SourceFetchError as e:
                logger.info("TIOBE candidate unavailable: %s", e)
                continue
            text = response.text
            if text and "404" not in text:
                return parse_tiobe(text, data_url=url)
            logger.info("TIOBE candidate empty or missing: %s", url)

        raise SourceFetchError("Could not fetch TIOBE historical data from any source")

    async def fetch_githut(self) -> SourceDocument:
        """Fetch every GitHut metric; metrics that fail are skipped."""
        base_url = self._config.fetch.githut_base_url.rstrip("/")
        metrics: dict[str, dict[str, Any]] = {}

        for metric, file_name in GITHUT_METRIC_FILES.items():
            url = f"{base_url}/{file_name}"
            try:
                response = await self._get(url)
                metrics[metric] = process_githut_metric(response.json(), metric)
            except (SourceFetchError, SourceParseError, ValueError, KeyError) as e:
                logger.warning("Could not fetch GitHut %s: %s", metric, e)

        if not metrics:
            raise SourceFetchError("No GitHut metrics could be fetched")
        return build_githut_document(metrics)

    async def fetch_stackoverflow(self) -> SourceDocument:
        # Survey results are published yearly; the table ships with the package.
        return build_stackoverflow_document()
