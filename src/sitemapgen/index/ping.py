"""Search engine notification."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence
from urllib.parse import quote

import requests

from sitemapgen.config import DEFAULT_PING_TIMEOUT

LOGGER = logging.getLogger(__name__)

PLACEHOLDER = "%s"

SEARCH_ENGINE_PING_URLS: tuple[str, ...] = (
    "https://www.google.com/ping?sitemap=%s",
    "https://www.bing.com/ping?sitemap=%s",
)


class Pinger:
    """Sends one GET request per ping target, in parallel.

    Failures are logged and reported in the returned mapping; they are never
    raised.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = DEFAULT_PING_TIMEOUT,
        ping_urls: Sequence[str] = SEARCH_ENGINE_PING_URLS,
    ) -> None:
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.ping_urls = tuple(ping_urls)

    def __enter__(self) -> Pinger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this pinger created it."""
        if self._owns_session:
            self.session.close()

    def ping(self, sitemap_url: str, *extra_urls: str) -> dict[str, bool]:
        """Ping every target about ``sitemap_url``; returns success per request URL."""
        if not sitemap_url:
            raise ValueError("A published sitemap URL is required")
        templates = [*extra_urls, *self.ping_urls]
        for template in templates:
            if PLACEHOLDER not in template:
                raise ValueError(f"Ping URL template has no {PLACEHOLDER} placeholder: {template}")
        if not templates:
            return {}

        encoded = quote(sitemap_url, safe="")
        urls = [template.replace(PLACEHOLDER, encoded) for template in templates]
        with ThreadPoolExecutor(max_workers=len(urls)) as executor:
            results = list(executor.map(self._ping_one, urls))
        return dict(zip(urls, results))

    def _ping_one(self, url: str) -> bool:
        LOGGER.info("Pinging %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            try:
                response.raise_for_status()
            finally:
                response.close()
        except requests.RequestException as exc:
            LOGGER.warning("Failed to ping %s: %s", url, exc)
            return False
        LOGGER.info("Successful ping: %s", url)
        return True
