"""HTTP retrieval of index pages and PDF documents."""

from __future__ import annotations

import logging

import requests

from ..config import Settings
from ..exceptions import FetchError

LOGGER = logging.getLogger("pdfsplice.fetch")

__all__ = ["BROWSER_HEADERS", "HttpFetcher"]

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "max-age=0",
}


class HttpFetcher:
    """Fetch resources over a shared :class:`requests.Session`.

    The session presents itself like a desktop browser; some course websites
    refuse requests carrying the default ``python-requests`` user agent.
    """

    def __init__(self, settings: Settings | None = None, *, session: requests.Session | None = None) -> None:
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.session.headers.update(BROWSER_HEADERS)
        self.session.headers["User-Agent"] = self.settings.user_agent

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, url: str) -> requests.Response:
        LOGGER.info("Fetching %s", url)
        try:
            response = self.session.get(url, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            LOGGER.error("Request to %s failed: %s", url, exc)
            raise FetchError(url, f"Request to {url} failed: {exc}") from exc
        if not response.ok:
            LOGGER.error("Request to %s returned HTTP %s", url, response.status_code)
            raise FetchError(
                url,
                f"Failed to fetch {url}: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def fetch(self, url: str) -> bytes:
        """Return the body of *url* as bytes."""

        response = self._get(url)
        LOGGER.debug("Fetched %d byte(s) from %s", len(response.content), url)
        return response.content

    __call__ = fetch

    def fetch_text(self, url: str) -> str:
        return self._get(url).text
