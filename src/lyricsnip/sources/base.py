from abc import ABC, abstractmethod

import httpx
from loguru import logger

from .. import config
from ..exceptions import FetchError


class LyricsSource(ABC):
    """Abstract base class for all lyrics providers."""

    @classmethod
    @abstractmethod
    def can_handle(cls, url: str) -> bool:
        """Return True if this source can handle the given URL."""

    def fetch(self, url: str) -> str:
        """Fetch *url* and return the response body.

        Raises FetchError on HTTP-level failures.
        """
        logger.debug("Fetching {}", url)
        try:
            resp = httpx.get(
                url,
                headers={"User-Agent": config.USER_AGENT},
                follow_redirects=True,
                timeout=config.HTTP_TIMEOUT,
            )
        except httpx.RequestError as exc:
            raise FetchError(url, 0) from exc
        if resp.status_code != 200:
            raise FetchError(url, resp.status_code)
        return resp.text

    @abstractmethod
    def extract(self, payload: str, url: str) -> str:
        """Return raw lyrics text (``[Header]`` markers kept) from *payload*.

        Raises ParseError if no lyrics can be found.
        """

    def scrape(self, url: str) -> str:
        """Convenience method: fetch + extract."""
        payload = self.fetch(url)
        return self.extract(payload, url)
