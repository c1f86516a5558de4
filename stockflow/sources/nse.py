"""NSE corporate announcements source."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from loguru import logger
from tenacity import retry, stop_after_attempt, wait_exponential

from stockflow.exceptions import SourceError
from stockflow.models import Announcement
from stockflow.sources.base import AnnouncementSource

NSE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://www.nseindia.com/",
}

AUTH_FAILURE_CODES = (401, 403)


class SessionState(str, Enum):
    """NSE cookie session state."""

    NO_SESSION = "no_session"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


@dataclass
class SourceConfig:
    """Configuration for the NSE source."""

    url: str
    home_url: str
    timeout: float


class NSEAnnouncementSource(AnnouncementSource):
    """Fetches corporate announcements from the NSE JSON API.

    NSE refuses API calls without the cookies set by its home page, so the
    source warms a session first and re-warms at most once per fetch when
    the API answers 401/403.
    """

    def __init__(self, config: SourceConfig, client: httpx.AsyncClient | None = None) -> None:
        """Initialize source with configuration.

        Args:
            config: Source configuration
            client: HTTP client to use, created on demand if omitted
        """
        self.config = config
        self._client = client
        self._owns_client = client is None
        self.state = SessionState.NO_SESSION

    @property
    def name(self) -> str:
        """Source identifier."""
        return "nse_announcements"

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                follow_redirects=True,
                headers=NSE_HEADERS,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self) -> list[Announcement]:
        """Fetch the latest announcements.

        Returns:
            Announcements in feed order, empty on any failure
        """
        try:
            payload = await self._request_feed()
        except Exception as e:
            logger.error(f"Failed to fetch NSE announcements: {e}")
            return []

        announcements = self.parse_payload(payload)
        logger.info(f"Fetched {len(announcements)} announcements from NSE")
        return announcements

    @staticmethod
    def parse_payload(payload: Any) -> list[Announcement]:
        """Convert a feed payload into announcements.

        Accepts a bare array or an object wrapping the array under ``data``.

        Args:
            payload: Decoded JSON body

        Returns:
            Parsed announcements, skipping malformed items
        """
        if isinstance(payload, dict):
            payload = payload.get("data")

        if not isinstance(payload, list):
            logger.warning("NSE payload is not a list, treating as empty")
            return []

        announcements: list[Announcement] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            if (announcement := Announcement.from_feed(item)) is not None:
                announcements.append(announcement)
            else:
                logger.debug("Skipping NSE record without seq_id")

        return announcements

    async def _request_feed(self) -> Any:
        if self.state is not SessionState.AUTHENTICATED:
            await self._warm_up()

        response = await self.client.get(
            self.config.url, headers=NSE_HEADERS, timeout=self.config.timeout
        )

        if response.status_code in AUTH_FAILURE_CODES:
            logger.warning(f"NSE session rejected ({response.status_code}), re-authenticating once")
            self.state = SessionState.EXPIRED
            await self._warm_up()
            response = await self.client.get(
                self.config.url, headers=NSE_HEADERS, timeout=self.config.timeout
            )
            if response.status_code in AUTH_FAILURE_CODES:
                self.state = SessionState.EXPIRED
                raise SourceError(f"NSE rejected session after retry ({response.status_code})")

        response.raise_for_status()
        return response.json()

    async def _warm_up(self) -> None:
        try:
            await self._establish_session()
        except Exception as e:
            logger.warning(f"NSE session warm-up failed, continuing without cookies: {e}")
            self.state = SessionState.NO_SESSION
            return

        self.state = SessionState.AUTHENTICATED
        logger.debug("NSE session established")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        reraise=True,
    )
    async def _establish_session(self) -> None:
        response = await self.client.get(
            self.config.home_url,
            headers={**NSE_HEADERS, "Accept": "text/html"},
            timeout=self.config.timeout,
        )
        response.raise_for_status()
