"""HTTP session for the scraped upstream sites.

TimetableSession owns an httpx.AsyncClient (or borrows one), and turns every
transport failure or non-2xx answer into FetchError so callers handle a single
exception type. Nothing is retried here; the service layer falls back to
stale cache entries.
"""

import json
from typing import Any

import httpx

from tusur_timetable.config import TimetableConfig, get_config
from tusur_timetable.errors import FetchError, PayloadError
from tusur_timetable.logging import get_logger

logger = get_logger(__name__)


def create_client(config: TimetableConfig | None = None) -> httpx.AsyncClient:
    config = config or get_config()
    return httpx.AsyncClient(
        headers={"User-Agent": config.user_agent},
        timeout=httpx.Timeout(config.http_timeout_seconds, connect=10.0),
        follow_redirects=True,
    )


class TimetableSession:
    """Read-only GET access to the timetable and university sites."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: TimetableConfig | None = None,
    ) -> None:
        """Initialize TimetableSession.

        Args:
            client: Pre-built client (tests pass one with a MockTransport).
                When omitted, a client is created and owned by the session.
            config: Engine configuration; defaults to the global singleton.
        """
        self.config = config or get_config()
        self._owns_client = client is None
        self.client = client or create_client(self.config)

    async def get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET a URL and require a 2xx answer.

        Raises:
            FetchError: On transport errors or non-2xx status.
        """
        logger.debug("upstream_fetch", url=url, params=params)
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning("upstream_unreachable", url=url, error=str(e), type=type(e).__name__)
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

        if not response.is_success:
            logger.warning("upstream_status", url=str(response.url), status=response.status_code)
            raise FetchError(
                f"{url} answered {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return response

    async def get_text(self, url: str, params: dict[str, Any] | None = None) -> str:
        response = await self.get(url, params=params)
        return response.text

    async def get_json(self, url: str) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            FetchError: On transport errors or non-2xx status.
            PayloadError: If the body is not valid JSON.
        """
        response = await self.get(url)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PayloadError(f"{url} did not return JSON: {e}") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "TimetableSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
