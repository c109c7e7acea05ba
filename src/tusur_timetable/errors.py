"""Error hierarchy for upstream fetch failures.

Parsing never raises: malformed markup degrades to empty results. Only the
network layer and payload decoding raise, and the service layer answers
those with a stale cache entry when it has one.

Example usage:
    try:
        html = await session.get_text(url)
    except FetchError as e:
        log.warning("upstream_failed", url=e.url, status=e.status_code)
"""


class ScrapingError(Exception):
    """Base exception for all timetable engine errors."""

    pass


class FetchError(ScrapingError):
    """Upstream request failed.

    Examples: connection refused, timeouts, any non-2xx response.
    ``status_code`` is None when no response was received at all.
    """

    def __init__(self, message: str, *, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PayloadError(ScrapingError):
    """Upstream answered 2xx but the body is not what we can read.

    Examples: invalid JSON, a resource-links payload that is not an array.
    """

    pass
