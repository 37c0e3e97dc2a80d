"""
Loki client for fetching and classifying logs.

This module provides an async HTTP client for the Loki query API. It performs
a single range query per call, classifies every returned line and hands back
a list ordered newest first. Retries are left to the caller.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from lokieye.fetcher.classifier import classify_line
from lokieye.fetcher.config import QueryConfig, lookback_start_ns
from lokieye.schemas import LogEntry
from lokieye.utils.logger import get_logger

logger = get_logger(__name__)

LABELS_PATH = "/loki/api/v1/labels"
QUERY_RANGE_PATH = "/loki/api/v1/query_range"

CONNECTIVITY_TIMEOUT = 5.0

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class FetchError(Exception):
    """
    Raised when logs could not be retrieved from the backend.

    Covers transport failures (DNS, refused connection, timeout) and non-2xx
    responses alike; only the message tells them apart.

    Attributes:
        status_code: HTTP status if a response was received, else None
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_headers(token: str | None) -> dict[str, str]:
    """
    Build request headers for the Loki API.

    A token that already reads like a complete header value (contains
    "Basic" or "Bearer") is passed through unchanged; anything else is sent
    as a bearer token.

    Args:
        token: Raw token, full Authorization value, or None

    Returns:
        Header dict
    """
    headers = {"Accept": "application/json"}
    if token:
        if "Basic" in token or "Bearer" in token:
            headers["Authorization"] = token
        else:
            headers["Authorization"] = f"Bearer {token}"
    return headers


def decode_timestamp(nanos: str | int) -> tuple[int, str]:
    """
    Convert a Loki nanosecond timestamp to millisecond precision.

    Sub-millisecond precision is dropped.

    Args:
        nanos: Nanoseconds since epoch, as string or int

    Returns:
        Tuple of (milliseconds since epoch, ISO-8601 string with "Z")

    Raises:
        ValueError: If the value is not an integer

    Example:
        >>> decode_timestamp("1700000000000000000")
        (1700000000000, '2023-11-14T22:13:20.000Z')
    """
    millis = int(nanos) // 1_000_000
    instant = _EPOCH + timedelta(milliseconds=millis)
    iso = instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return millis, iso


def _error_message(response: httpx.Response) -> str:
    body = response.text.strip()
    return body or response.reason_phrase or "no response body"


class LokiClient:
    """
    Async client for the Loki HTTP API.

    Example:
        >>> config = QueryConfig(url="http://localhost:3100", query='{job="varlogs"}')
        >>> async with LokiClient() as client:
        ...     if await client.test_connectivity(config):
        ...         entries = await client.fetch(config)
    """

    def __init__(self, timeout: float | None = None) -> None:
        """
        Initialize Loki client.

        Args:
            timeout: Timeout in seconds for fetch requests (default: None,
                i.e. wait as long as the backend takes)
        """
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "LokiClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()

    async def test_connectivity(self, config: QueryConfig) -> bool:
        """
        Probe the backend by listing labels.

        The probe is bounded to five seconds. Network errors, timeouts and
        non-2xx statuses all yield False; this method never raises.

        Args:
            config: Connection parameters (query fields are ignored)

        Returns:
            True if the backend answered with a 2xx status
        """
        url = f"{config.url}{LABELS_PATH}"
        try:
            response = await asyncio.wait_for(
                self.client.get(
                    url,
                    headers=build_headers(config.token),
                    timeout=CONNECTIVITY_TIMEOUT,
                ),
                timeout=CONNECTIVITY_TIMEOUT,
            )
            response.raise_for_status()
            logger.debug(f"Loki connectivity check passed: {config.url}")
            return True
        except Exception as e:
            logger.warning(f"Loki connectivity check failed for {config.url}: {e!r}")
            return False

    async def fetch(self, config: QueryConfig) -> list[LogEntry]:
        """
        Run a range query and return classified entries, newest first.

        Args:
            config: Connection and query parameters

        Returns:
            LogEntry list sorted by timestamp descending (empty if nothing matched)

        Raises:
            FetchError: On transport failure or a non-2xx response
        """
        url = f"{config.url}{QUERY_RANGE_PATH}"

        params: dict[str, str] = {
            "query": config.query,
            "limit": str(config.limit),
            "direction": "backward",
        }
        if config.lookback:
            params["start"] = str(lookback_start_ns(config.lookback))

        logger.debug(
            f"Querying Loki: {url}",
            extra={"context": {"query": config.query, "limit": config.limit,
                               "lookback": config.lookback}},
        )

        try:
            response = await self.client.get(
                url, params=params, headers=build_headers(config.token)
            )
        except httpx.HTTPError as e:
            logger.error(f"Loki request failed: {e!r}")
            raise FetchError(f"Cannot reach Loki at {config.url}: {e}") from e

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"Loki error ({status}): {_error_message(e.response)}"
            logger.error(message)
            raise FetchError(message, status_code=status) from e

        try:
            data = response.json()
        except ValueError as e:
            raise FetchError(
                f"Loki returned a non-JSON response: {e}",
                status_code=response.status_code,
            ) from e

        entries = self.parse_response(data)

        logger.info(
            f"Fetched {len(entries)} log lines from Loki",
            extra={"context": {"query": config.query, "limit": config.limit,
                               "actual_count": len(entries)}},
        )
        return entries

    @staticmethod
    def parse_response(data: Any) -> list[LogEntry]:
        """
        Decode a query_range envelope into sorted, classified entries.

        Anything other than a ``status == "success"`` envelope with a
        ``data.result`` list counts as zero entries. Malformed values are
        skipped with a warning.

        Args:
            data: Decoded JSON body

        Returns:
            LogEntry list sorted by timestamp descending
        """
        if not isinstance(data, dict) or data.get("status") != "success":
            return []

        payload = data.get("data")
        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, list):
            return []

        decoded: list[tuple[int, LogEntry]] = []

        for stream in result:
            values = stream.get("values") if isinstance(stream, dict) else None
            if not isinstance(values, list):
                continue

            for value in values:
                try:
                    nanos, line = value
                    millis, timestamp = decode_timestamp(nanos)
                except (TypeError, ValueError, OverflowError) as e:
                    logger.warning(
                        f"Skipping malformed Loki value: {e}",
                        extra={"context": {"value": str(value)[:200]}},
                    )
                    continue

                level, display = classify_line(str(line))
                decoded.append(
                    (millis, LogEntry(timestamp=timestamp, line=display, level=level))
                )

        decoded.sort(key=lambda item: item[0], reverse=True)
        return [entry for _, entry in decoded]
