"""
Query configuration for the Loki fetcher.

This module defines the connection and query parameters for a single
fetch, plus parsing of lookback windows such as "6h" or "7d".
"""

import os
import re
import time
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field, field_validator

_DURATION_RE = re.compile(r"^(\d+)([smhdw])$")

_DURATION_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}


def parse_duration(token: str) -> timedelta:
    """
    Parse a lookback token into a timedelta.

    Args:
        token: Duration such as "30m", "6h", "7d" or "2w"

    Returns:
        Equivalent timedelta

    Raises:
        ValueError: If the token is not ``<positive int><s|m|h|d|w>``

    Example:
        >>> parse_duration("6h")
        datetime.timedelta(seconds=21600)
    """
    match = _DURATION_RE.match(token.strip().lower())
    if not match:
        raise ValueError(
            f"Invalid lookback window '{token}'. Expected e.g. 15m, 6h, 7d"
        )

    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Lookback window must be positive: '{token}'")

    return amount * _DURATION_UNITS[match.group(2)]


def lookback_start_ns(window: str, now_ns: int | None = None) -> int:
    """
    Convert a lookback window into an absolute start time.

    Args:
        window: Duration token (see :func:`parse_duration`)
        now_ns: Current time in nanoseconds since epoch (default: wall clock)

    Returns:
        Start time in nanoseconds since epoch
    """
    if now_ns is None:
        now_ns = time.time_ns()

    delta = parse_duration(window)
    delta_ns = (delta.days * 86_400 + delta.seconds) * 1_000_000_000
    return now_ns - delta_ns


class QueryConfig(BaseModel):
    """
    Parameters for one query against a Loki-compatible backend.

    The fetcher only consumes this; it never mutates it.
    """

    url: str = Field(
        ...,
        description="Loki base URL",
        examples=["http://localhost:3100"],
    )

    token: str | None = Field(
        None,
        description="Bearer token or a complete Authorization header value",
    )

    query: str = Field(
        ...,
        min_length=1,
        description="LogQL stream selector / filter expression",
        examples=['{job="varlogs"}', '{app="api"} |= "timeout"'],
    )

    limit: int = Field(
        100,
        ge=1,
        le=5000,
        description="Maximum number of lines to return",
    )

    lookback: str | None = Field(
        None,
        description="Relative window such as 1h, 6h, 24h or 7d",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and drop trailing slashes."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("token", "lookback")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty strings from forms and env vars as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("lookback")
    @classmethod
    def validate_lookback(cls, v: str | None) -> str | None:
        """Reject malformed windows up front rather than at request time."""
        if v is not None:
            parse_duration(v)
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "QueryConfig":
        """
        Create configuration from environment variables with explicit overrides.

        Environment variables:
        - LOKI_URL: Loki base URL (default: http://localhost:3100)
        - LOKI_TOKEN: Credential for the Authorization header
        - LOKI_QUERY: Default LogQL query (default: {job="varlogs"})

        Args:
            **overrides: Values that take precedence over the environment;
                ``None`` values are ignored

        Returns:
            Configured QueryConfig instance
        """
        env_config: dict[str, Any] = {
            "url": os.getenv("LOKI_URL", "http://localhost:3100"),
            "token": os.getenv("LOKI_TOKEN"),
            "query": os.getenv("LOKI_QUERY", '{job="varlogs"}'),
        }

        explicit = {k: v for k, v in overrides.items() if v is not None}
        return cls(**{**env_config, **explicit})
