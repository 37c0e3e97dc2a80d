"""
LokiEye Fetcher - log retrieval and severity classification.

Example Usage:
    >>> from lokieye.fetcher import LokiClient, QueryConfig
    >>>
    >>> config = QueryConfig(
    ...     url="http://localhost:3100",
    ...     query='{job="varlogs"}',
    ...     limit=200,
    ...     lookback="6h",
    ... )
    >>> async with LokiClient() as client:
    ...     entries = await client.fetch(config)
"""

from lokieye.fetcher.classifier import (
    StructuredLine,
    classify_line,
    count_levels,
    level_from_text,
    parse_structured,
)
from lokieye.fetcher.config import QueryConfig, lookback_start_ns, parse_duration
from lokieye.fetcher.loki_client import (
    FetchError,
    LokiClient,
    build_headers,
    decode_timestamp,
)

__all__ = [
    # Configuration
    "QueryConfig",
    "parse_duration",
    "lookback_start_ns",
    # Client
    "LokiClient",
    "FetchError",
    "build_headers",
    "decode_timestamp",
    # Classification
    "StructuredLine",
    "parse_structured",
    "level_from_text",
    "classify_line",
    "count_levels",
]
