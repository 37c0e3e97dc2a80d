"""Tests for fetcher.config module."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from lokieye.fetcher.config import QueryConfig, lookback_start_ns, parse_duration


class TestParseDuration:
    """Tests for lookback token parsing."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("45s", timedelta(seconds=45)),
            ("15m", timedelta(minutes=15)),
            ("6h", timedelta(hours=6)),
            ("7d", timedelta(days=7)),
            ("2w", timedelta(weeks=2)),
            (" 24H ", timedelta(hours=24)),
        ],
    )
    def test_valid_tokens(self, token: str, expected: timedelta) -> None:
        """Supported units parse to the right timedelta."""
        assert parse_duration(token) == expected

    @pytest.mark.parametrize("token", ["", "6", "h", "6x", "1.5h", "-1h", "0h"])
    def test_invalid_tokens(self, token: str) -> None:
        """Malformed or non-positive tokens are rejected."""
        with pytest.raises(ValueError):
            parse_duration(token)


class TestLookbackStart:
    """Tests for lookback_start_ns."""

    def test_subtracts_window(self) -> None:
        """Start is now minus the window, in nanoseconds."""
        now_ns = 1_700_000_000_000_000_000

        assert lookback_start_ns("1h", now_ns=now_ns) == now_ns - 3_600 * 1_000_000_000

    def test_days(self) -> None:
        """Windows longer than a day are handled."""
        now_ns = 1_700_000_000_000_000_000

        assert lookback_start_ns("7d", now_ns=now_ns) == now_ns - 7 * 86_400 * 1_000_000_000


class TestQueryConfig:
    """Tests for QueryConfig validation."""

    def test_defaults(self) -> None:
        """Only url and query are required."""
        config = QueryConfig(url="http://localhost:3100", query='{job="varlogs"}')

        assert config.limit == 100
        assert config.token is None
        assert config.lookback is None

    def test_trailing_slashes_stripped(self) -> None:
        """Trailing slashes do not end up in request URLs."""
        config = QueryConfig(url="http://loki:3100//", query="{app=\"x\"}")

        assert config.url == "http://loki:3100"

    def test_url_requires_scheme(self) -> None:
        """URLs without http(s) are rejected."""
        with pytest.raises(ValidationError):
            QueryConfig(url="loki:3100", query="{app=\"x\"}")

    def test_empty_query_rejected(self) -> None:
        """The query must not be empty."""
        with pytest.raises(ValidationError):
            QueryConfig(url="http://loki:3100", query="")

    def test_limit_bounds(self) -> None:
        """Limit must be within 1..5000."""
        with pytest.raises(ValidationError):
            QueryConfig(url="http://loki:3100", query="{a=\"b\"}", limit=0)
        with pytest.raises(ValidationError):
            QueryConfig(url="http://loki:3100", query="{a=\"b\"}", limit=5001)

    def test_invalid_lookback_rejected(self) -> None:
        """Malformed lookback windows fail at construction."""
        with pytest.raises(ValidationError):
            QueryConfig(url="http://loki:3100", query="{a=\"b\"}", lookback="six hours")

    def test_blank_token_and_lookback_are_none(self) -> None:
        """Blank strings from forms are treated as unset."""
        config = QueryConfig(url="http://loki:3100", query="{a=\"b\"}", token="  ", lookback="")

        assert config.token is None
        assert config.lookback is None

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables fill in missing values."""
        monkeypatch.setenv("LOKI_URL", "https://loki.example.com")
        monkeypatch.setenv("LOKI_TOKEN", "secret")
        monkeypatch.setenv("LOKI_QUERY", '{app="api"}')

        config = QueryConfig.from_env()

        assert config.url == "https://loki.example.com"
        assert config.token == "secret"
        assert config.query == '{app="api"}'

    def test_from_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit values win over the environment; None is ignored."""
        monkeypatch.setenv("LOKI_URL", "https://loki.example.com")
        monkeypatch.delenv("LOKI_TOKEN", raising=False)

        config = QueryConfig.from_env(url="http://other:3100", token=None, limit=20, lookback="6h")

        assert config.url == "http://other:3100"
        assert config.token is None
        assert config.limit == 20
        assert config.lookback == "6h"
