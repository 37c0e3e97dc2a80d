"""Tests for fetcher.classifier module."""

import pytest

from lokieye.fetcher.classifier import (
    StructuredLine,
    classify_line,
    count_levels,
    level_from_text,
    parse_structured,
)
from lokieye.schemas import LogEntry


class TestParseStructured:
    """Tests for the structured (JSON) stage."""

    def test_plain_text_is_not_structured(self) -> None:
        """Lines not starting with '{' are skipped."""
        assert parse_structured("ERROR: disk full") is None

    def test_level_and_message_extracted(self) -> None:
        """Level and msg fields are read from a JSON object."""
        result = parse_structured('{"level":"warn","msg":"disk 91% full"}')

        assert result == StructuredLine(level="warn", message="disk 91% full")

    def test_leading_whitespace_is_ignored(self) -> None:
        """The check for '{' is done on the trimmed line."""
        result = parse_structured('   {"lvl":"debug","message":"cache miss"}')

        assert result is not None
        assert result.level == "debug"
        assert result.message == "cache miss"

    def test_severity_key(self) -> None:
        """The severity key is recognised."""
        result = parse_structured('{"severity":"CRITICAL","message":"down"}')

        assert result is not None
        assert result.level == "error"

    def test_level_key_priority(self) -> None:
        """'level' is consulted before 'severity'."""
        result = parse_structured('{"severity":"error","level":"info"}')

        assert result is not None
        assert result.level == "info"

    def test_message_key_priority(self) -> None:
        """'message' is preferred over 'msg'."""
        result = parse_structured('{"level":"info","msg":"short","message":"long form"}')

        assert result is not None
        assert result.message == "long form"

    def test_non_string_message_rendered_as_json(self) -> None:
        """Object and array messages are shown as JSON, not Python reprs."""
        result = parse_structured('{"level":"info","message":{"a":1,"b":[true,null]}}')

        assert result is not None
        assert result.message == '{"a": 1, "b": [true, null]}'

    def test_numeric_message_rendered_as_json(self) -> None:
        """Scalar messages keep their JSON spelling."""
        result = parse_structured('{"level":"warn","msg":false}')

        assert result is not None
        assert result.message == "false"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("error", "error"),
            ("ERR", "error"),
            ("fatal", "error"),
            ("panic", "error"),
            ("crit", "error"),
            ("warning", "warn"),
            ("DEBUG", "debug"),
            ("Info", "info"),
        ],
    )
    def test_field_tokens(self, value: str, expected: str) -> None:
        """Field values map onto levels by substring."""
        result = parse_structured(f'{{"level":"{value}"}}')

        assert result is not None
        assert result.level == expected

    def test_unrecognised_level_is_none(self) -> None:
        """A level value with no known token leaves the level unresolved."""
        result = parse_structured('{"level":"notice","msg":"hello"}')

        assert result is not None
        assert result.level is None
        assert result.message == "hello"

    def test_numeric_level_does_not_raise(self) -> None:
        """Non-string level values are stringified."""
        result = parse_structured('{"level":30,"msg":"started"}')

        assert result is not None
        assert result.level is None

    def test_malformed_json_returns_none(self) -> None:
        """Malformed JSON is not an error."""
        assert parse_structured('{"level": "error", broken') is None

    def test_json_array_is_not_structured(self) -> None:
        """Only JSON objects count as structured lines."""
        assert parse_structured("[1, 2, 3]") is None


class TestLevelFromText:
    """Tests for the text stage."""

    @pytest.mark.parametrize(
        "line",
        [
            "ERROR: disk full",
            "Fatal signal received",
            "CRIT temperature high",
            "java.lang.NullPointerException at Foo.bar",
            "connection err: reset by peer",
        ],
    )
    def test_error_tokens(self, line: str) -> None:
        """Error-indicating tokens classify as error."""
        assert level_from_text(line) == "error"

    def test_error_beats_info(self) -> None:
        """Error precedence wins over a weaker keyword later in the line."""
        assert level_from_text("error while handling info request") == "error"
        assert level_from_text("info: retry after exception") == "error"

    def test_warn_beats_debug_and_info(self) -> None:
        """Warn is checked before debug and info."""
        assert level_from_text("debug info: WARNING threshold reached") == "warn"

    def test_debug_and_info(self) -> None:
        """Debug and info are matched in that order."""
        assert level_from_text("DEBUG cache stats, info only") == "debug"
        assert level_from_text("INFO server started") == "info"

    def test_no_match(self) -> None:
        """Lines without keywords have no level."""
        assert level_from_text("GET /healthz 200") is None


class TestClassifyLine:
    """Tests for the combined classifier."""

    def test_plain_error_line(self) -> None:
        """Plain text is classified by keyword and displayed unchanged."""
        assert classify_line("ERROR: disk full") == ("error", "ERROR: disk full")

    def test_structured_line_uses_field_and_message(self) -> None:
        """The level field wins over text search and msg becomes the line."""
        line = '{"level":"info","msg":"retrying after error"}'

        assert classify_line(line) == ("info", "retrying after error")

    def test_structured_line_without_message_keeps_raw(self) -> None:
        """Without a message field the raw JSON is displayed."""
        line = '{"level":"warn","latency_ms":1200}'

        assert classify_line(line) == ("warn", line)

    def test_structured_without_level_falls_back_to_text(self) -> None:
        """A JSON line with no level field is searched as text."""
        line = '{"msg":"upstream timeout","error":"EOF"}'

        assert classify_line(line) == ("error", "upstream timeout")

    def test_malformed_json_falls_back_to_text(self) -> None:
        """Malformed JSON lines are classified by the text stage."""
        line = '{"level":"warn" "msg": oops'

        assert classify_line(line) == ("warn", line)

    def test_unknown(self) -> None:
        """Nothing matched means unknown."""
        assert classify_line("GET /healthz 200") == ("unknown", "GET /healthz 200")


class TestCountLevels:
    """Tests for count_levels."""

    def test_counts_are_zero_filled(self) -> None:
        """Every level is present in the result."""
        entries = [
            LogEntry(timestamp="2023-11-14T22:13:20.000Z", line="a", level="error"),
            LogEntry(timestamp="2023-11-14T22:13:21.000Z", line="b", level="error"),
            LogEntry(timestamp="2023-11-14T22:13:22.000Z", line="c", level="info"),
        ]

        counts = count_levels(entries)

        assert counts == {"info": 1, "warn": 0, "error": 2, "debug": 0, "unknown": 0}

    def test_empty(self) -> None:
        """No entries means all zeros."""
        assert sum(count_levels([]).values()) == 0
