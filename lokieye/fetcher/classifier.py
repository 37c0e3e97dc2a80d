"""
Severity classification for log lines.

Classification runs in two stages:

1. Structured stage: if the line is a JSON object, read a severity-like field
   and a message-like field from it.
2. Text stage: if no level came out of stage 1, search the lower-cased raw
   line for severity keywords.

A level resolved by an earlier stage is never overridden by a later one.
Within each stage error keywords take precedence over warn, then debug,
then info.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass

from lokieye.schemas import LOG_LEVELS, LogEntry, LogLevel

LEVEL_KEYS = ("level", "lvl", "severity", "levelname", "log_level")
MESSAGE_KEYS = ("message", "msg")

# Keyword sets differ between the stages: plain text also counts
# "exception", while structured fields also count "panic".
FIELD_TOKENS: tuple[tuple[LogLevel, tuple[str, ...]], ...] = (
    ("error", ("error", "err", "fatal", "panic", "crit")),
    ("warn", ("warn",)),
    ("debug", ("debug",)),
    ("info", ("info",)),
)

TEXT_TOKENS: tuple[tuple[LogLevel, tuple[str, ...]], ...] = (
    ("error", ("error", "fatal", "crit", "err", "exception")),
    ("warn", ("warn",)),
    ("debug", ("debug",)),
    ("info", ("info",)),
)


@dataclass(frozen=True)
class StructuredLine:
    """
    What the structured stage could extract from a JSON log line.

    Attributes:
        level: Severity from a level-like field, None if absent or unrecognised
        message: Value of a message-like field, None if absent
    """

    level: LogLevel | None
    message: str | None


def _match_tokens(
    value: str, table: tuple[tuple[LogLevel, tuple[str, ...]], ...]
) -> LogLevel | None:
    lowered = value.lower()
    for level, tokens in table:
        if any(token in lowered for token in tokens):
            return level
    return None


def parse_structured(line: str) -> StructuredLine | None:
    """
    Structured stage: inspect a line that looks like a JSON object.

    Args:
        line: Raw log line

    Returns:
        StructuredLine if the line is a JSON object, None otherwise
        (including malformed JSON, which is expected and not an error)
    """
    stripped = line.strip()
    if not stripped.startswith("{"):
        return None

    try:
        payload = json.loads(stripped)
    except json.JSONDecodeError:
        return None

    if not isinstance(payload, dict):
        return None

    level: LogLevel | None = None
    for key in LEVEL_KEYS:
        if payload.get(key) is not None:
            level = _match_tokens(str(payload[key]), FIELD_TOKENS)
            break

    message: str | None = None
    for key in MESSAGE_KEYS:
        if payload.get(key) is not None:
            value = payload[key]
            message = value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
            break

    return StructuredLine(level=level, message=message)


def level_from_text(text: str) -> LogLevel | None:
    """Text stage: keyword search over the whole line."""
    return _match_tokens(text, TEXT_TOKENS)


def classify_line(line: str) -> tuple[LogLevel, str]:
    """
    Classify one raw log line.

    Args:
        line: Raw log line as returned by the backend

    Returns:
        Tuple of (level, display line)

    Example:
        >>> classify_line('{"level":"warn","msg":"disk 91% full"}')
        ('warn', 'disk 91% full')
        >>> classify_line("ERROR: disk full")
        ('error', 'ERROR: disk full')
    """
    structured = parse_structured(line)

    display = line
    level: LogLevel | None = None

    if structured is not None:
        level = structured.level
        if structured.message is not None:
            display = structured.message

    if level is None:
        level = level_from_text(line)

    return (level or "unknown"), display


def count_levels(entries: Iterable[LogEntry]) -> dict[LogLevel, int]:
    """
    Count entries per level.

    Every level is present in the result, zero-filled.
    """
    counts: dict[LogLevel, int] = {level: 0 for level in LOG_LEVELS}  # type: ignore[misc]
    for entry in entries:
        counts[entry.level] += 1
    return counts
