"""
Data schemas for LokiEye.

This module defines the classified log line produced by the fetcher and the
canonical analysis result produced by the analyzer, regardless of which LLM
provider answered.
"""

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

LogLevel = Literal["info", "warn", "error", "debug", "unknown"]
Priority = Literal["low", "medium", "high"]

LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


class LogEntry(BaseModel):
    """
    A single log line as classified by the fetcher.

    Attributes:
        timestamp: Millisecond ISO-8601 instant in UTC (e.g. "2023-11-14T22:13:20.000Z")
        line: Display text (raw line, or the message field of a structured line)
        level: Inferred severity, "unknown" when nothing matched
    """

    timestamp: str = Field(..., min_length=1, description="Derived ISO-8601 timestamp")
    line: str = Field(..., description="Display text")
    level: LogLevel = Field(default="unknown", description="Inferred severity")

    model_config = ConfigDict(frozen=True)


class DetectedError(BaseModel):
    """A recurring error pattern reported by the model."""

    type: str = Field(
        ..., min_length=1, strict=True, description="Error category, e.g. DB_CONNECTION_ERROR"
    )
    description: str = Field(..., min_length=1, strict=True)
    count: int = Field(..., gt=0, description="Number of occurrences")

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("count", mode="before")
    @classmethod
    def reject_non_numeric_count(cls, v: Any) -> Any:
        """Whole-number floats are fine; booleans and numeric strings are not."""
        if isinstance(v, (bool, str)):
            raise ValueError("count must be a JSON number")
        return v


class Recommendation(BaseModel):
    """A remediation step with a priority."""

    title: str = Field(..., min_length=1, strict=True)
    action: str = Field(..., min_length=1, strict=True)
    priority: Priority

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Any:
        """Accept "High", " medium " and similar spellings."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class AnalysisResult(BaseModel):
    """
    Canonical output of an analysis run.

    The JSON form uses camelCase keys (``detectedErrors``) because that is the
    shape requested from every provider; Python code uses snake_case.
    """

    summary: str = Field(..., strict=True)
    detected_errors: tuple[DetectedError, ...] = Field(..., alias="detectedErrors")
    recommendations: tuple[Recommendation, ...]

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


class ModelInfo(BaseModel):
    """A selectable model as reported by a provider."""

    id: str
    name: str

    model_config = ConfigDict(frozen=True)
