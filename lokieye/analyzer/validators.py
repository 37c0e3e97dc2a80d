"""Validation of LLM responses against the canonical result shape."""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from lokieye.schemas import AnalysisResult

from .errors import AnalysisError

logger = logging.getLogger(__name__)


def extract_json_from_text(text: str) -> dict[str, Any]:
    """Extract a JSON object from text that may wrap it in markdown.

    Strategies, in order:
    1. Direct JSON parsing
    2. Extract from ```json ... ``` markdown blocks
    3. Extract from ``` ... ``` code blocks
    4. Extract the outermost {...} found in text

    Args:
        text: Raw text that may contain JSON

    Returns:
        Parsed JSON object

    Raises:
        json.JSONDecodeError: If no JSON object can be found
    """
    candidates = [text]

    json_block_match = re.search(
        r'```json\s*(\{.*?\})\s*```',
        text,
        re.DOTALL | re.IGNORECASE
    )
    if json_block_match:
        candidates.append(json_block_match.group(1))

    code_block_match = re.search(r'```\s*(\{.*?\})\s*```', text, re.DOTALL)
    if code_block_match:
        candidates.append(code_block_match.group(1))

    brace_match = re.search(r'\{.*\}', text, re.DOTALL)
    if brace_match:
        candidates.append(brace_match.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise json.JSONDecodeError(
        f"Could not extract a JSON object from text: {text[:200]}",
        text,
        0
    )


def parse_analysis_result(raw_response: str | None) -> AnalysisResult:
    """Parse a provider's text payload into an AnalysisResult.

    Args:
        raw_response: Text extracted from the provider's response envelope

    Returns:
        Validated AnalysisResult

    Raises:
        AnalysisError: If the payload is empty, not JSON, or does not match
            the canonical shape
    """
    if raw_response is None or not raw_response.strip():
        raise AnalysisError("AI provider returned an empty analysis")

    try:
        data = extract_json_from_text(raw_response)
    except json.JSONDecodeError as e:
        logger.error(
            "Provider response is not valid JSON",
            extra={"context": {"raw_response": raw_response[:500]}},
        )
        raise AnalysisError("AI provider returned malformed JSON") from e

    try:
        # Provider payloads must use the camelCase keys
        return AnalysisResult.model_validate(data, by_alias=True, by_name=False)
    except ValidationError as e:
        logger.error(
            "Provider response does not match the analysis schema",
            extra={"context": {"error": str(e), "raw_response": raw_response[:500]}},
        )
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "<root>"
            for err in e.errors()
        )
        raise AnalysisError(
            f"AI response is missing or has invalid fields: {fields}"
        ) from e
