"""Prompt construction for log analysis."""

from collections.abc import Sequence
from typing import Literal

from lokieye.schemas import LogEntry

MAX_PROMPT_ENTRIES = 50

ANALYSIS_TEMPLATE = """You are an experienced SRE and distributed-systems expert.
Analyze the following log lines from a Grafana Loki instance.

TASK:
1. Briefly describe the overall health of the system (summary).
2. Identify recurring error patterns or anomalies and count their occurrences.
3. Give concrete technical remediation steps, each with a priority.
{language_instruction}
Respond with a single JSON object of exactly this shape and nothing else:
{{
  "summary": "overview",
  "detectedErrors": [{{"type": "ERROR_CATEGORY", "description": "what happens", "count": 1}}],
  "recommendations": [{{"title": "short title", "action": "what to do", "priority": "high|medium|low"}}]
}}

LOGS:
{logs}"""

LANGUAGE_INSTRUCTIONS = {
    "en": "",
    "ru": (
        "\nIMPORTANT: write every free-text field (summary, description, title, "
        "action) strictly in Russian. Keep JSON keys and priority values in English.\n"
    ),
}


def format_entry(entry: LogEntry) -> str:
    """Render one entry as ``[timestamp] [LEVEL] line``."""
    return f"[{entry.timestamp}] [{entry.level.upper()}] {entry.line}"


def build_prompt(
    entries: Sequence[LogEntry],
    language: Literal["en", "ru"] = "en",
) -> str:
    """Build the analysis prompt for a batch of entries.

    Only the first MAX_PROMPT_ENTRIES entries are included, in the order
    given. The fetcher returns newest first, so pass its output unchanged
    to analyze the most recent lines.

    Args:
        entries: Classified log entries
        language: Language for the free-text fields of the answer

    Returns:
        Prompt text
    """
    logs = "\n".join(format_entry(entry) for entry in entries[:MAX_PROMPT_ENTRIES])
    return ANALYSIS_TEMPLATE.format(
        language_instruction=LANGUAGE_INSTRUCTIONS[language],
        logs=logs,
    )
