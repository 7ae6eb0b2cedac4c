"""Summarize the day's accomplishments via LLM."""

import logging
from dataclasses import dataclass

from pydantic import BaseModel

from backend.llm_client import LLMClient
from backend.planning.utils import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, parse_llm_json_response

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = """\
You are an encouraging productivity coach. Summarize the user's day from their task list \
and suggest areas for improvement based on the tasks they did not complete. Be brief, \
specific and kind."""

SUMMARY_USER_PROMPT = """\
Completed tasks:
{completed}

Uncompleted tasks:
{uncompleted}

Return a JSON object with two string fields:
- "summary": a summary of the day's accomplishments
- "areas_for_improvement": where the user could improve their productivity

Return ONLY the JSON object."""


class DayTask(BaseModel):
    description: str
    completed: bool


@dataclass
class DaySummary:
    summary: str
    areas_for_improvement: str


def _bullet_list(descriptions: list[str]) -> str:
    return "\n".join(f"- {d}" for d in descriptions) or "(none)"


def summarize_day(tasks: list[DayTask], llm: LLMClient) -> DaySummary:
    """Summarize completed tasks and suggest improvements from the uncompleted ones."""
    prompt = SUMMARY_USER_PROMPT.format(
        completed=_bullet_list([t.description for t in tasks if t.completed]),
        uncompleted=_bullet_list([t.description for t in tasks if not t.completed]),
    )
    response = llm.create_message(
        prompt=prompt,
        system=SUMMARY_SYSTEM_PROMPT,
        max_tokens=DEFAULT_MAX_TOKENS,
        temperature=DEFAULT_TEMPERATURE,
    )

    data = parse_llm_json_response(response, "day summary")
    if not isinstance(data, dict) or not data.get("summary"):
        # Unstructured reply: keep the raw text as the summary.
        logger.warning("Day summary response was not structured JSON, using raw text")
        return DaySummary(summary=response.strip(), areas_for_improvement="")

    return DaySummary(
        summary=str(data["summary"]),
        areas_for_improvement=str(data.get("areas_for_improvement", "")),
    )
