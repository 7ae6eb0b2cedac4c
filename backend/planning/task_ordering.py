"""Suggest an order for the day's tasks via LLM."""

import json
import logging

from pydantic import BaseModel

from backend.llm_client import LLMClient
from backend.planning.utils import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE_DETERMINISTIC,
    parse_llm_json_response,
)

logger = logging.getLogger(__name__)

ORDERING_SYSTEM_PROMPT = """\
You are an assistant that helps users plan their day by suggesting an optimal ordering of tasks. \
Consider the task descriptions and estimated completion times to suggest an order that maximizes \
productivity and minimizes context switching. Prioritize more demanding or important tasks earlier \
if possible. Group similar tasks together."""

ORDERING_USER_PROMPT = """\
Here are the tasks:
{tasks_json}

Return ONLY a JSON array of the task ids in the suggested order, e.g. ["b", "a", "c"].
If no reordering is beneficial, return the ids in their original order.
If you cannot process the request, return an empty JSON array: []."""


class PlannedTask(BaseModel):
    id: str
    description: str
    estimated_time: int  # minutes


def suggest_task_ordering(tasks: list[PlannedTask], llm: LLMClient) -> list[PlannedTask]:
    """Ask the LLM to reorder tasks.

    Returns:
        The same tasks in the suggested order, or an empty list when there
        is nothing to order or the response is not a permutation of the
        input ids.
    """
    if not tasks:
        logger.warning("Task ordering requested with no tasks")
        return []

    tasks_for_prompt = [
        {"id": t.id, "description": t.description, "estimated_time_minutes": t.estimated_time}
        for t in tasks
    ]
    response = llm.create_message(
        prompt=ORDERING_USER_PROMPT.format(tasks_json=json.dumps(tasks_for_prompt, indent=2)),
        system=ORDERING_SYSTEM_PROMPT,
        max_tokens=DEFAULT_MAX_TOKENS,
        temperature=DEFAULT_TEMPERATURE_DETERMINISTIC,
    )
    return _apply_ordering(tasks, response)


def _apply_ordering(tasks: list[PlannedTask], response: str) -> list[PlannedTask]:
    data = parse_llm_json_response(response, "task ordering")
    if not isinstance(data, list):
        return []

    # Accept either bare ids or task objects carrying an "id".
    ordered_ids = [entry.get("id") if isinstance(entry, dict) else entry for entry in data]
    by_id = {t.id: t for t in tasks}
    if sorted(map(str, ordered_ids)) != sorted(by_id) or len(ordered_ids) != len(tasks):
        logger.warning("Task ordering response does not match the input tasks, ignoring it")
        return []

    return [by_id[str(task_id)] for task_id in ordered_ids]
