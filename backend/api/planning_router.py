"""API routes for the LLM-backed planning helpers."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.api.schemas import DaySummaryRequest, DaySummaryResponse, TaskOrderingRequest
from backend.llm_client import LLMClient, LLMNotConfiguredError, get_llm_client
from backend.planning.day_summary import summarize_day
from backend.planning.task_ordering import PlannedTask, suggest_task_ordering

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/planning", tags=["planning"])


def llm_dependency() -> LLMClient:
    try:
        return get_llm_client()
    except LLMNotConfiguredError as e:
        logger.warning("Planning request rejected: %s", e)
        raise HTTPException(status_code=503, detail=str(e)) from e


# Sync handlers: FastAPI runs them in its threadpool since the LLM client blocks.
@router.post("/order", response_model=list[PlannedTask])
def order_tasks(request: TaskOrderingRequest, llm: LLMClient = Depends(llm_dependency)) -> list[PlannedTask]:
    ordered = suggest_task_ordering(request.tasks, llm)
    logger.info("Task ordering done, LLM usage so far: %s", llm.usage())
    return ordered


@router.post("/summary", response_model=DaySummaryResponse)
def day_summary(request: DaySummaryRequest, llm: LLMClient = Depends(llm_dependency)) -> DaySummaryResponse:
    summary = summarize_day(request.tasks, llm)
    logger.info("Day summary done, LLM usage so far: %s", llm.usage())
    return DaySummaryResponse(summary=summary.summary, areas_for_improvement=summary.areas_for_improvement)
