"""API routes for achievements."""

import logging

from fastapi import APIRouter, Depends

from backend.achievements.definitions import AchievementDefinition
from backend.api.dependencies import get_services
from backend.api.schemas import (
    AchievementCheckRequest,
    AchievementCheckResponse,
    AchievementResponse,
)
from backend.services import Services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/achievements", tags=["achievements"])


def _to_response(definition: AchievementDefinition, unlocked_at=None) -> AchievementResponse:
    return AchievementResponse(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        icon=definition.icon,
        points=definition.points,
        is_secret=definition.is_secret,
        unlocked_at=unlocked_at,
    )


@router.get("", response_model=list[AchievementResponse])
async def list_achievements(services: Services = Depends(get_services)) -> list[AchievementResponse]:
    """Every achievement, with its unlock time when it has been earned."""
    unlocked_at = {a.id: a.unlocked_at for a in services.evaluator.unlocked()}
    return [_to_response(d, unlocked_at.get(d.id)) for d in services.evaluator.definitions()]


@router.get("/unlocked", response_model=list[AchievementResponse])
async def unlocked_achievements(services: Services = Depends(get_services)) -> list[AchievementResponse]:
    definitions = {d.id: d for d in services.evaluator.definitions()}
    return [
        _to_response(definitions[a.id], a.unlocked_at)
        for a in services.evaluator.unlocked()
        if a.id in definitions
    ]


@router.post("/check", response_model=AchievementCheckResponse)
async def check_achievements(
    request: AchievementCheckRequest,
    services: Services = Depends(get_services),
) -> AchievementCheckResponse:
    """Evaluate a task/journal snapshot and credit points for new unlocks."""
    unlocked = await services.check_achievements(request.tasks, request.journal_entries)
    return AchievementCheckResponse(
        newly_unlocked=[_to_response(a.definition, a.unlocked_at) for a in unlocked],
        points_awarded=sum(a.points for a in unlocked),
        score=services.score.score,
    )
