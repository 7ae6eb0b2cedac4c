"""API routes for the points balance, rewards store and themes."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.api.dependencies import get_services
from backend.api.schemas import (
    PurchaseResponse,
    RewardResponse,
    ScoreResponse,
    ThemeResponse,
    UnequipRequest,
)
from backend.rewards.catalog import RewardDefinition
from backend.rewards.ledger import OwnedReward
from backend.services import Services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rewards", tags=["rewards"])


def _to_response(definition: RewardDefinition) -> RewardResponse:
    return RewardResponse(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        points=definition.points,
        category=definition.category,
        type=definition.type.value,
        icon=definition.icon,
        duration_days=definition.duration_days,
        max_ownable=definition.max_ownable,
        uses=definition.uses,
    )


@router.get("/score", response_model=ScoreResponse)
async def get_score(services: Services = Depends(get_services)) -> ScoreResponse:
    return ScoreResponse(score=services.score.score)


@router.get("/catalog", response_model=list[RewardResponse])
async def catalog(services: Services = Depends(get_services)) -> list[RewardResponse]:
    return [_to_response(d) for d in services.rewards.definitions()]


@router.get("/owned", response_model=list[OwnedReward])
async def owned(services: Services = Depends(get_services)) -> list[OwnedReward]:
    return await services.rewards.owned()


@router.post("/{reward_id}/purchase", response_model=PurchaseResponse)
async def purchase(reward_id: str, services: Services = Depends(get_services)) -> PurchaseResponse:
    result = await services.rewards.purchase(reward_id)
    return PurchaseResponse(success=result.success, message=result.message, score=result.score)


@router.post("/{reward_id}/use")
async def consume_use(reward_id: str, services: Services = Depends(get_services)) -> dict:
    if not await services.rewards.consume_use(reward_id):
        raise HTTPException(status_code=409, detail="Reward has no uses left or is not owned")
    return {"status": "used", "reward_id": reward_id}


@router.post("/{reward_id}/activate")
async def activate_boost(reward_id: str, services: Services = Depends(get_services)) -> dict:
    if not await services.rewards.activate_boost(reward_id):
        raise HTTPException(status_code=409, detail="Boost cannot be activated")
    return {"status": "active", "reward_id": reward_id}


@router.post("/{reward_id}/deactivate")
async def deactivate_boost(reward_id: str, services: Services = Depends(get_services)) -> dict:
    await services.rewards.deactivate_boost(reward_id)
    return {"status": "inactive", "reward_id": reward_id}


@router.get("/boosts", response_model=list[OwnedReward])
async def active_boosts(services: Services = Depends(get_services)) -> list[OwnedReward]:
    return await services.rewards.active_boosts()


@router.post("/{reward_id}/equip")
async def equip(reward_id: str, services: Services = Depends(get_services)) -> dict:
    if not await services.rewards.equip(reward_id):
        raise HTTPException(status_code=409, detail="Reward is not an owned cosmetic")
    return {"status": "equipped", "reward_id": reward_id}


@router.post("/unequip")
async def unequip(request: UnequipRequest, services: Services = Depends(get_services)) -> dict:
    await services.rewards.unequip(request.category, request.effect_type, request.target)
    return {"status": "unequipped"}


@router.get("/mascot", response_model=list[str])
async def mascot_accessories(services: Services = Depends(get_services)) -> list[str]:
    return services.rewards.mascot_accessories()


@router.get("/themes", response_model=ThemeResponse)
async def themes(services: Services = Depends(get_services)) -> ThemeResponse:
    """Themes currently applied by equipped cosmetics."""
    return ThemeResponse(
        site_theme=await services.rewards.site_theme(),
        tab_themes=await services.rewards.tab_themes(),
    )
