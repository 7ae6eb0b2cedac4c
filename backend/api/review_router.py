"""API routes for spaced repetition review items."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response, status

from backend.api.dependencies import get_services
from backend.api.schemas import ReviewItemCreate, ReviewItemUpdate, ReviewRequest
from backend.services import Services
from backend.srs.review_items import ReviewItem
from backend.srs.review_store import ReviewItemValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/review-items", tags=["review"])


@router.get("", response_model=list[ReviewItem])
async def list_items(services: Services = Depends(get_services)) -> list[ReviewItem]:
    """All review items, soonest review first."""
    return services.review_store.items()


@router.post("", response_model=ReviewItem, status_code=status.HTTP_201_CREATED)
async def add_item(
    request: ReviewItemCreate,
    services: Services = Depends(get_services),
) -> ReviewItem:
    try:
        return await services.review_store.add(
            request.title, request.first_review_date, content=request.content
        )
    except ReviewItemValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/due", response_model=list[ReviewItem])
async def due_items(
    day: date | None = None,
    services: Services = Depends(get_services),
) -> list[ReviewItem]:
    """Items due on or before ``day`` (default today)."""
    return services.review_store.due_items(day)


@router.get("/due/{day}", response_model=list[ReviewItem])
async def due_items_on(day: date, services: Services = Depends(get_services)) -> list[ReviewItem]:
    return services.review_store.due_items(day)


@router.get("/date/{day}", response_model=list[ReviewItem])
async def items_for_date(day: date, services: Services = Depends(get_services)) -> list[ReviewItem]:
    """Items scheduled for exactly ``day``."""
    return services.review_store.get_for_date(day)


@router.get("/calendar", response_model=dict[date, list[ReviewItem]])
async def calendar(
    start: date,
    end: date,
    services: Services = Depends(get_services),
) -> dict[date, list[ReviewItem]]:
    if end < start:
        raise HTTPException(status_code=422, detail="end must not be before start")
    return services.review_store.calendar(start, end)


@router.get("/{item_id}", response_model=ReviewItem)
async def get_item(item_id: str, services: Services = Depends(get_services)) -> ReviewItem:
    item = services.review_store.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Review item not found")
    return item


@router.patch("/{item_id}", response_model=ReviewItem)
async def update_item(
    item_id: str,
    request: ReviewItemUpdate,
    services: Services = Depends(get_services),
) -> ReviewItem:
    try:
        item = await services.review_store.update(item_id, request.model_dump(exclude_unset=True))
    except ReviewItemValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if item is None:
        raise HTTPException(status_code=404, detail="Review item not found")
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: str, services: Services = Depends(get_services)) -> Response:
    if not await services.review_store.delete(item_id):
        raise HTTPException(status_code=404, detail="Review item not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{item_id}/review", response_model=ReviewItem)
async def review_item(
    item_id: str,
    request: ReviewRequest,
    services: Services = Depends(get_services),
) -> ReviewItem:
    """Record a review and return the rescheduled item."""
    item = await services.review_store.mark_reviewed(item_id, request.difficulty)
    if item is None:
        raise HTTPException(status_code=404, detail="Review item not found")
    return item
