"""Recommendation API routes."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.advisory import generate_recommendations
from smartagri.database import get_db
from smartagri.dependencies import get_current_user
from smartagri.models import User
from smartagri.schemas.recommendation import (
    GenerateRequest,
    GenerateResponse,
    MessageResponse,
    RecommendationListResponse,
    RecommendationOut,
)
from smartagri.services.recommendation_service import (
    dismiss_recommendation,
    list_recommendations,
    mark_recommendation_read,
)

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100

router = APIRouter(prefix="/api", tags=["recommendations"])


@router.post("/ai-recommendations", response_model=GenerateResponse | MessageResponse)
async def generate(
    request: GenerateRequest,
    session: AsyncSession = Depends(get_db),
) -> GenerateResponse | MessageResponse:
    """Generate AI recommendations for a device from its last 24 hours of readings.

    Returns a message instead when there is no recent data or, unless
    forceGenerate is set, when recommendations were generated within 6 hours.
    """
    result = await generate_recommendations(
        session, request.device_id, force_generate=request.force_generate
    )
    if not result.generated:
        return MessageResponse(message=result.message)

    recommendations = [RecommendationOut.model_validate(r) for r in result.recommendations]
    return GenerateResponse(recommendations=recommendations, count=len(recommendations))


@router.get("/recommendations", response_model=RecommendationListResponse)
async def get_recommendations(
    limit: int = Query(20, ge=1, le=MAX_LIST_LIMIT),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> RecommendationListResponse:
    """Non-dismissed recommendations of the signed-in user, newest first."""
    rows = await list_recommendations(session, user, limit=limit)
    return RecommendationListResponse(
        recommendations=[RecommendationOut.model_validate(r) for r in rows],
        unread_count=sum(1 for r in rows if not r.is_read),
        high_priority_count=sum(1 for r in rows if r.priority == "high" and not r.is_read),
    )


@router.post("/recommendations/{recommendation_id}/read", response_model=RecommendationOut)
async def mark_read(
    recommendation_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> RecommendationOut:
    row = await mark_recommendation_read(session, user, recommendation_id)
    return RecommendationOut.model_validate(row)


@router.post("/recommendations/{recommendation_id}/dismiss", response_model=RecommendationOut)
async def dismiss(
    recommendation_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> RecommendationOut:
    row = await dismiss_recommendation(session, user, recommendation_id)
    return RecommendationOut.model_validate(row)
