"""Recommendation service layer: stores generated advisories and applies reader actions."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.errors import Forbidden, NotFound, UpstreamUnavailable
from smartagri.models import Device, Recommendation, User
from smartagri.realtime import INSERT, get_feed
from smartagri.schemas.recommendation import RecommendationDraft, RecommendationOut
from smartagri.services._clock import utc_now

__all__ = [
    "dismiss_recommendation",
    "has_recent_recommendations",
    "list_recommendations",
    "mark_recommendation_read",
    "store_recommendations",
]

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20


async def has_recent_recommendations(
    session: AsyncSession,
    device_id: str,
    since: datetime,
) -> bool:
    """True if any recommendation for the device was created after since."""
    query = (
        select(Recommendation.id)
        .where(
            and_(
                Recommendation.device_id == device_id,
                Recommendation.created_at > since,
            )
        )
        .limit(1)
    )
    try:
        result = await session.execute(query)
    except SQLAlchemyError as e:
        raise UpstreamUnavailable("Failed to check recent recommendations") from e
    return result.first() is not None


async def store_recommendations(
    session: AsyncSession,
    device: Device,
    drafts: list[RecommendationDraft],
    sensor_data: dict[str, Any],
    now: datetime | None = None,
) -> list[Recommendation]:
    """
    Insert one recommendation per draft in a single transaction.

    Either the whole batch is stored or none of it is. Every row carries the
    same sensor_data snapshot.
    """
    created_at = now or utc_now()
    device_id = device.device_id
    rows = [
        Recommendation(
            user_id=device.user_id,
            device_id=device_id,
            title=draft.title,
            message=draft.message,
            priority=draft.priority,
            category=draft.category,
            sensor_data=sensor_data,
            ai_confidence=draft.confidence,
            is_read=False,
            is_dismissed=False,
            created_at=created_at,
        )
        for draft in drafts
    ]

    try:
        session.add_all(rows)
        await session.flush()
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Error inserting recommendations for {device_id}: {e}")
        raise UpstreamUnavailable("Failed to store recommendations") from e

    logger.info(f"Stored {len(rows)} recommendations for {device_id}")

    await get_feed().publish_many(
        "recommendations",
        INSERT,
        [RecommendationOut.model_validate(row).model_dump(mode="json") for row in rows],
    )
    return rows


async def list_recommendations(
    session: AsyncSession,
    owner: User,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[Recommendation]:
    """The caller's non-dismissed recommendations, newest first."""
    query = (
        select(Recommendation)
        .where(
            and_(
                Recommendation.user_id == owner.id,
                Recommendation.is_dismissed.is_(False),
            )
        )
        .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
        .limit(limit)
    )
    result = await session.execute(query)
    return list(result.scalars())


async def _get_owned_recommendation(
    session: AsyncSession,
    owner: User,
    recommendation_id: int,
) -> Recommendation:
    recommendation = await session.get(Recommendation, recommendation_id)
    if recommendation is None:
        raise NotFound("Recommendation not found")
    if recommendation.user_id != owner.id:
        raise Forbidden("Recommendation belongs to another user")
    return recommendation


async def _set_flag(
    session: AsyncSession,
    owner: User,
    recommendation_id: int,
    flag: str,
) -> Recommendation:
    """Set a boolean flag to True. Flags are never reverted."""
    recommendation = await _get_owned_recommendation(session, owner, recommendation_id)
    if getattr(recommendation, flag):
        return recommendation

    setattr(recommendation, flag, True)
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise UpstreamUnavailable("Failed to update recommendation") from e
    return recommendation


async def mark_recommendation_read(
    session: AsyncSession,
    owner: User,
    recommendation_id: int,
) -> Recommendation:
    return await _set_flag(session, owner, recommendation_id, "is_read")


async def dismiss_recommendation(
    session: AsyncSession,
    owner: User,
    recommendation_id: int,
) -> Recommendation:
    return await _set_flag(session, owner, recommendation_id, "is_dismissed")
