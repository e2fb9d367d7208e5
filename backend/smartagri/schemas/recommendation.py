"""Pydantic schemas for AI recommendations."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["low", "medium", "high"]
Category = Literal["irrigation", "fertilizer", "weather", "pest", "disease", "general"]


class RecommendationDraft(BaseModel):
    """One recommendation as returned by the language model."""

    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    priority: Priority
    category: Category
    confidence: float = Field(..., ge=0, le=1, allow_inf_nan=False)


class GenerateRequest(BaseModel):
    """Body of the ai-recommendations endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(..., min_length=1, validation_alias="deviceId")
    force_generate: bool = Field(False, validation_alias="forceGenerate")


class RecommendationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    device_id: str | None = None
    title: str
    message: str
    priority: Priority
    category: str
    sensor_data: dict[str, Any]
    ai_confidence: float | None = None
    is_read: bool
    is_dismissed: bool
    created_at: datetime
    expires_at: datetime | None = None


class GenerateResponse(BaseModel):
    success: bool = True
    recommendations: list[RecommendationOut]
    count: int


class MessageResponse(BaseModel):
    """No-op outcome of a generation request."""

    message: str


class RecommendationListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recommendations: list[RecommendationOut]
    unread_count: int = Field(alias="unreadCount")
    high_priority_count: int = Field(alias="highPriorityCount")
