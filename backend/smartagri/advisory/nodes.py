"""Graph nodes for advisory generation.

One node per step of a generation run:
- fetch_window: recent readings for the device (no data ends the run)
- resolve_device: device record, NotFound if missing
- idempotency_gate: ends the run if recent recommendations exist, unless forced
- summarize: per sensor type statistics
- generate: LLM call with the summary
- parse: validate the LLM output against the recommendation schema
- persist: store the batch

Nodes read the database session from config["configurable"]["session"].
"""

import asyncio
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Literal, TypedDict

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.runnables import RunnableConfig
from langgraph.graph import END
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.advisory.config import get_llm
from smartagri.advisory.prompts import MAX_RECOMMENDATIONS, SYSTEM_PROMPT, build_user_prompt
from smartagri.config import AI_TIMEOUT
from smartagri.errors import InvalidAIResponse, NotFound, UpstreamUnavailable
from smartagri.models import Device, Recommendation, SensorReading
from smartagri.schemas.recommendation import RecommendationDraft
from smartagri.services.device_service import get_device
from smartagri.services.readings_service import RECENT_WINDOW_HOURS, fetch_recent_readings
from smartagri.services.recommendation_service import (
    has_recent_recommendations,
    store_recommendations,
)
from smartagri.services.summary_service import summarize_readings, summary_snapshot

logger = logging.getLogger(__name__)

# At most one non-forced generation per device within this period
IDEMPOTENCY_WINDOW_HOURS = 6

NO_RECENT_DATA = "No recent sensor data available"
RECENT_RECOMMENDATIONS_EXIST = "Recent recommendations already exist"

_drafts_adapter = TypeAdapter(list[RecommendationDraft])


# --- State Type (imported by graph.py) ---


class AdvisoryState(TypedDict, total=False):
    """State of one generation run.

    Attributes:
        device_id: Device to generate recommendations for.
        force_generate: Skip the idempotency gate.
        now: Reference time for the reading window and the gate.
        readings: Readings in the window, newest first.
        device: Resolved device record.
        summary: JSON snapshot of the per sensor type statistics.
        raw_response: Text returned by the LLM.
        drafts: Parsed recommendations.
        recommendations: Stored rows.
        message: Set when the run ends without generating.
    """

    device_id: str
    force_generate: bool
    now: datetime
    readings: list[SensorReading]
    device: Device | None
    summary: dict[str, Any]
    raw_response: str
    drafts: list[RecommendationDraft]
    recommendations: list[Recommendation]
    message: str | None


def _session(config: RunnableConfig) -> AsyncSession:
    return config["configurable"]["session"]


# --- Nodes ---


async def fetch_window(state: AdvisoryState, config: RunnableConfig) -> dict:
    readings = await fetch_recent_readings(_session(config), state["device_id"], now=state["now"])
    if not readings:
        logger.info(f"No recent readings for {state['device_id']}")
        return {"readings": [], "message": NO_RECENT_DATA}
    return {"readings": readings}


async def resolve_device(state: AdvisoryState, config: RunnableConfig) -> dict:
    device = await get_device(_session(config), state["device_id"])
    if device is None:
        raise NotFound("Device not found")
    return {"device": device}


async def idempotency_gate(state: AdvisoryState, config: RunnableConfig) -> dict:
    if state.get("force_generate"):
        return {}

    since = state["now"] - timedelta(hours=IDEMPOTENCY_WINDOW_HOURS)
    if await has_recent_recommendations(_session(config), state["device_id"], since):
        logger.info(f"Skipping generation for {state['device_id']}: recent recommendations exist")
        return {"message": RECENT_RECOMMENDATIONS_EXIST}
    return {}


def summarize(state: AdvisoryState) -> dict:
    return {"summary": summary_snapshot(summarize_readings(state["readings"]))}


def _response_text(content: Any) -> str:
    """Flatten message content that may come back as a list of content blocks."""
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    return str(content)


async def generate(state: AdvisoryState) -> dict:
    device = state["device"]
    messages = [
        SystemMessage(content=SYSTEM_PROMPT),
        HumanMessage(
            content=build_user_prompt(
                device_name=device.device_name,
                device_type=device.device_type,
                location=device.location,
                summary=state["summary"],
                window_hours=RECENT_WINDOW_HOURS,
            )
        ),
    ]

    logger.info(f"Requesting recommendations for {device.device_id}")
    try:
        async with asyncio.timeout(AI_TIMEOUT):
            response = await get_llm().ainvoke(messages)
    except TimeoutError:
        logger.warning(f"AI request timed out after {AI_TIMEOUT}s")
        raise UpstreamUnavailable(f"AI service timeout after {AI_TIMEOUT}s") from None
    except Exception as e:
        logger.error(f"AI request failed: {e}")
        raise UpstreamUnavailable("Failed to generate AI recommendations") from e

    return {"raw_response": _response_text(response.content)}


def _strip_code_fence(text: str) -> str:
    if text.startswith("```"):
        first_newline = text.find("\n")
        text = text[first_newline + 1 :] if first_newline != -1 else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_recommendations(text: str) -> list[RecommendationDraft]:
    """Parse LLM output into recommendation drafts.

    Raises InvalidAIResponse unless the text is a JSON array of objects that
    match the recommendation schema.
    """
    cleaned = _strip_code_fence(text.strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response: {text[:200]}")
        raise InvalidAIResponse() from e

    if not isinstance(data, list):
        logger.error(f"AI response is not a JSON array: {text[:200]}")
        raise InvalidAIResponse()

    try:
        drafts = _drafts_adapter.validate_python(data)
    except ValidationError as e:
        logger.error(f"AI response does not match schema: {e.error_count()} errors")
        raise InvalidAIResponse() from e

    if len(drafts) > MAX_RECOMMENDATIONS:
        logger.warning(f"AI returned {len(drafts)} recommendations, keeping {MAX_RECOMMENDATIONS}")
        drafts = drafts[:MAX_RECOMMENDATIONS]
    return drafts


def parse(state: AdvisoryState) -> dict:
    return {"drafts": parse_recommendations(state["raw_response"])}


async def persist(state: AdvisoryState, config: RunnableConfig) -> dict:
    rows = await store_recommendations(
        _session(config),
        state["device"],
        state["drafts"],
        state["summary"],
        now=state["now"],
    )
    return {"recommendations": rows}


# --- Conditional Edges ---


def route_after_fetch(state: AdvisoryState) -> Literal["resolve_device", "__end__"]:
    return END if state.get("message") else "resolve_device"


def route_after_gate(state: AdvisoryState) -> Literal["summarize", "__end__"]:
    return END if state.get("message") else "summarize"
