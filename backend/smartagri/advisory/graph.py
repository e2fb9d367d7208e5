"""LangGraph pipeline for AI recommendation generation.

Graph structure:
    fetch_window ──(no data)──────────────────────────────→ END
        └→ resolve_device → idempotency_gate ──(recent)───→ END
                                └→ summarize → generate → parse → persist → END

Errors raised in a node abort the run and propagate to the caller.
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from datetime import datetime

from langgraph.graph import END, StateGraph
from sqlalchemy.ext.asyncio import AsyncSession

from smartagri.models import Recommendation
from smartagri.services._clock import utc_now

logger = logging.getLogger(__name__)


@dataclass
class AdvisoryResult:
    """Outcome of a generation run: stored rows, or a message when nothing was generated."""

    recommendations: list[Recommendation] = field(default_factory=list)
    message: str | None = None

    @property
    def generated(self) -> bool:
        return self.message is None


# --- Graph Building ---

_graph = None


def build_graph() -> StateGraph:
    """Build the uncompiled advisory graph."""
    from smartagri.advisory.nodes import (
        AdvisoryState,
        fetch_window,
        generate,
        idempotency_gate,
        parse,
        persist,
        resolve_device,
        route_after_fetch,
        route_after_gate,
        summarize,
    )

    graph = StateGraph(AdvisoryState)

    graph.add_node("fetch_window", fetch_window)
    graph.add_node("resolve_device", resolve_device)
    graph.add_node("idempotency_gate", idempotency_gate)
    graph.add_node("summarize", summarize)
    graph.add_node("generate", generate)
    graph.add_node("parse", parse)
    graph.add_node("persist", persist)

    graph.set_entry_point("fetch_window")

    graph.add_conditional_edges(
        "fetch_window",
        route_after_fetch,
        {"resolve_device": "resolve_device", END: END},
    )
    graph.add_edge("resolve_device", "idempotency_gate")
    graph.add_conditional_edges(
        "idempotency_gate",
        route_after_gate,
        {"summarize": "summarize", END: END},
    )
    graph.add_edge("summarize", "generate")
    graph.add_edge("generate", "parse")
    graph.add_edge("parse", "persist")
    graph.add_edge("persist", END)

    return graph


def get_advisory_graph():
    """Get the compiled graph singleton."""
    global _graph
    if _graph is None:
        _graph = build_graph().compile()
        logger.info("Advisory graph ready")
    return _graph


# --- Per-device serialization ---

# Entries disappear once no run holds or waits on the lock
_device_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _device_lock(device_id: str) -> asyncio.Lock:
    lock = _device_locks.get(device_id)
    if lock is None:
        lock = asyncio.Lock()
        _device_locks[device_id] = lock
    return lock


async def generate_recommendations(
    session: AsyncSession,
    device_id: str,
    force_generate: bool = False,
    now: datetime | None = None,
) -> AdvisoryResult:
    """Run the advisory graph for one device.

    Runs for the same device are serialized within this process so the
    idempotency gate sees the rows of a run that finished just before.
    """
    run_at = now or utc_now()
    logger.info(f"Generating recommendations: device={device_id}, force={force_generate}")

    async with _device_lock(device_id):
        state = await get_advisory_graph().ainvoke(
            {"device_id": device_id, "force_generate": force_generate, "now": run_at},
            {"configurable": {"session": session}},
        )

    message = state.get("message")
    if message:
        return AdvisoryResult(message=message)
    return AdvisoryResult(recommendations=list(state.get("recommendations", [])))
