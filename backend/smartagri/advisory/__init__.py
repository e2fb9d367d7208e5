"""AI recommendation (advisory) pipeline."""

from smartagri.advisory.graph import (
    AdvisoryResult,
    build_graph,
    generate_recommendations,
    get_advisory_graph,
)
from smartagri.advisory.nodes import AdvisoryState, parse_recommendations
from smartagri.advisory.prompts import SYSTEM_PROMPT, build_user_prompt

__all__ = [
    "AdvisoryResult",
    "AdvisoryState",
    "build_graph",
    "generate_recommendations",
    "get_advisory_graph",
    "parse_recommendations",
    "SYSTEM_PROMPT",
    "build_user_prompt",
]
