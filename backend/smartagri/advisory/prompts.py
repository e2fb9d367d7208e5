"""Prompts for advisory generation.

The system prompt fixes the output contract: a JSON array of at most
MAX_RECOMMENDATIONS objects with title, message, priority, category and
confidence.
"""

import json
from typing import Any

MAX_RECOMMENDATIONS = 3

SYSTEM_PROMPT = f"""You are an agricultural AI expert. Analyze sensor data and provide farming recommendations.

Response format must be a JSON array of recommendations:
[
  {{
    "title": "Brief title",
    "message": "Detailed recommendation",
    "priority": "low|medium|high",
    "category": "irrigation|fertilizer|weather|pest|disease|general",
    "confidence": 0.85
  }}
]

Guidelines:
- Only suggest actionable recommendations
- Consider crop health, environmental conditions, and optimal growing parameters
- Prioritize based on urgency and impact
- Maximum {MAX_RECOMMENDATIONS} recommendations per analysis
- Be specific and practical
- Respond with the JSON array only, no surrounding text
"""

USER_PROMPT_TEMPLATE = """Analyze this sensor data from {site} and provide recommendations:

Device: {device_name} ({device_type})
Location: {location}

Recent sensor readings (last {window_hours} hours):
{summary}

Please provide specific, actionable farming recommendations based on this data."""


def build_user_prompt(
    device_name: str,
    device_type: str,
    location: str | None,
    summary: dict[str, Any],
    window_hours: int = 24,
) -> str:
    """Fill the user prompt with device details and the serialized sensor summary."""
    return USER_PROMPT_TEMPLATE.format(
        site=location or "farm location",
        device_name=device_name,
        device_type=device_type,
        location=location or "Not specified",
        window_hours=window_hours,
        summary=json.dumps(summary, indent=2),
    )
