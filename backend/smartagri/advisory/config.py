"""LLM configuration for advisory generation."""

from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

from smartagri.config import AI_MAX_TOKENS, AI_MODEL, AI_PROVIDER, AI_TEMPERATURE

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-haiku-4-5",
}


def get_model_name() -> str:
    return AI_MODEL or DEFAULT_MODELS.get(AI_PROVIDER, DEFAULT_MODELS["openai"])


def get_llm():
    """Get the configured chat model. Retries are off; the caller decides whether to retry."""
    if AI_PROVIDER == "anthropic":
        return ChatAnthropic(
            model=get_model_name(),
            temperature=AI_TEMPERATURE,
            max_tokens=AI_MAX_TOKENS,
            max_retries=0,
        )
    return ChatOpenAI(
        model=get_model_name(),
        temperature=AI_TEMPERATURE,
        max_tokens=AI_MAX_TOKENS,
        max_retries=0,
    )
