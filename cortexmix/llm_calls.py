"""
LLM call functions using Mirascope for provider-agnostic LLM integration.

This module provides:
- Agent decision generation (generate_decision)
- Short-term memory consolidation (summarize_memories)

Both return raw text; parsing into typed objects happens in
``cortexmix.cognition.parsing`` so a malformed reply degrades to a WAIT
decision instead of an exception.
"""

from cortexmix.config import Config
from .llm_utils import call_llm_text


async def generate_decision(
    system_prompt: str,
    user_prompt: str,
    llm_provider: str | None = None,
    llm_model: str | None = None,
) -> str:
    """
    Ask the reasoning model for the agent's next action.

    Args:
        system_prompt: Rules and output format
        user_prompt: Agent state plus mixed context
        llm_provider: Provider name (e.g., "groq", "openai", "ollama"); defaults to Config
        llm_model: Model identifier; defaults to Config

    Returns:
        Raw response text, expected to be (optionally fenced) JSON

    Raises:
        LLMCallError: If the call fails after retries or returns nothing
    """
    return await call_llm_text(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        llm_provider=llm_provider or Config.LLM_PROVIDER,
        llm_model=llm_model or Config.LLM_MODEL,
        json_mode=True,
    )


async def summarize_memories(
    system_prompt: str,
    user_prompt: str,
    llm_provider: str | None = None,
    llm_model: str | None = None,
) -> str:
    """
    Compress recent memories into a single summary sentence.

    Raises:
        LLMCallError: If the call fails after retries or returns nothing
    """
    summary = await call_llm_text(
        system_prompt=system_prompt,
        user_prompt=user_prompt,
        llm_provider=llm_provider or Config.LLM_PROVIDER,
        llm_model=llm_model or Config.LLM_MODEL,
    )
    return summary.strip()
