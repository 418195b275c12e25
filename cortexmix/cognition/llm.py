"""LLM-backed implementations of the brain's and dreamer's external calls."""

from __future__ import annotations

from typing import Optional

from cortexmix import llm_calls
from cortexmix.config import Config
from cortexmix.logging_utils import debug_enabled


class LLMDecisionGenerator:
    """DecisionGenerator that calls the configured provider.

    Provider and model default to ``Config`` so one generator can be shared
    by every brain; pass explicit values to pin a model per agent.
    """

    def __init__(
        self,
        *,
        llm_provider: Optional[str] = None,
        llm_model: Optional[str] = None,
    ) -> None:
        self.llm_provider = llm_provider or Config.LLM_PROVIDER
        self.llm_model = llm_model or Config.LLM_MODEL

    async def generate_decision(self, system_prompt: str, user_prompt: str) -> str:
        raw = await llm_calls.generate_decision(
            system_prompt,
            user_prompt,
            llm_provider=self.llm_provider,
            llm_model=self.llm_model,
        )
        if debug_enabled("DEBUG_LLM"):
            print(f"\n[LLM RESPONSE] {self.llm_provider}/{self.llm_model}\n{'-'*80}\n{raw}\n{'='*80}\n")
        return raw


class LLMMemorySummarizer:
    """MemorySummarizer that asks the configured provider for a one-line summary."""

    def __init__(
        self,
        *,
        llm_provider: Optional[str] = None,
        llm_model: Optional[str] = None,
    ) -> None:
        self.llm_provider = llm_provider or Config.LLM_PROVIDER
        self.llm_model = llm_model or Config.LLM_MODEL

    async def summarize(self, system_prompt: str, user_prompt: str) -> str:
        return await llm_calls.summarize_memories(
            system_prompt,
            user_prompt,
            llm_provider=self.llm_provider,
            llm_model=self.llm_model,
        )
