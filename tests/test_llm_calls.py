"""Tests for the high-level LLM call helpers and their cognition adapters."""

import pytest

from cortexmix.cognition.llm import LLMDecisionGenerator, LLMMemorySummarizer
from cortexmix.config import Config
from cortexmix.llm_calls import generate_decision, summarize_memories


@pytest.mark.asyncio
async def test_generate_decision_delegates_to_transport(monkeypatch):
    captured = {}

    async def fake_call_llm_text(**kwargs):
        captured.update(kwargs)
        return '{"action": "WAIT", "thought": "resting"}'

    monkeypatch.setattr("cortexmix.llm_calls.call_llm_text", fake_call_llm_text)

    result = await generate_decision(
        "You are an agent",
        "Decide.",
        llm_provider="openai",
        llm_model="gpt-4o-mini",
    )

    assert result == '{"action": "WAIT", "thought": "resting"}'
    assert captured["llm_provider"] == "openai"
    assert captured["llm_model"] == "gpt-4o-mini"
    assert captured["json_mode"] is True
    assert captured["system_prompt"] == "You are an agent"


@pytest.mark.asyncio
async def test_summarize_memories_strips_whitespace(monkeypatch):
    captured = {}

    async def fake_call_llm_text(**kwargs):
        captured.update(kwargs)
        return "  I chatted with Ada.\n"

    monkeypatch.setattr("cortexmix.llm_calls.call_llm_text", fake_call_llm_text)
    monkeypatch.setattr(Config, "LLM_PROVIDER", "groq")
    monkeypatch.setattr(Config, "LLM_MODEL", "llama-3.3-70b-versatile")

    summary = await summarize_memories("Compress", "- chatted with Ada")

    assert summary == "I chatted with Ada."
    assert captured["llm_provider"] == "groq"
    assert "json_mode" not in captured


@pytest.mark.asyncio
async def test_generators_forward_their_pinned_model(monkeypatch):
    calls = []

    async def fake_generate(system_prompt, user_prompt, llm_provider=None, llm_model=None):
        calls.append(("decide", llm_provider, llm_model))
        return '{"action": "WANDER"}'

    async def fake_summarize(system_prompt, user_prompt, llm_provider=None, llm_model=None):
        calls.append(("summarize", llm_provider, llm_model))
        return "summary"

    monkeypatch.setattr("cortexmix.llm_calls.generate_decision", fake_generate)
    monkeypatch.setattr("cortexmix.llm_calls.summarize_memories", fake_summarize)

    generator = LLMDecisionGenerator(llm_provider="ollama", llm_model="llama3.1")
    summarizer = LLMMemorySummarizer(llm_provider="ollama", llm_model="llama3.1")

    assert await generator.generate_decision("s", "u") == '{"action": "WANDER"}'
    assert await summarizer.summarize("s", "u") == "summary"
    assert calls == [("decide", "ollama", "llama3.1"), ("summarize", "ollama", "llama3.1")]
