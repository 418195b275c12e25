"""Tests for truthful logging tags ([AI] vs [•]) in brain and engine output.

These tests assert that:
- The brain prints [AI] when it issues a reasoning call
- Capability dispatch prints the deterministic [•] tag
- CORTEXMIX_QUIET silences everything except errors
"""

from __future__ import annotations

import contextlib
import io

import pytest

from cortexmix.capabilities import CapabilityEngine, ReferenceMover, Wander
from cortexmix.cognition import Brain, ContextMixer
from cortexmix.logging_utils import colored, Color, log_error, log_warning
from cortexmix.oracle import SpatialOracle, WorldRegistry
from cortexmix.rate_limiter import RateLimiter
from cortexmix.schemas import Trigger, Vec3


class FixedGenerator:
    async def generate_decision(self, system_prompt, user_prompt):
        return '{"action": "WANDER", "thought": "stretch my legs"}'


def _brain() -> Brain:
    oracle = SpatialOracle(WorldRegistry())
    return Brain(
        "scout",
        mixer=ContextMixer("scout", oracle),
        rate_limiter=RateLimiter(5, 60, clock=lambda: 0.0),
        generator=FixedGenerator(),
    )


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    monkeypatch.setenv("CORTEXMIX_NO_COLOR", "1")
    monkeypatch.delenv("CORTEXMIX_QUIET", raising=False)
    monkeypatch.delenv("DEBUG_CONTEXT", raising=False)


@pytest.mark.asyncio
async def test_brain_tags_reasoning_call():
    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        await _brain().update(Vec3(), [], "IDLE")
    out = buf.getvalue()

    assert "[AI] [Brain:scout] Thinking..." in out
    assert "[✓] [Brain:scout] Decided: WANDER" in out


def test_engine_tags_dispatch_as_deterministic():
    engine = CapabilityEngine(ReferenceMover(), WorldRegistry())

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        engine.execute(Wander())

    assert "[•] [CapabilityEngine] Executing: WANDER" in buf.getvalue()


def test_debug_context_dumps_routing_report(monkeypatch):
    monkeypatch.setenv("DEBUG_CONTEXT", "1")
    mixer = ContextMixer("scout", SpatialOracle(WorldRegistry()))

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        mixer.build_context(Trigger.PERCEPTION)

    assert "[•] [ContextMixer:scout] trigger=PERCEPTION" in buf.getvalue()


def test_quiet_mode_keeps_errors(monkeypatch):
    monkeypatch.setenv("CORTEXMIX_QUIET", "1")

    buf = io.StringIO()
    with contextlib.redirect_stdout(buf):
        log_warning("unknown anchor")
        log_error("provider down")
    out = buf.getvalue()

    assert "unknown anchor" not in out
    assert "[!] provider down" in out


def test_colored_respects_no_color(monkeypatch):
    assert colored("x", Color.RED) == "x"

    monkeypatch.delenv("CORTEXMIX_NO_COLOR")
    assert colored("x", Color.RED, bold=True) == "\033[1m\033[91mx\033[0m"
