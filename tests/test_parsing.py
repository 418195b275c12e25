"""Tests for decision parsing and the WAIT fallback."""

from cortexmix.cognition.parsing import (
    Structured,
    Unstructured,
    parse_decision,
    parse_response,
    strip_code_fences,
)
from cortexmix.schemas import DecisionAction, Vec3


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"action": "WAIT"}\n```') == '{"action": "WAIT"}'
    assert strip_code_fences("  plain  ") == "plain"


def test_fence_without_language_keeps_following_text():
    assert strip_code_fences("Use ```print``` here") == "Use print here"
    assert strip_code_fences("```JSON\n{}\n```") == "{}"


def test_fenced_free_text_keeps_every_word():
    decision = parse_decision("```Hello world```")

    assert decision.action is DecisionAction.WAIT
    assert decision.thought == "Hello world"


def test_fenced_json_parses_to_structured():
    raw = '```json\n{"action": "FOLLOW", "targetId": "player", "thought": "Say hi", "mood": "happy"}\n```'

    parsed = parse_response(raw)

    assert isinstance(parsed, Structured)
    assert parsed.decision.action is DecisionAction.FOLLOW
    assert parsed.decision.target_id == "player"
    assert parsed.decision.thought == "Say hi"


def test_target_coordinates_and_memo():
    decision = parse_decision(
        '{"action": "move_to", "target": {"x": 1, "y": 0, "z": -2}, "memo": "check the desk later"}'
    )

    assert decision.action is DecisionAction.MOVE_TO
    assert decision.target == Vec3(x=1, z=-2)
    assert decision.memo == "check the desk later"


def test_free_text_becomes_wait_with_raw_thought():
    parsed = parse_response("I think I'll just stand here.")
    assert parsed == Unstructured("I think I'll just stand here.")

    decision = parse_decision("I think I'll just stand here.")
    assert decision.action is DecisionAction.WAIT
    assert decision.thought == "I think I'll just stand here."


def test_unknown_action_is_unstructured():
    raw = '{"action": "DANCE", "thought": "party"}'
    assert isinstance(parse_response(raw), Unstructured)
    assert parse_decision(raw).thought == raw


def test_non_object_json_is_unstructured():
    assert parse_response("[1, 2, 3]") == Unstructured("[1, 2, 3]")
    assert parse_decision("42").action is DecisionAction.WAIT
