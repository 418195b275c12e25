"""Decision parsing for raw reasoning-call output.

The model is asked for a JSON object, but replies arrive fenced in markdown,
wrapped in prose, or as free text. Parsing never raises: the result is a
two-variant sum type,

    Structured(decision)    the text validated as a Decision
    Unstructured(text)      anything else, carrying the cleaned text

and ``to_decision`` collapses ``Unstructured`` into the canonical WAIT
decision whose thought is that text.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Union

from pydantic import ValidationError

from cortexmix.schemas import Decision


_FENCE_RE = re.compile(r"```(?:json|JSON)?")


@dataclass(frozen=True)
class Structured:
    decision: Decision


@dataclass(frozen=True)
class Unstructured:
    text: str


ParsedResponse = Union[Structured, Unstructured]


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers (``` and ```json) and trim.

    Only a ``json`` language tag is dropped with the fence; any other word
    right after a fence is content."""
    return _FENCE_RE.sub("", text).strip()


def parse_response(raw: str) -> ParsedResponse:
    """Classify a raw response as a structured decision or free text."""
    cleaned = strip_code_fences(raw)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        return Unstructured(cleaned)

    # Valid JSON that isn't an object ("42", "[...]") is still free text to us
    if not isinstance(payload, dict):
        return Unstructured(cleaned)

    # Normalise lowercase actions ("wait") before validation
    action = payload.get("action")
    if isinstance(action, str):
        payload["action"] = action.strip().upper()

    try:
        return Structured(Decision.model_validate(payload))
    except ValidationError:
        return Unstructured(cleaned)


def to_decision(parsed: ParsedResponse) -> Decision:
    if isinstance(parsed, Structured):
        return parsed.decision
    return Decision.wait(parsed.text)


def parse_decision(raw: str) -> Decision:
    """Parse ``raw`` straight to a Decision, falling back to WAIT."""
    return to_decision(parse_response(raw))
