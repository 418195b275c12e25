"""Prompt templates for the decision and consolidation calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass
class PromptTemplate:
    """Represents a templated prompt with ``{{placeholder}}`` slots."""

    name: str
    system: str
    user: str
    description: str = ""

    def render(self, **values: str) -> "RenderedPrompt":
        """Substitute placeholders in both halves. Unknown placeholders stay as-is."""
        system = self.system
        user = self.user
        for key, value in values.items():
            placeholder = "{{" + key + "}}"
            system = system.replace(placeholder, value)
            user = user.replace(placeholder, value)
        return RenderedPrompt(system=system, user=user)


@dataclass
class RenderedPrompt:
    system: str
    user: str


class PromptLibrary:
    """Container for named prompt templates."""

    def __init__(self) -> None:
        self.templates: Dict[str, PromptTemplate] = {}

    def register(self, template: PromptTemplate) -> None:
        self.templates[template.name] = template

    def get(self, name: str) -> PromptTemplate:
        return self.templates[name]


# Default templates ------------------------------------------------------------

DEFAULT_PROMPTS = PromptLibrary()

DEFAULT_PROMPTS.register(
    PromptTemplate(
        name="decide",
        system=(
            "You are an AI agent in a 3D world. You make decisions based on your perception.\n\n"
            "## Rules\n"
            "- **FOLLOW**: If you see a 'PLAYER' (<20m), decide to 'FOLLOW' them to say hello.\n"
            "- **CHAT**: If someone is speaking with you, 'CHAT' with them.\n"
            "- **MOVE_TO**: Go to a named landmark (targetId) or a coordinate (target).\n"
            "- **WANDER**: If no specific entities of interest, explore.\n"
            "- **WAIT**: If idle or thinking.\n\n"
            "## Output Format\n"
            "Respond ONLY with valid JSON in this exact format:\n"
            "{\n"
            "  \"action\": \"MOVE_TO\" | \"WAIT\" | \"WANDER\" | \"FOLLOW\" | \"CHAT\",\n"
            "  \"targetId\": \"id_of_entity_or_landmark (optional)\",\n"
            "  \"target\": {\"x\": number, \"y\": number, \"z\": number} (optional),\n"
            "  \"thought\": \"brief reasoning\",\n"
            "  \"memo\": \"short note to your future self (optional)\"\n"
            "}"
        ),
        user=(
            "## Current State\n"
            "**Position**: {{position}}\n"
            "**Behavior**: {{behavior}}\n\n"
            "{{context}}\n\n"
            "Decide your next action."
        ),
        description="Per-tick action selection for the brain.",
    )
)

DEFAULT_PROMPTS.register(
    PromptTemplate(
        name="consolidate",
        system=(
            "You compress an agent's short-term memories into one first-person sentence. "
            "Keep names, places and unresolved intentions. Respond with the sentence only."
        ),
        user="Recent memories (newest first):\n{{memories}}",
        description="Dreamer memory consolidation.",
    )
)
