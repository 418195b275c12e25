"""Cognition stack for cortexmix agents.

Shards hold per-agent context, the mixer routes across them under a token
budget, the brain runs the rate-limited reasoning call, and the dreamer
consolidates memory in the background.
"""

from .shards import (
    ContextShard,
    VisualCortexShard,
    HippocampusShard,
    SocialShard,
    AmygdalaShard,
    FrontalShard,
    SpatialShard,
)
from .mixer import ContextMixer, RoutingReport, ShardContribution, estimate_tokens
from .parsing import (
    Structured,
    Unstructured,
    ParsedResponse,
    parse_decision,
    parse_response,
    strip_code_fences,
    to_decision,
)
from .prompts import PromptLibrary, PromptTemplate, RenderedPrompt, DEFAULT_PROMPTS
from .brain import Brain, BrainPhase, BrainState, DecisionGenerator
from .cadence import ConsolidationCadence, TickInterval
from .dreamer import Dreamer, MemorySummarizer
from .llm import LLMDecisionGenerator, LLMMemorySummarizer

__all__ = [
    "ContextShard",
    "VisualCortexShard",
    "HippocampusShard",
    "SocialShard",
    "AmygdalaShard",
    "FrontalShard",
    "SpatialShard",
    "ContextMixer",
    "RoutingReport",
    "ShardContribution",
    "estimate_tokens",
    "Structured",
    "Unstructured",
    "ParsedResponse",
    "parse_decision",
    "parse_response",
    "strip_code_fences",
    "to_decision",
    "PromptLibrary",
    "PromptTemplate",
    "RenderedPrompt",
    "DEFAULT_PROMPTS",
    "Brain",
    "BrainPhase",
    "BrainState",
    "DecisionGenerator",
    "ConsolidationCadence",
    "TickInterval",
    "Dreamer",
    "MemorySummarizer",
    "LLMDecisionGenerator",
    "LLMMemorySummarizer",
]
