"""
cortexmix - context-mixing cognition for LLM-driven game agents.

Each agent keeps a handful of context shards (vision, location, memory,
relationships, mood, goals). A mixer picks the relevant ones under a token
budget, a brain runs one rate-limited reasoning call, and a capability engine
turns the resulting decision into steering on the agent's mover.

No global state: the registry, rate limiter and generators are created by
the host and injected.
"""

__version__ = "0.1.0"

# Core interfaces
from .rate_limiter import RateLimiter
from .oracle import PathQuery, SpatialAnchor, SpatialOracle, WorldRegistry
from .cognition import (
    Brain,
    BrainPhase,
    BrainState,
    DecisionGenerator,
    ContextMixer,
    RoutingReport,
    ContextShard,
    VisualCortexShard,
    HippocampusShard,
    SocialShard,
    AmygdalaShard,
    FrontalShard,
    SpatialShard,
    Dreamer,
    ConsolidationCadence,
    TickInterval,
    LLMDecisionGenerator,
    LLMMemorySummarizer,
    PromptLibrary,
    PromptTemplate,
    DEFAULT_PROMPTS,
    parse_response,
)
from .capabilities import (
    CapabilityEngine,
    CapabilityType,
    CapabilityCommand,
    Posture,
    POSTURE_SPEEDS,
    Mover,
    ReferenceMover,
    command_from_decision,
    parse_command,
)
from .runtime import AgentRuntime

# Core schemas
from .schemas import (
    Vec3,
    Trigger,
    MemoryKind,
    MemoryEntry,
    EntityKind,
    PerceivedEntity,
    Relationship,
    ActiveGoal,
    EmotionalState,
    DecisionAction,
    Decision,
)

# Errors
from .errors import (
    CortexmixError,
    LLMCallError,
    EmptyResponseError,
    LocalLLMError,
    TransientLLMError,
)

__all__ = [
    # Runtime
    "AgentRuntime",
    "RateLimiter",
    # World
    "WorldRegistry",
    "SpatialOracle",
    "SpatialAnchor",
    "PathQuery",
    # Cognition
    "Brain",
    "BrainPhase",
    "BrainState",
    "DecisionGenerator",
    "ContextMixer",
    "RoutingReport",
    "ContextShard",
    "VisualCortexShard",
    "HippocampusShard",
    "SocialShard",
    "AmygdalaShard",
    "FrontalShard",
    "SpatialShard",
    "Dreamer",
    "ConsolidationCadence",
    "TickInterval",
    "LLMDecisionGenerator",
    "LLMMemorySummarizer",
    "PromptLibrary",
    "PromptTemplate",
    "DEFAULT_PROMPTS",
    "parse_response",
    # Capabilities
    "CapabilityEngine",
    "CapabilityType",
    "CapabilityCommand",
    "Posture",
    "POSTURE_SPEEDS",
    "Mover",
    "ReferenceMover",
    "command_from_decision",
    "parse_command",
    # Schemas
    "Vec3",
    "Trigger",
    "MemoryKind",
    "MemoryEntry",
    "EntityKind",
    "PerceivedEntity",
    "Relationship",
    "ActiveGoal",
    "EmotionalState",
    "DecisionAction",
    "Decision",
    # Errors
    "CortexmixError",
    "LLMCallError",
    "EmptyResponseError",
    "LocalLLMError",
    "TransientLLMError",
]
