"""Exception hierarchy for cortexmix.

Only configuration and programming errors escape to callers. Everything the
brain or capability engine hits at runtime is caught and logged so the host's
update loop never sees an exception.
"""


class CortexmixError(Exception):
    """Base class for all cortexmix errors."""


class LLMCallError(CortexmixError):
    """Raised when the external reasoning call fails."""


class EmptyResponseError(LLMCallError):
    """Raised when the reasoning call returns no usable text."""


class LocalLLMError(LLMCallError):
    """Raised when a local LLM invocation fails."""


class TransientLLMError(LLMCallError):
    """Raised for failures that are worth retrying (rate limits, 5xx, timeouts)."""
