"""
cortexmix Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # LLM Provider Configuration
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "groq")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "llama-3.3-70b-versatile")

    # API Keys
    GROQ_API_KEY: str | None = os.getenv("GROQ_API_KEY")
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    ANTHROPIC_API_KEY: str | None = os.getenv("ANTHROPIC_API_KEY")

    # Local Ollama server, used when LLM_PROVIDER=ollama
    OLLAMA_BASE_URL: str | None = os.getenv("OLLAMA_BASE_URL")

    # Decision call tuning. Responses are short JSON objects, so keep them small.
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "256"))
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
    LLM_MAX_ATTEMPTS: int = int(os.getenv("LLM_MAX_ATTEMPTS", "3"))

    # Shared request budget across all agents (Groq free tier is 30 RPM;
    # 25 leaves headroom for retries).
    RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "25"))
    RATE_LIMIT_INTERVAL_SECONDS: float = float(os.getenv("RATE_LIMIT_INTERVAL_SECONDS", "60"))

    # Context mixer
    CONTEXT_TOKEN_BUDGET: int = int(os.getenv("CONTEXT_TOKEN_BUDGET", "1500"))
    CONTEXT_RELEVANCE_THRESHOLD: float = float(os.getenv("CONTEXT_RELEVANCE_THRESHOLD", "0.25"))

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if required values are missing."""
        provider = cls.LLM_PROVIDER.lower()

        # Ollama runs locally and needs no key
        if provider == "ollama":
            return

        if provider == "groq" and not cls.GROQ_API_KEY:
            raise ValueError("GROQ_API_KEY is required when using the 'groq' provider")

        if provider == "openai" and not cls.OPENAI_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY is required when using the 'openai' provider. "
                "For local LLMs, set LLM_PROVIDER=ollama instead."
            )

        if provider == "anthropic" and not cls.ANTHROPIC_API_KEY:
            raise ValueError(
                "ANTHROPIC_API_KEY is required when using the 'anthropic' provider"
            )

        if cls.RATE_LIMIT_MAX_REQUESTS <= 0 or cls.RATE_LIMIT_INTERVAL_SECONDS <= 0:
            raise ValueError("Rate limit settings must be positive")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "cortexmix Configuration:",
            f"  LLM Provider: {cls.LLM_PROVIDER}",
            f"  LLM Model: {cls.LLM_MODEL}",
            f"  Rate Limit: {cls.RATE_LIMIT_MAX_REQUESTS} req / {cls.RATE_LIMIT_INTERVAL_SECONDS:g}s",
            f"  Token Budget: {cls.CONTEXT_TOKEN_BUDGET}",
            f"  Relevance Threshold: {cls.CONTEXT_RELEVANCE_THRESHOLD}",
        ]
        return "\n".join(lines)
