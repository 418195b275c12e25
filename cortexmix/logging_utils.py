"""Logging utilities for cortexmix agents.

Provides color-coded output to distinguish deterministic work (shards, mixer,
capability dispatch) from LLM calls and from degraded paths (fallbacks,
unresolved anchors, dropped decisions).
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for operation types
    BLUE = "\033[94m"      # Deterministic operations (mixer, capability engine)
    YELLOW = "\033[93m"    # LLM calls (brain, dreamer)
    RED = "\033[91m"       # Errors and retries
    MAGENTA = "\033[95m"   # Recoverable warnings (fallbacks, unknown anchors)
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if CORTEXMIX_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("CORTEXMIX_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def _quiet() -> bool:
    return os.getenv("CORTEXMIX_QUIET", "").lower() in ("1", "true", "yes")


def debug_enabled(flag: str) -> bool:
    """Return True when a DEBUG_* style environment flag is switched on."""
    return os.getenv(flag, "").lower() in ("1", "true", "yes")


def log_deterministic(message: str) -> None:
    """Log a deterministic operation (blue)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_llm(message: str) -> None:
    """Log an LLM operation (yellow)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_LLM} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error or retry (red). Never silenced."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_warning(message: str) -> None:
    """Log a recoverable problem (magenta)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_ERROR} {message}", Color.MAGENTA))


def log_success(message: str) -> None:
    """Log a success (green)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    if not _quiet():
        print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


# Markers for operation types (color-blind accessible)
LOG_TAG_DETERMINISTIC = "[•]"  # Deterministic operation
LOG_TAG_LLM = "[AI]"           # LLM call
LOG_TAG_ERROR = "[!]"          # Error/retry/warning
LOG_TAG_SUCCESS = "[✓]"        # Success
LOG_TAG_INFO = "[i]"           # Information
