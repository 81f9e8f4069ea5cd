"""
Input sanitization utilities.

Shared sanitization functions to prevent prompt injection attacks.
This module has no dependencies on models or services to avoid circular imports.
"""

import logging
import re
from typing import Optional

from core.constants import (
    MAX_EXCLUDED_NAME_LENGTH,
    MAX_SPECIAL_INSTRUCTIONS_LENGTH,
    MAX_WORKOUT_NAME_LENGTH,
)

logger = logging.getLogger(__name__)

# Phrases that try to take over the prompt. Input matching any of these is dropped.
PROMPT_INJECTION_PATTERNS = [
    re.compile(r"ignore\s+(all\s+)?(previous|prior|above)", re.IGNORECASE),
    re.compile(r"disregard\s+(all\s+)?(previous|prior|above)", re.IGNORECASE),
    re.compile(r"forget\s+(all\s+)?(previous|prior|above)", re.IGNORECASE),
    re.compile(r"new\s+instructions?", re.IGNORECASE),
    re.compile(r"system\s*:?\s*prompt", re.IGNORECASE),
    re.compile(r"you\s+are\s+(now|a)\b", re.IGNORECASE),
    re.compile(r"act\s+as\s+(if|a)\b", re.IGNORECASE),
    re.compile(r"pretend\s+(to\s+be|you)", re.IGNORECASE),
    re.compile(r"roleplay\s+as", re.IGNORECASE),
    re.compile(r"\bDAN\b"),
    re.compile(r"jailbreak", re.IGNORECASE),
    re.compile(r"bypass\s+(filter|safety|restriction)", re.IGNORECASE),
    re.compile(r"override\s+(instruction|rule|filter)", re.IGNORECASE),
    re.compile(r"\{\{.*\}\}"),
    re.compile(r"\[\[.*\]\]"),
    re.compile(r"```[\s\S]*```"),
]

_CONTROL_CHARS = re.compile(r"[\n\r\t\x00-\x1f\x7f-\x9f]")
_HTML_TAGS = re.compile(r"<[^>]*>")
_SQL_KEYWORDS = re.compile(
    r"\b(SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE)\b", re.IGNORECASE
)
_UNSAFE_INSTRUCTION_CHARS = re.compile(r"[^\w\s.,!?'\-\":;()]")
_REPEATED_PUNCTUATION = re.compile(r"([.,!?'\-\":;]){3,}")
_UNSAFE_NAME_CHARS = re.compile(r"[^\w\s\-']")


def sanitize_user_input(value: str, max_length: int = MAX_EXCLUDED_NAME_LENGTH) -> str:
    """
    Sanitize user input by removing control characters and limiting length.

    - Removes newlines, carriage returns, tabs, and control characters
    - Collapses multiple spaces into one
    - Strips leading/trailing whitespace
    - Truncates to a maximum length

    Args:
        value: Raw user-provided string
        max_length: Maximum allowed length (default: MAX_EXCLUDED_NAME_LENGTH)

    Returns:
        Sanitized string safe for prompt inclusion
    """
    sanitized = _CONTROL_CHARS.sub(" ", value)
    sanitized = re.sub(r" +", " ", sanitized)
    sanitized = sanitized.strip()
    return sanitized[:max_length].strip()


def contains_prompt_injection(value: str) -> bool:
    """Check whether the text matches a known prompt-injection phrase."""
    return any(pattern.search(value) for pattern in PROMPT_INJECTION_PATTERNS)


def sanitize_special_instructions(value: Optional[str]) -> Optional[str]:
    """
    Sanitize the free-text special instructions of a generation request.

    Input that looks like a prompt-injection attempt is dropped entirely.
    Otherwise HTML, SQL keywords and unusual symbols are removed, runs of
    punctuation are shortened, whitespace is collapsed and the result is
    capped at MAX_SPECIAL_INSTRUCTIONS_LENGTH characters.

    Args:
        value: Raw special instructions, possibly None

    Returns:
        Sanitized instructions, or None if nothing usable remains
    """
    if not value or not isinstance(value, str):
        return None

    sanitized = value.strip()

    if contains_prompt_injection(sanitized):
        logger.warning(f"Prompt injection attempt dropped: {sanitized[:50]!r}")
        return None

    sanitized = _HTML_TAGS.sub("", sanitized)
    sanitized = _SQL_KEYWORDS.sub("", sanitized)
    sanitized = _CONTROL_CHARS.sub(" ", sanitized)
    sanitized = _UNSAFE_INSTRUCTION_CHARS.sub("", sanitized)
    sanitized = _REPEATED_PUNCTUATION.sub(r"\1\1", sanitized)
    sanitized = re.sub(r"\s+", " ", sanitized)
    sanitized = sanitized.strip()[:MAX_SPECIAL_INSTRUCTIONS_LENGTH].strip()

    return sanitized or None


def sanitize_workout_name(value: Optional[str], fallback: str) -> str:
    """
    Sanitize a model-authored workout name.

    Args:
        value: Name proposed by the model
        fallback: Name to use when nothing usable remains

    Returns:
        Name containing only word characters, spaces, hyphens and apostrophes
    """
    if not value or not isinstance(value, str):
        return fallback

    sanitized = _HTML_TAGS.sub("", value.strip())
    sanitized = _UNSAFE_NAME_CHARS.sub("", sanitized)
    sanitized = re.sub(r"\s+", " ", sanitized)
    sanitized = sanitized[:MAX_WORKOUT_NAME_LENGTH].strip()
    return sanitized or fallback
