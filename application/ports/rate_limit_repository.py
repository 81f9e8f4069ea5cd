"""
Rate limit store port (interface).

The store owns the counters behind the generation quota. Increments must be
atomic with respect to concurrent requests for the same key.
"""

from typing import Dict, Optional, Protocol


class RateLimitRepository(Protocol):
    """Repository interface for fixed-window request counters."""

    def consume(self, key: str, limit: int, window_seconds: int) -> Dict:
        """
        Atomically count one request against a key.

        Starts a fresh window when none exists or the current one has
        expired. Never increments past the limit.

        Args:
            key: Counter key, e.g. "<user_id>:workout_generation"
            limit: Maximum requests allowed per window
            window_seconds: Window length in seconds

        Returns:
            {"allowed": bool, "count": int, "reset_at": ISO-8601 string}
        """
        ...

    def get(self, key: str) -> Optional[Dict]:
        """
        Read the current counter for a key without consuming.

        Args:
            key: Counter key

        Returns:
            {"count": int, "reset_at": ISO-8601 string} or None if no window exists
        """
        ...
