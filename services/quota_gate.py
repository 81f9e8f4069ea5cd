"""
Generation quota gate.

Bounds how many workouts a user may generate per window. Counting is
delegated to the rate limit store, which increments atomically. Store
outages fail open.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from application.ports import RateLimitRepository
from core.constants import GENERATION_QUOTA_KEY
from models.workout import Principal

logger = logging.getLogger(__name__)


@dataclass
class QuotaStatus:
    """Remaining generations for a principal in the current window."""

    limit: int
    remaining: int
    reset_at: Optional[str] = None
    unlimited: bool = False


def quota_key(user_id: str) -> str:
    """Counter key for a user's generation quota."""
    return f"{user_id}:{GENERATION_QUOTA_KEY}"


class QuotaGate:
    """Fixed-window generation quota with an admin bypass."""

    DEFAULT_LIMIT = 100
    DEFAULT_WINDOW_SECONDS = 24 * 60 * 60

    def __init__(
        self,
        rate_limit_repo: RateLimitRepository,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ):
        self._rate_limit_repo = rate_limit_repo
        self._limit = limit
        self._window_seconds = window_seconds

    def check_and_consume(self, principal: Principal) -> bool:
        """
        Count one generation against the principal's quota.

        Args:
            principal: The caller

        Returns:
            True if the generation may proceed
        """
        if principal.is_admin:
            return True

        key = quota_key(principal.user_id)
        try:
            result = self._rate_limit_repo.consume(key, self._limit, self._window_seconds)
        except Exception as e:
            logger.warning(f"Rate limit store unavailable for {key}, allowing request: {e}")
            return True

        allowed = bool(result.get("allowed", True))
        if not allowed:
            logger.info(
                f"Generation quota exhausted for user {principal.user_id} "
                f"(limit {self._limit}, resets {result.get('reset_at')})"
            )
        return allowed

    def remaining(self, principal: Principal) -> QuotaStatus:
        """
        Report the principal's remaining quota without consuming any.

        Args:
            principal: The caller

        Returns:
            QuotaStatus; a store failure reports the full limit
        """
        if principal.is_admin:
            return QuotaStatus(limit=self._limit, remaining=self._limit, unlimited=True)

        try:
            window = self._rate_limit_repo.get(quota_key(principal.user_id))
        except Exception as e:
            logger.warning(f"Rate limit store unavailable for user {principal.user_id}: {e}")
            window = None

        if not window or self._is_expired(window.get("reset_at")):
            return QuotaStatus(limit=self._limit, remaining=self._limit)

        count = int(window.get("count") or 0)
        return QuotaStatus(
            limit=self._limit,
            remaining=max(0, self._limit - count),
            reset_at=window.get("reset_at"),
        )

    @staticmethod
    def _is_expired(reset_at: Optional[str]) -> bool:
        if not reset_at:
            return True
        try:
            reset = datetime.fromisoformat(str(reset_at).replace("Z", "+00:00"))
        except ValueError:
            return True
        if reset.tzinfo is None:
            reset = reset.replace(tzinfo=timezone.utc)
        return reset <= datetime.now(timezone.utc)

