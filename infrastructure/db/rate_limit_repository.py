"""
Supabase implementation of RateLimitRepository.

Counting happens inside the consume_rate_limit Postgres function, a single
INSERT ... ON CONFLICT DO UPDATE statement, so concurrent requests for the
same key cannot both slip under the limit.
"""

import logging
from typing import Dict, Optional

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseRateLimitRepository:
    """Supabase-backed fixed-window counters in the rate_limits table."""

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Supabase client (service role key)
        """
        self._client = client

    def consume(self, key: str, limit: int, window_seconds: int) -> Dict:
        """
        Atomically count one request against a key.

        Returns:
            {"allowed": bool, "count": int, "reset_at": ISO-8601 string}
        """
        response = self._client.rpc(
            "consume_rate_limit",
            {
                "p_key": key,
                "p_limit": limit,
                "p_window_ms": window_seconds * 1000,
            },
        ).execute()

        data = response.data
        if isinstance(data, list):
            data = data[0] if data else None
        if not data:
            raise RuntimeError(f"consume_rate_limit returned no data for {key}")

        return {
            "allowed": bool(data.get("allowed")),
            "count": int(data.get("count") or 0),
            "reset_at": data.get("reset_at"),
        }

    def get(self, key: str) -> Optional[Dict]:
        """Read the current window for a key without consuming."""
        response = (
            self._client.table("rate_limits")
            .select("count, reset_at")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None
