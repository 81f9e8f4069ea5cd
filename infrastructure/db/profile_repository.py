"""
Supabase implementation of ProfileRepository.
"""

import logging

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseProfileRepository:
    """Reads user flags from the profiles table."""

    def __init__(self, client: Client):
        self._client = client

    def is_admin(self, user_id: str) -> bool:
        """Check the admin flag on a user's profile."""
        response = (
            self._client.table("profiles")
            .select("is_admin")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return False
        return bool(response.data[0].get("is_admin"))
