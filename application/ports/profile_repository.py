"""
Profile repository port (interface).

Read-only access to user profile flags owned by the auth collaborator.
"""

from typing import Protocol


class ProfileRepository(Protocol):
    """Repository interface for user profiles."""

    def is_admin(self, user_id: str) -> bool:
        """
        Check whether a user has the admin flag.

        Args:
            user_id: The user's ID

        Returns:
            True if the profile exists and is flagged as admin
        """
        ...
