"""
Fake profile repository for testing.
"""

from typing import Optional, Set


class FakeProfileRepository:
    """In-memory fake implementation of ProfileRepository."""

    def __init__(self, admin_ids: Optional[Set[str]] = None):
        self._admin_ids = set(admin_ids or ())
        self._fail_with: Optional[Exception] = None

    def make_admin(self, user_id: str) -> None:
        self._admin_ids.add(user_id)

    def fail_with(self, error: Optional[Exception]) -> None:
        self._fail_with = error

    def is_admin(self, user_id: str) -> bool:
        if self._fail_with is not None:
            raise self._fail_with
        return user_id in self._admin_ids
