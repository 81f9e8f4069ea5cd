"""
Exercise catalog repository port (interface).

This Protocol defines the contract for the shared, append-only exercise
catalog. Infrastructure implementations (e.g., Supabase) must satisfy this
interface.
"""

from typing import Dict, Optional, Protocol


class ExerciseRepository(Protocol):
    """
    Repository interface for the exercise catalog.

    Every catalog row has a unique search_key. The generation pipeline only
    reads and inserts; it never updates or deletes catalog rows.
    """

    def get_by_search_key(self, search_key: str) -> Optional[Dict]:
        """
        Get a catalog exercise by its normalized search key.

        Args:
            search_key: Normalized exercise name

        Returns:
            Exercise dictionary if found, None otherwise
        """
        ...

    def create(self, data: Dict) -> Dict:
        """
        Insert a new catalog exercise.

        Args:
            data: Exercise data including name and search_key

        Returns:
            Created exercise dictionary with generated ID

        Raises:
            DuplicateExerciseError: If a row with the same search_key exists
        """
        ...
