"""
Supabase implementation of ExerciseRepository.

Queries the shared exercises catalog. The search_key column carries a unique
constraint; an insert that violates it surfaces as DuplicateExerciseError.
"""

import logging
from typing import Dict, Optional

from postgrest.exceptions import APIError
from supabase import Client

from application.exceptions import DuplicateExerciseError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class SupabaseExerciseRepository:
    """
    Supabase-backed exercise catalog repository.

    Rows are append-only from the generation pipeline's point of view.
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_search_key(self, search_key: str) -> Optional[Dict]:
        """
        Get a catalog exercise by its normalized search key.

        Args:
            search_key: Normalized exercise name

        Returns:
            Exercise dictionary if found, None otherwise
        """
        response = (
            self._client.table("exercises")
            .select("*")
            .eq("search_key", search_key)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def create(self, data: Dict) -> Dict:
        """
        Insert a new catalog exercise.

        Args:
            data: Exercise data including name and search_key

        Returns:
            Created exercise dictionary with generated ID

        Raises:
            DuplicateExerciseError: If the search_key already exists
        """
        try:
            response = self._client.table("exercises").insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateExerciseError(data.get("search_key", "")) from e
            raise

        if not response.data:
            raise RuntimeError(f"Exercise insert returned no data for '{data.get('name')}'")
        return response.data[0]
