"""
Supabase implementation of WorkoutRepository.

Generated workouts live in the workouts table; their ordered exercise links
live in workout_exercises, which cascades on workout delete.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseWorkoutRepository:
    """
    Supabase-backed workout repository implementation.

    Errors from the client propagate; the persistence coordinator decides
    whether they are fatal.
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Supabase client (service role key, bypasses RLS)
        """
        self._client = client

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a workout row and return it with its generated id."""
        response = self._client.table("workouts").insert(data).execute()
        if not response.data:
            raise RuntimeError("Workout insert returned no data")
        logger.info(f"Workout created for user {data.get('user_id')}, id: {response.data[0].get('id')}")
        return response.data[0]

    def add_exercises(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert workout_exercises rows as one batch.

        PostgREST runs a bulk insert in a single statement, so either every
        row is inserted or none is.
        """
        if not rows:
            return []
        response = self._client.table("workout_exercises").insert(rows).execute()
        if not response.data or len(response.data) != len(rows):
            raise RuntimeError(
                f"Expected {len(rows)} workout_exercises rows, got {len(response.data or [])}"
            )
        return response.data

    def update(self, workout_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update workout columns and return the updated row."""
        response = (
            self._client.table("workouts")
            .update(data)
            .eq("id", workout_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Workout {workout_id} not found for update")
        return response.data[0]

    def delete(self, workout_id: str) -> bool:
        """Delete a workout; its exercise links are removed by cascade."""
        response = (
            self._client.table("workouts")
            .delete()
            .eq("id", workout_id)
            .execute()
        )
        return bool(response.data)

    def get_by_id(self, workout_id: str) -> Optional[Dict[str, Any]]:
        """Get a workout by ID."""
        response = (
            self._client.table("workouts")
            .select("*")
            .eq("id", workout_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def get_exercises(self, workout_id: str) -> List[Dict[str, Any]]:
        """Get the exercise links of a workout in order."""
        response = (
            self._client.table("workout_exercises")
            .select("*")
            .eq("workout_id", workout_id)
            .order("order_index")
            .execute()
        )
        return response.data
