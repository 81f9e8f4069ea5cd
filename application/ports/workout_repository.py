"""
Workout Repository Interface (Port).

This module defines the abstract interface for persisting generated workouts
and their ordered exercise links. Implementations may use Supabase,
in-memory storage, or other backends.
"""
from typing import Any, Dict, List, Optional, Protocol


class WorkoutRepository(Protocol):
    """
    Abstract interface for workout persistence operations.

    Covers the workouts table and its workout_exercises join table.
    Deleting a workout cascades to its workout_exercises rows.
    """

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a workout row.

        Args:
            data: Workout column values

        Returns:
            Created workout record with generated id
        """
        ...

    def add_exercises(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert workout_exercises rows in a single batch.

        Either every row is inserted or none is.

        Args:
            rows: Link rows, each with workout_id, exercise_id and order_index

        Returns:
            Created link records in the order given
        """
        ...

    def update(self, workout_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update columns of an existing workout.

        Args:
            workout_id: Workout UUID
            data: Columns to update

        Returns:
            Updated workout record
        """
        ...

    def delete(self, workout_id: str) -> bool:
        """
        Delete a workout and, by cascade, its exercise links.

        Args:
            workout_id: Workout UUID

        Returns:
            True if deleted, False if not found
        """
        ...

    def get_by_id(self, workout_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a workout by its ID.

        Args:
            workout_id: Workout UUID

        Returns:
            Workout record or None if not found
        """
        ...

    def get_exercises(self, workout_id: str) -> List[Dict[str, Any]]:
        """
        Get the exercise links of a workout ordered by order_index.

        Args:
            workout_id: Workout UUID

        Returns:
            List of workout_exercises records
        """
        ...
