"""
Exercise resolver service.

Maps each exercise proposed by the model onto a canonical row of the shared
exercise catalog, creating the row when it does not exist yet. Two concurrent
generations that propose the same exercise end up with the same catalog row.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Dict, List, Optional

from application.exceptions import CatalogResolutionError, DuplicateExerciseError
from application.ports import ExerciseRepository
from core.search_key import DEFAULT_EQUIPMENT, create_search_key, infer_equipment
from models.workout import CatalogExercise, MovementType
from services.llm.schemas import ProposedExercise

logger = logging.getLogger(__name__)


@dataclass
class ResolvedExercise:
    """A proposed exercise paired with the catalog entry it resolved to."""

    proposed: ProposedExercise
    exercise: CatalogExercise
    created: bool = False


def catalog_exercise_from_row(row: Dict) -> CatalogExercise:
    """Convert a catalog row into a CatalogExercise."""
    movement_type = row.get("movement_type")
    if movement_type not in {m.value for m in MovementType}:
        movement_type = None

    return CatalogExercise(
        id=str(row["id"]) if row.get("id") is not None else None,
        name=row.get("name") or "",
        search_key=row.get("search_key") or create_search_key(row.get("name") or ""),
        primary_muscles=row.get("primary_muscles") or [],
        secondary_muscles=row.get("secondary_muscles") or [],
        equipment=row.get("equipment") or DEFAULT_EQUIPMENT,
        movement_type=movement_type,
    )


class ExerciseResolver:
    """
    Resolves proposed exercises against the exercise catalog.

    Lookup is by normalized search key. A uniqueness conflict on insert means
    another request created the row first; the resolver re-reads and uses it.
    Any other failure yields a non-persisted placeholder, or aborts when
    strict mode is on.
    """

    def __init__(
        self,
        exercise_repo: ExerciseRepository,
        strict: bool = False,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Initialize the resolver.

        Args:
            exercise_repo: Repository for the exercise catalog
            strict: Raise CatalogResolutionError instead of returning a placeholder
            executor: Thread pool for blocking repository calls, the event
                loop's default executor when None
        """
        self._exercise_repo = exercise_repo
        self._strict = strict
        self._executor = executor

    def resolve(self, proposed: ProposedExercise) -> ResolvedExercise:
        """
        Resolve one proposed exercise to a catalog entry.

        Args:
            proposed: Exercise proposed by the model

        Returns:
            ResolvedExercise; created is True only if this call inserted the row

        Raises:
            CatalogResolutionError: If the catalog is unavailable and strict mode is on
        """
        search_key = create_search_key(proposed.name)
        if not search_key:
            return self._degrade(proposed, search_key, "exercise name has no searchable characters")

        try:
            existing = self._exercise_repo.get_by_search_key(search_key)
            if existing:
                return ResolvedExercise(proposed, catalog_exercise_from_row(existing))

            created = self._exercise_repo.create(self._build_row(proposed, search_key))
            logger.info(f"Created catalog exercise '{proposed.name}' ({search_key})")
            return ResolvedExercise(proposed, catalog_exercise_from_row(created), created=True)

        except DuplicateExerciseError:
            logger.info(f"Catalog conflict on '{search_key}', using existing row")
            try:
                winner = self._exercise_repo.get_by_search_key(search_key)
            except Exception as e:
                return self._degrade(proposed, search_key, f"re-query after conflict failed: {e}")
            if winner:
                return ResolvedExercise(proposed, catalog_exercise_from_row(winner))
            return self._degrade(proposed, search_key, "conflicting row not found on re-query")

        except Exception as e:
            return self._degrade(proposed, search_key, str(e))

    async def resolve_all(self, proposed: List[ProposedExercise]) -> List[ResolvedExercise]:
        """
        Resolve every proposed exercise concurrently.

        Args:
            proposed: Exercises in workout order

        Returns:
            Resolved exercises in the same order as the input
        """
        loop = asyncio.get_event_loop()
        return list(
            await asyncio.gather(
                *(
                    loop.run_in_executor(self._executor, partial(self.resolve, exercise))
                    for exercise in proposed
                )
            )
        )

    def _build_row(self, proposed: ProposedExercise, search_key: str) -> Dict:
        equipment = proposed.equipment or infer_equipment(proposed.name)

        return {
            "name": proposed.name,
            "search_key": search_key,
            "primary_muscles": proposed.primary_muscles or [],
            "secondary_muscles": proposed.secondary_muscles or [],
            "equipment": equipment,
            "movement_type": proposed.movement_type.value if proposed.movement_type else None,
        }

    def _degrade(self, proposed: ProposedExercise, search_key: str, reason: str) -> ResolvedExercise:
        """Fall back to a placeholder, or abort in strict mode."""
        if self._strict:
            raise CatalogResolutionError(
                f"Failed to resolve exercise '{proposed.name}': {reason}"
            )

        logger.error(f"Using placeholder for exercise '{proposed.name}': {reason}")
        row = self._build_row(proposed, search_key)
        placeholder = CatalogExercise(
            id=None,
            name=row["name"],
            search_key=row["search_key"],
            primary_muscles=row["primary_muscles"],
            secondary_muscles=row["secondary_muscles"],
            equipment=row["equipment"],
            movement_type=row["movement_type"],
            is_placeholder=True,
        )
        return ResolvedExercise(proposed, placeholder)
