"""
Application-layer exceptions.

These exceptions are used across the services, infrastructure and API layers.
Each generation error carries the HTTP status class it maps to and a short,
stable message that is safe to show to callers. Internal detail stays in the
exception message and goes to the logs only.
"""

from typing import List, Optional


class WorkoutGenerationError(Exception):
    """Base class for failures of the generation pipeline."""

    status_code: int = 500
    public_message: str = "Failed to generate workout"

    def __init__(self, message: Optional[str] = None, public_message: Optional[str] = None):
        super().__init__(message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class RequestValidationError(WorkoutGenerationError):
    """Malformed or out-of-range generation request. Rejected before any model call."""

    status_code = 400
    public_message = "Invalid workout generation request"


class QuotaExceededError(WorkoutGenerationError):
    """The principal has used up its generations for the current window."""

    status_code = 429
    public_message = "Generation limit reached. Please try again later."


class ModelTransportError(WorkoutGenerationError):
    """Timeout or transport failure while calling the generative model. Never retried."""

    public_message = "The workout generator is unavailable. Please try again."


class ModelOutputError(WorkoutGenerationError):
    """
    Model response is not valid JSON or fails schema validation.

    Triggers exactly one retry with a stricter prompt.
    """

    public_message = "The workout generator returned an invalid workout. Please try again."

    def __init__(
        self,
        message: Optional[str] = None,
        raw_responses: Optional[List[str]] = None,
        public_message: Optional[str] = None,
    ):
        super().__init__(message, public_message)
        self.raw_responses: List[str] = list(raw_responses or [])


class CatalogResolutionError(WorkoutGenerationError):
    """Exercise catalog insert failed for a reason other than a uniqueness conflict."""

    public_message = "Failed to save exercises"


class PersistenceError(WorkoutGenerationError):
    """Workout or exercise-link insert failed. Any inserted workout row has been rolled back."""

    public_message = "Failed to save workout"


class SummaryRecomputeError(WorkoutGenerationError):
    """Writing derived summary fields failed. Logged, never surfaced."""

    public_message = "Failed to update workout summary"


class DuplicateExerciseError(Exception):
    """A catalog insert lost a race: a row with the same search key already exists."""

    def __init__(self, search_key: str):
        super().__init__(f"Exercise with search key '{search_key}' already exists")
        self.search_key = search_key
