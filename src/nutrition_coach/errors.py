"""Domain error types."""

from collections.abc import Sequence


class NutritionCoachError(Exception):
    """Base class for domain errors."""


class InvalidProfileError(NutritionCoachError):
    """Raised when a profile yields a plan with non-finite values."""

    def __init__(self, invalid_fields: Sequence[str]) -> None:
        self.invalid_fields = tuple(invalid_fields)
        super().__init__(
            "Profile produced an incomplete plan: " + ", ".join(self.invalid_fields)
        )


class ProfileNotFoundError(NutritionCoachError):
    """Raised when a user has not completed onboarding."""


class PlanNotFoundError(NutritionCoachError):
    """Raised when a user has no current nutrition plan."""


class PredictionUnavailableError(NutritionCoachError):
    """Raised when there is not enough data to predict weight."""


class PredictionFormatError(NutritionCoachError):
    """Raised when the prediction model returns unusable output."""
