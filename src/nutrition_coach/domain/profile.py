"""Domain models for user profiles collected at onboarding."""

from dataclasses import asdict, dataclass

GENDERS = ("male", "female", "other", "prefer-not-to-say")
HEIGHT_UNITS = ("cm", "ft")
WEIGHT_UNITS = ("lbs", "kg")
ACTIVITY_LEVELS = (
    "sedentary",
    "lightly-active",
    "moderately-active",
    "very-active",
    "extremely-active",
)
GOALS = ("weight-loss", "muscle-gain", "maintenance")
TIMELINES = ("aggressive", "moderate", "gradual")


@dataclass(frozen=True)
class UserProfileInput:
    """Profile answers as captured by the onboarding form.

    Numeric values are carried as strings, the way the form submits them;
    the plan calculator parses them.
    """

    age: int | str
    gender: str
    height: str
    height_unit: str
    weight: str
    weight_unit: str
    activity_level: str
    primary_goal: str
    target_weight: str = ""
    timeline: str = "moderate"

    def to_dict(self) -> dict[str, object]:
        """Return a plain dict suitable for persistence."""
        return asdict(self)

    @classmethod
    def from_dict(cls, row: dict[str, object]) -> "UserProfileInput":
        """Build a profile from a persisted row, ignoring unknown keys."""
        return cls(
            age=row.get("age", ""),  # type: ignore[arg-type]
            gender=str(row.get("gender") or ""),
            height=str(row.get("height") or ""),
            height_unit=str(row.get("height_unit") or "cm"),
            weight=str(row.get("weight") or ""),
            weight_unit=str(row.get("weight_unit") or "kg"),
            activity_level=str(row.get("activity_level") or ""),
            primary_goal=str(row.get("primary_goal") or ""),
            target_weight=str(row.get("target_weight") or ""),
            timeline=str(row.get("timeline") or "moderate"),
        )
