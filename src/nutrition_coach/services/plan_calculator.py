"""Nutrition plan calculator.

Converts an onboarding profile into a daily calorie, macro and water
prescription in five stages:

1. unit normalization (height to cm, weight to kg)
2. BMR (Mifflin-St Jeor)
3. TDEE (activity multiplier)
4. target calories (activity/timeline deficit or one-month weight delta)
5. macro split and water target

Every stage is a pure function. Unparseable numeric strings become NaN and
flow through the arithmetic instead of raising; callers check
``NutritionPlan.is_complete`` before storing a plan.
"""

import math
import re

from nutrition_coach.domain.plan import (
    CARB_FLOOR,
    WATER_SIMPLIFIED,
    WEIGHT_DELTA,
    NutritionPlan,
    PlanNumber,
    PlanOptions,
)
from nutrition_coach.domain.profile import UserProfileInput

CM_PER_INCH = 2.54
CM_PER_FOOT = 30.48
KG_PER_LB = 0.453592
KCAL_PER_KG_BODY_MASS = 7700
WEIGHT_DELTA_HORIZON_DAYS = 30

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "lightly-active": 1.375,
    "moderately-active": 1.55,
    "very-active": 1.725,
    "extremely-active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

DEFICITS = {"aggressive": 750, "moderate": 500, "gradual": 250}
DEFAULT_DEFICIT = 500
SURPLUSES = {"aggressive": 500, "moderate": 300, "gradual": 200}
DEFAULT_SURPLUS = 300

MIN_CALORIES_MALE = 1500
MIN_CALORIES_OTHER = 1200
MAX_DEFICIT_KCAL = 1000
MAX_DEFICIT_FRACTION = 0.25

PROTEIN_PER_KG = {"weight-loss": 2.0, "muscle-gain": 2.2}
DEFAULT_PROTEIN_PER_KG = 1.6
FAT_FRACTION = 0.25
MIN_CARB_CALORIES = 400
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

WATER_ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.0,
    "lightly-active": 1.1,
    "moderately-active": 1.2,
    "very-active": 1.3,
    "extremely-active": 1.4,
}
WATER_GOAL_LITRES = {"weight-loss": 0.5, "muscle-gain": 0.75}
WATER_GENDER_FACTORS = {"female": 0.9, "other": 0.95, "prefer-not-to-say": 0.95}
MIN_WATER_LITRES = 2.0
MAX_WATER_LITRES = 4.5
MIDDLE_AGE_START = 31
MIDDLE_AGE_END = 50
OLDER_AGE_START = 51

_NUMERIC_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_decimal(value: object) -> float:
    """Parse the leading number of a form value, or NaN when there is none."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int | float):
        return float(value)
    if not isinstance(value, str):
        return math.nan
    match = _NUMERIC_PREFIX.match(value)
    if match is None:
        return math.nan
    return float(match.group(1))


def round_half_up(value: float) -> PlanNumber:
    """Round to the nearest integer with halves going up; NaN stays NaN."""
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def _at_least(value: float, minimum: float) -> float:
    if math.isnan(value):
        return value
    return max(value, minimum)


def _at_most(value: float, maximum: float) -> float:
    if math.isnan(value):
        return value
    return min(value, maximum)


def _key(value: str | None) -> str:
    return (value or "").strip().lower()


def height_to_cm(height: str, unit: str) -> float:
    """Convert a height entry to centimetres.

    Feet entries accept ``5'10``, ``5.10`` (5 ft 10 in) and plain feet.
    """
    if _key(unit) == "cm":
        return parse_decimal(height)

    cleaned = str(height).replace('"', "").strip()
    if "'" in cleaned:
        feet_part, _, inches_part = cleaned.partition("'")
        feet = parse_decimal(feet_part)
        inches = parse_decimal(inches_part) if inches_part.strip() else 0.0
        return (feet * 12 + inches) * CM_PER_INCH
    if "." in cleaned:
        feet_part, _, inches_part = cleaned.partition(".")
        feet = parse_decimal(feet_part) if feet_part.strip() else 0.0
        inches = parse_decimal(inches_part) if inches_part.strip() else 0.0
        return (feet * 12 + inches) * CM_PER_INCH
    return parse_decimal(cleaned) * CM_PER_FOOT


def weight_to_kg(weight: str, unit: str) -> float:
    """Convert a weight entry to kilograms."""
    value = parse_decimal(weight)
    if _key(unit) == "kg":
        return value
    return value * KG_PER_LB


def calculate_bmr(
    weight_kg: float, height_cm: float, age: float, gender: str
) -> float:
    """Mifflin-St Jeor basal metabolic rate in kcal/day."""
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    male = base + 5
    female = base - 161
    gender_key = _key(gender)
    if gender_key == "male":
        return male
    if gender_key in {"other", "prefer-not-to-say"}:
        return (male + female) / 2
    return female


def calculate_tdee(bmr: float, activity_level: str) -> float:
    """Scale BMR by the activity multiplier."""
    multiplier = ACTIVITY_MULTIPLIERS.get(
        _key(activity_level), DEFAULT_ACTIVITY_MULTIPLIER
    )
    return bmr * multiplier


def target_calories_activity_deficit(
    tdee: float, goal: str, timeline: str, gender: str
) -> PlanNumber:
    """Deficit/surplus by timeline, clamped to safe minimums."""
    goal_key = _key(goal)
    target = tdee
    if goal_key == "weight-loss":
        target = tdee - DEFICITS.get(_key(timeline), DEFAULT_DEFICIT)
    elif goal_key == "muscle-gain":
        target = tdee + SURPLUSES.get(_key(timeline), DEFAULT_SURPLUS)

    minimum = MIN_CALORIES_MALE if _key(gender) == "male" else MIN_CALORIES_OTHER
    target = _at_least(target, minimum)
    max_deficit = min(MAX_DEFICIT_KCAL, tdee * MAX_DEFICIT_FRACTION)
    target = _at_least(target, tdee - max_deficit)
    return round_half_up(target)


def target_calories_weight_delta(
    tdee: float, goal: str, current_weight_kg: float, target_weight_kg: float
) -> PlanNumber:
    """Spread the calories of the target weight change over thirty days.

    No safety clamp applies here.
    """
    if _key(goal) == "maintenance":
        return round_half_up(tdee)
    weight_delta_kg = target_weight_kg - current_weight_kg
    daily_delta = (
        weight_delta_kg * KCAL_PER_KG_BODY_MASS / WEIGHT_DELTA_HORIZON_DAYS
    )
    return round_half_up(tdee + daily_delta)


def calculate_macros(
    target_calories: float,
    weight_kg: float,
    goal: str,
    carb_mode: str = CARB_FLOOR,
) -> dict[str, PlanNumber]:
    """Protein by body weight, fat at a fixed share, carbs as remainder."""
    per_kg = PROTEIN_PER_KG.get(_key(goal), DEFAULT_PROTEIN_PER_KG)
    protein_grams = round_half_up(weight_kg * per_kg)
    protein_calories = protein_grams * KCAL_PER_G_PROTEIN

    fat_calories = round_half_up(target_calories * FAT_FRACTION)
    fat_grams = round_half_up(fat_calories / KCAL_PER_G_FAT)

    carb_calories = target_calories - protein_calories - fat_calories
    if carb_mode == CARB_FLOOR:
        carb_calories = _at_least(carb_calories, MIN_CARB_CALORIES)
    carb_grams = _at_least(round_half_up(carb_calories / KCAL_PER_G_CARBS), 0)

    total = protein_calories + carb_calories + fat_calories
    if total == 0 or not math.isfinite(total):
        percentages = (0, 0, 0)
    else:
        percentages = (
            round_half_up(protein_calories / total * 100),
            round_half_up(carb_calories / total * 100),
            round_half_up(fat_calories / total * 100),
        )

    return {
        "protein_grams": protein_grams,
        "carbs_grams": carb_grams,
        "fats_grams": fat_grams,
        "protein_calories": protein_calories,
        "carbs_calories": round_half_up(carb_calories),
        "fats_calories": fat_calories,
        "protein_percentage": percentages[0],
        "carbs_percentage": percentages[1],
        "fats_percentage": percentages[2],
    }


def calculate_water_target(  # noqa: PLR0913
    weight_kg: float,
    activity_level: str,
    goal: str,
    age: float,
    gender: str,
    variant: str = "extended",
) -> PlanNumber:
    """Daily water target in millilitres."""
    litres = weight_kg / 30
    litres *= WATER_ACTIVITY_MULTIPLIERS.get(_key(activity_level), 1.0)
    litres += WATER_GOAL_LITRES.get(_key(goal), 0.0)
    if variant == WATER_SIMPLIFIED:
        return round_half_up(litres * 1000)

    if MIDDLE_AGE_START <= age <= MIDDLE_AGE_END:
        litres += 0.25
    elif age >= OLDER_AGE_START:
        litres += 0.5
    litres *= WATER_GENDER_FACTORS.get(_key(gender), 1.0)
    litres = _at_most(_at_least(litres, MIN_WATER_LITRES), MAX_WATER_LITRES)
    return round_half_up(litres * 1000)


def generate_nutrition_plan(
    profile: UserProfileInput, options: PlanOptions | None = None
) -> NutritionPlan:
    """Run the full calculator pipeline for a profile."""
    resolved = options or PlanOptions()
    weight_kg = weight_to_kg(profile.weight, profile.weight_unit)
    height_cm = height_to_cm(profile.height, profile.height_unit)
    age = parse_decimal(profile.age)

    bmr = calculate_bmr(weight_kg, height_cm, age, profile.gender)
    tdee = calculate_tdee(bmr, profile.activity_level)

    if resolved.calorie_policy == WEIGHT_DELTA:
        target_weight_kg = weight_to_kg(profile.target_weight, profile.weight_unit)
        target_calories = target_calories_weight_delta(
            tdee, profile.primary_goal, weight_kg, target_weight_kg
        )
    else:
        target_calories = target_calories_activity_deficit(
            tdee, profile.primary_goal, profile.timeline, profile.gender
        )

    macros = calculate_macros(
        target_calories, weight_kg, profile.primary_goal, resolved.carb_mode
    )
    water_target = calculate_water_target(
        weight_kg,
        profile.activity_level,
        profile.primary_goal,
        age,
        profile.gender,
        resolved.water_variant,
    )
    return NutritionPlan(
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        target_calories=target_calories,
        water_target=water_target,
        **macros,
    )
