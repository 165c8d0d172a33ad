"""Base calorie target and macro split from body measurements and goal."""

from wellness_engine.domain.calories import (
    BaseCalorieTarget,
    MacroTargets,
    MetabolicProfile,
)
from wellness_engine.domain.goals import GOAL_TYPES, UserGoal
from wellness_engine.units import CM_PER_INCH, KG_PER_LB

CALORIES_PER_POUND = 3500
DEFAULT_WEEKLY_GOAL_LBS = 1.0
MIN_CALORIES_MALE = 1500
MIN_CALORIES_FEMALE = 1200

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

# Grams of protein per pound of body weight.
PROTEIN_PER_LB = {"cutting": 1.0, "bulking": 0.8, "maintaining": 0.8}
CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9


def calculate_bmr(weight_lbs: float, height_inches: float, age: int, sex: str) -> float:
    """Mifflin-St Jeor basal metabolic rate."""
    weight_kg = weight_lbs * KG_PER_LB
    height_cm = height_inches * CM_PER_INCH
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if sex == "male":
        return base + 5
    if sex == "female":
        return base - 161
    raise ValueError(f"Unknown sex: {sex}")


def calculate_tdee(bmr: float, activity_level: str) -> float:
    """Total daily energy expenditure for an activity level."""
    try:
        multiplier = ACTIVITY_MULTIPLIERS[activity_level]
    except KeyError:
        raise ValueError(f"Unknown activity level: {activity_level}") from None
    return bmr * multiplier


def calculate_base_target(
    profile: MetabolicProfile, goal: UserGoal | None
) -> BaseCalorieTarget:
    """Derive the unadjusted daily calorie target.

    Cutting subtracts and bulking adds the weekly goal's calories spread over
    seven days. The result never drops below the sex-specific floor.
    """
    bmr = calculate_bmr(
        profile.weight_lbs, profile.height_inches, profile.age, profile.sex
    )
    activity_level = (
        goal.activity_level if goal and goal.activity_level else profile.activity_level
    )
    tdee = calculate_tdee(bmr, activity_level)

    daily_adjustment = 0.0
    if goal is not None and goal.goal_type != "maintaining":
        weekly_goal = abs(goal.weekly_goal or DEFAULT_WEEKLY_GOAL_LBS)
        daily_adjustment = weekly_goal * CALORIES_PER_POUND / 7
        if goal.goal_type == "cutting":
            daily_adjustment = -daily_adjustment

    floor = MIN_CALORIES_MALE if profile.sex == "male" else MIN_CALORIES_FEMALE
    daily_target = max(round(tdee + daily_adjustment), floor)
    return BaseCalorieTarget(
        bmr=round(bmr),
        tdee=round(tdee),
        daily_target=daily_target,
        weekly_target=daily_target * 7,
    )


def calculate_macros(
    total_calories: float, weight_lbs: float, goal_type: str
) -> MacroTargets:
    """Split a calorie target into protein, fat and carbohydrate grams.

    Protein scales with body weight, fat takes a fixed share of calories
    (25% when cutting, 30% otherwise) and carbs fill the remainder.
    """
    if goal_type not in GOAL_TYPES:
        raise ValueError(f"Unknown goal type: {goal_type}")
    protein_g = weight_lbs * PROTEIN_PER_LB[goal_type]
    fat_share = 0.25 if goal_type == "cutting" else 0.30
    fat_calories = total_calories * fat_share
    carb_calories = (
        total_calories - protein_g * CALORIES_PER_GRAM_PROTEIN - fat_calories
    )
    return MacroTargets(
        protein_g=round(protein_g),
        carbs_g=max(round(carb_calories / CALORIES_PER_GRAM_CARBS), 0),
        fat_g=round(fat_calories / CALORIES_PER_GRAM_FAT),
    )
