"""Nutrient aggregation over meal entries."""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from glucose_tracker.domain.entries import MealEntry, MealType
from glucose_tracker.domain.nutrition import NutrientSummary

NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "fiber": 1079,
    "sugar": 2000,
}


def scale_to_serving(value_per_100g: float, serving_size_g: float) -> float:
    """Scale a per-100g nutrient value to a serving size in grams."""
    return value_per_100g * serving_size_g / 100


def get_nutrient_value(entry: MealEntry, nutrient_id: int) -> float:
    """Return a nutrient amount for an entry's serving, or 0 if the food lacks it."""
    for nutrient in entry.food.food_nutrients:
        if nutrient.nutrient_id == nutrient_id:
            # negative source values count as absent
            return max(0.0, scale_to_serving(nutrient.value, entry.serving_size))
    return 0.0


def summarize(entries: Iterable[MealEntry]) -> NutrientSummary:
    """Sum the tracked nutrients across meal entries."""
    totals = dict.fromkeys(NUTRIENT_IDS, 0.0)
    for entry in entries:
        for name, nutrient_id in NUTRIENT_IDS.items():
            totals[name] += get_nutrient_value(entry, nutrient_id)
    return NutrientSummary(**totals)


def group_by_meal_type(
    entries: Iterable[MealEntry],
) -> dict[MealType, list[MealEntry]]:
    """Group entries by meal type, keeping input order within each group."""
    grouped: dict[MealType, list[MealEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.meal_type, []).append(entry)
    return grouped


def round_half_up(value: float, decimals: int = 1) -> float:
    """Round to a number of decimals with halves rounded away from zero."""
    return float(_quantize(value, decimals))


def format_nutrient_value(value: float, decimals: int = 1) -> str:
    """Format a nutrient amount for display, rounding halves up."""
    return f"{_quantize(value, decimals):f}"


def _quantize(value: float, decimals: int) -> Decimal:
    return Decimal(str(value)).quantize(
        Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP
    )
