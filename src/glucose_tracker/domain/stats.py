"""Domain models for log views and trends."""

from dataclasses import dataclass
from datetime import date

from glucose_tracker.domain.entries import GlucoseReading, MealEntry, MealType
from glucose_tracker.domain.nutrition import NutrientSummary


@dataclass(frozen=True)
class DailyTrendPoint:
    """Per-day values for trend charts. None means no data that day."""

    day: date
    blood_sugar: float | None
    carbs: float | None
    calories: float | None


@dataclass(frozen=True)
class DailyLog:
    """Meals eaten on one calendar day."""

    day: date
    entries: list[MealEntry]
    by_meal_type: dict[MealType, list[MealEntry]]
    summary: NutrientSummary


@dataclass(frozen=True)
class DailyReadings:
    """Glucose readings taken on one calendar day."""

    day: date
    readings: list[GlucoseReading]
    average_level: float


@dataclass(frozen=True)
class InsightStats:
    """Figures behind the weekly insight messages."""

    reading_count: int
    average_level: float | None
    high_count: int
    low_count: int
    meal_count: int
    totals: NutrientSummary
    avg_daily_calories: float
    avg_daily_carbs: float
    carb_calorie_ratio: float | None
