"""Weekly insights from glucose readings and meals."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from glucose_tracker.domain.entries import GlucoseReading, MealEntry
from glucose_tracker.domain.stats import InsightStats
from glucose_tracker.services.nutrients import format_nutrient_value, summarize
from glucose_tracker.services.storage import EntryStore

LOW_THRESHOLD = 70
NORMAL_MAX = 140
ELEVATED_MAX = 180
DAILY_CARBS_LIMIT = 200
CARB_RATIO_LIMIT = 50
CALORIES_PER_GRAM_CARB = 4
WINDOW_DAYS = 7

START_TRACKING_MESSAGE = (
    "Start tracking your food and blood sugar to see insights here!"
)
IN_RANGE_MESSAGE = "Great job! Your blood sugar levels have been in the normal range."
REDUCE_CARBS_MESSAGE = (
    "Consider reducing carbohydrate intake to help manage blood sugar levels."
)
HIGH_CARB_RATIO_MESSAGE = (
    "Your diet is high in carbohydrates. "
    "Try incorporating more protein and healthy fats."
)


class GlucoseStatus(StrEnum):
    """Display classification of a glucose level."""

    LOW = "Low"
    NORMAL = "Normal"
    ELEVATED = "Elevated"
    HIGH = "High"


def classify_level(level: float) -> GlucoseStatus:
    """Classify a glucose level in mg/dL."""
    if level < LOW_THRESHOLD:
        return GlucoseStatus.LOW
    if level <= NORMAL_MAX:
        return GlucoseStatus.NORMAL
    if level <= ELEVATED_MAX:
        return GlucoseStatus.ELEVATED
    return GlucoseStatus.HIGH


def in_window(timestamp: datetime, now: datetime, days: int = WINDOW_DAYS) -> bool:
    """Return True when a timestamp falls within the last ``days`` days.

    A naive ``now`` is taken as local time.
    """
    now = _as_aware(now)
    return now - timedelta(days=days) <= timestamp <= now


def compute_insight_stats(
    readings: Sequence[GlucoseReading],
    meals: Sequence[MealEntry],
    now: datetime,
    window_days: int = WINDOW_DAYS,
) -> InsightStats:
    """Compute the figures used by the insight rules."""
    now = _as_aware(now)
    levels = [r.level for r in readings if in_window(r.timestamp, now, window_days)]
    recent_meals = [m for m in meals if in_window(m.timestamp, now, window_days)]
    totals = summarize(recent_meals)

    average = sum(levels) / len(levels) if levels else None
    # exactly NORMAL_MAX classifies Normal and is not a high reading
    high_count = sum(1 for level in levels if level > NORMAL_MAX)
    low_count = sum(1 for level in levels if level < LOW_THRESHOLD)
    carb_ratio = None
    if totals.calories > 0:
        carb_ratio = totals.carbs * CALORIES_PER_GRAM_CARB / totals.calories * 100

    return InsightStats(
        reading_count=len(levels),
        average_level=average,
        high_count=high_count,
        low_count=low_count,
        meal_count=len(recent_meals),
        totals=totals,
        avg_daily_calories=totals.calories / window_days,
        avg_daily_carbs=totals.carbs / window_days,
        carb_calorie_ratio=carb_ratio,
    )


def generate_insights(
    readings: Sequence[GlucoseReading],
    meals: Sequence[MealEntry],
    now: datetime | None = None,
    window_days: int = WINDOW_DAYS,
) -> list[str]:
    """Build the ordered list of insight messages for the recent window."""
    resolved_now = now or datetime.now(tz=UTC)
    stats = compute_insight_stats(readings, meals, resolved_now, window_days)
    insights: list[str] = []

    if stats.average_level is not None:
        insights.append(
            f"Your average blood sugar over the last {window_days} days is "
            f"{format_nutrient_value(stats.average_level)} mg/dL."
        )
        if stats.high_count > 0:
            insights.append(
                f"You had {stats.high_count} high {_readings(stats.high_count)} "
                f"(>{NORMAL_MAX} mg/dL) in the past week."
            )
        if stats.low_count > 0:
            insights.append(
                f"You had {stats.low_count} low {_readings(stats.low_count)} "
                f"(<{LOW_THRESHOLD} mg/dL) in the past week. "
                "Consider adjusting your diet or medication."
            )
        if (
            LOW_THRESHOLD <= stats.average_level <= NORMAL_MAX
            and stats.high_count == 0
            and stats.low_count == 0
        ):
            insights.append(IN_RANGE_MESSAGE)

    if stats.meal_count > 0:
        calories = format_nutrient_value(stats.avg_daily_calories, 0)
        carbs = format_nutrient_value(stats.avg_daily_carbs, 0)
        insights.append(
            f"Your average daily intake is {calories} calories and {carbs}g carbs."
        )
        if stats.avg_daily_carbs > DAILY_CARBS_LIMIT:
            insights.append(REDUCE_CARBS_MESSAGE)
        if (
            stats.carb_calorie_ratio is not None
            and stats.carb_calorie_ratio > CARB_RATIO_LIMIT
        ):
            insights.append(HIGH_CARB_RATIO_MESSAGE)

    if not insights:
        insights.append(START_TRACKING_MESSAGE)
    return insights


def _as_aware(moment: datetime) -> datetime:
    return moment.astimezone() if moment.tzinfo is None else moment


def _readings(count: int) -> str:
    return "reading" if count == 1 else "readings"


@dataclass
class InsightService:
    """Service producing insights from the entry store."""

    store: EntryStore

    def get_stats(self, now: datetime | None = None) -> InsightStats:
        """Return the figures behind the current insights."""
        return compute_insight_stats(
            self.store.list_readings(),
            self.store.list_meals(),
            now or datetime.now(tz=UTC),
        )

    def get_insights(self, now: datetime | None = None) -> list[str]:
        """Return insight messages for the last week."""
        return generate_insights(
            self.store.list_readings(), self.store.list_meals(), now
        )
