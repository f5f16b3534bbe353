"""Daily log views and trend series by timezone."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import TypeVar
from zoneinfo import ZoneInfo

from glucose_tracker.domain.entries import GlucoseReading, MealEntry
from glucose_tracker.domain.stats import DailyLog, DailyReadings, DailyTrendPoint
from glucose_tracker.services.nutrients import (
    group_by_meal_type,
    round_half_up,
    summarize,
)
from glucose_tracker.services.storage import EntryStore

EntryT = TypeVar("EntryT", MealEntry, GlucoseReading)


@dataclass
class StatsService:
    """Service for per-day log views and multi-day trends."""

    store: EntryStore

    def get_meal_log(self, day: date, timezone_name: str = "UTC") -> DailyLog:
        """Return a day's meals, newest first, with nutrient totals."""
        tz = ZoneInfo(timezone_name)
        entries = _newest_first(_on_day(self.store.list_meals(), day, tz))
        return DailyLog(
            day=day,
            entries=entries,
            by_meal_type=group_by_meal_type(entries),
            summary=summarize(entries),
        )

    def get_reading_log(
        self, day: date, timezone_name: str = "UTC"
    ) -> DailyReadings:
        """Return a day's glucose readings, newest first, with their average."""
        tz = ZoneInfo(timezone_name)
        readings = _newest_first(_on_day(self.store.list_readings(), day, tz))
        return DailyReadings(
            day=day,
            readings=readings,
            average_level=_average_level(readings) or 0.0,
        )

    def get_daily_trend(
        self,
        days: int = 7,
        timezone_name: str = "UTC",
        now: datetime | None = None,
    ) -> list[DailyTrendPoint]:
        """Return one point per day, oldest first, ending today."""
        tz = ZoneInfo(timezone_name)
        today = (now or datetime.now(tz=UTC)).astimezone(tz).date()
        readings = self.store.list_readings()
        meals = self.store.list_meals()
        points = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            points.append(
                _trend_point(
                    day, _on_day(readings, day, tz), _on_day(meals, day, tz)
                )
            )
        return points


def _on_day(entries: list[EntryT], day: date, tz: ZoneInfo) -> list[EntryT]:
    return [
        entry for entry in entries if entry.timestamp.astimezone(tz).date() == day
    ]


def _newest_first(entries: list[EntryT]) -> list[EntryT]:
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


def _average_level(readings: list[GlucoseReading]) -> float | None:
    if not readings:
        return None
    return sum(reading.level for reading in readings) / len(readings)


def _trend_point(
    day: date, readings: list[GlucoseReading], meals: list[MealEntry]
) -> DailyTrendPoint:
    average = _average_level(readings)
    nutrients = summarize(meals)
    return DailyTrendPoint(
        day=day,
        blood_sugar=round_half_up(average) if average is not None else None,
        carbs=round_half_up(nutrients.carbs) if nutrients.carbs > 0 else None,
        calories=(
            round_half_up(nutrients.calories, 0) if nutrients.calories > 0 else None
        ),
    )
