"""Domain models for logged meals and glucose readings."""

from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from glucose_tracker.domain.nutrition import Food


class MealType(StrEnum):
    """Meal classification for a food entry."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class GlucoseContext(StrEnum):
    """When a glucose reading was taken."""

    FASTING = "fasting"
    BEFORE_MEAL = "before-meal"
    AFTER_MEAL = "after-meal"
    BEDTIME = "bedtime"
    RANDOM = "random"


class MealEntry(BaseModel):
    """Logged food consumption with an embedded food snapshot."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    food: Food
    serving_size: float = Field(gt=0)
    serving_unit: str = "g"
    meal_type: MealType
    timestamp: AwareDatetime


class GlucoseReading(BaseModel):
    """Logged blood sugar measurement in mg/dL."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    level: float = Field(gt=0)
    timestamp: AwareDatetime
    notes: str | None = None
    context: GlucoseContext | None = None
