"""Composing and logging meal entries and glucose readings."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeVar
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from glucose_tracker.domain.entries import (
    GlucoseContext,
    GlucoseReading,
    MealEntry,
    MealType,
)
from glucose_tracker.domain.errors import ValidationError
from glucose_tracker.domain.nutrition import Food
from glucose_tracker.services.storage import EntryStore

_logger = logging.getLogger(__name__)

_ChoiceT = TypeVar("_ChoiceT", MealType, GlucoseContext)
_ModelT = TypeVar("_ModelT", MealEntry, GlucoseReading)


def parse_positive_number(raw: object, field_name: str) -> float:
    """Parse user input as a strictly positive, finite number."""
    if isinstance(raw, bool):
        raise ValidationError(f"Please enter a valid {field_name}.")
    if isinstance(raw, int | float):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError as exc:
            raise ValidationError(f"Please enter a valid {field_name}.") from exc
    else:
        raise ValidationError(f"Please enter a valid {field_name}.")
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"Please enter a valid {field_name}.")
    return value


@dataclass
class EntryLogService:
    """Validates user input and writes entries to the store."""

    store: EntryStore

    def log_meal(  # noqa: PLR0913
        self,
        food: Food,
        serving_size: object,
        meal_type: MealType | str,
        timestamp: datetime | None = None,
        entry_id: str | None = None,
    ) -> MealEntry:
        """Create and persist a meal entry for a selected food."""
        size = parse_positive_number(serving_size, "serving size")
        resolved_type = _parse_choice(MealType, meal_type, "meal type")
        entry = _build(
            MealEntry,
            id=entry_id or str(uuid4()),
            food=food.model_copy(deep=True),
            serving_size=size,
            meal_type=resolved_type,
            timestamp=timestamp or datetime.now(tz=UTC),
        )
        self.store.save_meal(entry)
        _logger.debug("Logged meal %s (fdc_id=%s)", entry.id, food.fdc_id)
        return entry

    def change_serving_size(
        self, entry_id: str, serving_size: object
    ) -> MealEntry | None:
        """Replace a meal entry with a new serving size."""
        size = parse_positive_number(serving_size, "serving size")
        current = next(
            (entry for entry in self.store.list_meals() if entry.id == entry_id),
            None,
        )
        if current is None:
            return None
        updated = current.model_copy(update={"serving_size": size})
        self.store.update_meal(entry_id, updated)
        return updated

    def delete_meal(self, entry_id: str) -> bool:
        """Delete a meal entry."""
        return self.store.delete_meal(entry_id)

    def log_reading(  # noqa: PLR0913
        self,
        level: object,
        context: GlucoseContext | str | None = None,
        notes: str | None = None,
        timestamp: datetime | None = None,
        entry_id: str | None = None,
    ) -> GlucoseReading:
        """Create and persist a glucose reading."""
        value = parse_positive_number(level, "blood sugar level")
        resolved_context = (
            _parse_choice(GlucoseContext, context, "reading context")
            if context
            else None
        )
        reading = _build(
            GlucoseReading,
            id=entry_id or str(uuid4()),
            level=value,
            timestamp=timestamp or datetime.now(tz=UTC),
            notes=notes.strip() if notes and notes.strip() else None,
            context=resolved_context,
        )
        self.store.save_reading(reading)
        _logger.debug("Logged glucose reading %s", reading.id)
        return reading

    def delete_reading(self, reading_id: str) -> bool:
        """Delete a glucose reading."""
        return self.store.delete_reading(reading_id)


def _parse_choice(
    choices: type[_ChoiceT], value: object, field_name: str
) -> _ChoiceT:
    try:
        return choices(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown {field_name}: {value}") from exc


def _build(model: type[_ModelT], **fields: object) -> _ModelT:
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc
