"""Entry store over a key-value backend."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from glucose_tracker.domain.entries import GlucoseReading, MealEntry
from glucose_tracker.domain.errors import StorageReadError, ValidationError

MEAL_ENTRIES_KEY = "meal_entries"
GLUCOSE_READINGS_KEY = "glucose_readings"

_logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", MealEntry, GlucoseReading)


class KeyValueStore(Protocol):
    """Interface for a string key-value backend."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any.

        Raises StorageReadError when the stored bytes cannot be read as text.
        """

    def set(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store for tests and throwaway sessions."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        self.values[key] = value

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self.values.pop(key, None)


def encode_entries(model: type[EntryT], entries: Sequence[EntryT]) -> str:
    """Serialize entries to a JSON array with ISO-8601 timestamps."""
    adapter = TypeAdapter(list[model])
    return adapter.dump_json(list(entries), by_alias=True).decode("utf-8")


def decode_entries(model: type[EntryT], raw: str | None) -> list[EntryT]:
    """Parse a JSON array of entries. A missing slot is an empty collection."""
    if raw is None or not raw.strip():
        return []
    adapter = TypeAdapter(list[model])
    try:
        return adapter.validate_json(raw)
    except PydanticValidationError as exc:
        raise StorageReadError(
            f"Malformed {model.__name__} data: {exc.error_count()} errors"
        ) from exc


@dataclass
class EntryCollection(Generic[EntryT]):
    """Read-whole, write-whole collection stored under a single key."""

    store: KeyValueStore
    key: str
    model: type[EntryT]

    def list_all(self) -> list[EntryT]:
        """Return all entries in stored order."""
        try:
            raw = self.store.get(self.key)
            return decode_entries(self.model, raw)
        except StorageReadError as exc:
            _logger.warning("Discarding unreadable collection %s: %s", self.key, exc)
            return []

    def save(self, entry: EntryT) -> None:
        """Append an entry. Ids must be unique within the collection."""
        entries = self.list_all()
        if any(existing.id == entry.id for existing in entries):
            raise ValidationError(f"Entry {entry.id} already exists in {self.key}")
        entries.append(entry)
        self._write(entries)

    def delete(self, entry_id: str) -> bool:
        """Remove an entry by id. Returns True when something was removed."""
        entries = self.list_all()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self._write(remaining)
        return True

    def update(self, entry_id: str, entry: EntryT) -> bool:
        """Replace an entry in place. Returns False when the id is unknown."""
        if entry.id != entry_id:
            raise ValidationError(
                f"Replacement id {entry.id} does not match {entry_id}"
            )
        entries = self.list_all()
        for index, existing in enumerate(entries):
            if existing.id == entry_id:
                entries[index] = entry
                self._write(entries)
                return True
        return False

    def clear(self) -> None:
        """Remove the whole collection."""
        self.store.delete(self.key)

    def _write(self, entries: list[EntryT]) -> None:
        self.store.set(self.key, encode_entries(self.model, entries))
        _logger.debug("Wrote %s entries to %s", len(entries), self.key)


@dataclass
class EntryStore:
    """Persistence for meal entries and glucose readings."""

    meals: EntryCollection[MealEntry]
    readings: EntryCollection[GlucoseReading]

    @classmethod
    def create(cls, store: KeyValueStore) -> "EntryStore":
        """Create an entry store with both collections on one backend."""
        return cls(
            meals=EntryCollection(store, MEAL_ENTRIES_KEY, MealEntry),
            readings=EntryCollection(store, GLUCOSE_READINGS_KEY, GlucoseReading),
        )

    def list_meals(self) -> list[MealEntry]:
        """Return all meal entries."""
        return self.meals.list_all()

    def save_meal(self, entry: MealEntry) -> None:
        """Persist a new meal entry."""
        self.meals.save(entry)

    def delete_meal(self, entry_id: str) -> bool:
        """Delete a meal entry by id."""
        return self.meals.delete(entry_id)

    def update_meal(self, entry_id: str, entry: MealEntry) -> bool:
        """Replace a meal entry, keeping its position."""
        return self.meals.update(entry_id, entry)

    def list_readings(self) -> list[GlucoseReading]:
        """Return all glucose readings."""
        return self.readings.list_all()

    def save_reading(self, reading: GlucoseReading) -> None:
        """Persist a new glucose reading."""
        self.readings.save(reading)

    def delete_reading(self, reading_id: str) -> bool:
        """Delete a glucose reading by id."""
        return self.readings.delete(reading_id)

    def update_reading(self, reading_id: str, reading: GlucoseReading) -> bool:
        """Replace a glucose reading, keeping its position."""
        return self.readings.update(reading_id, reading)

    def clear_all(self) -> None:
        """Remove both collections."""
        self.meals.clear()
        self.readings.clear()
