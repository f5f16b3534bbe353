"""Shared test fixtures."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from glucose_tracker.adapters.fdc_client import FdcClient
from glucose_tracker.config import Settings
from glucose_tracker.domain.entries import GlucoseReading, MealEntry, MealType
from glucose_tracker.domain.errors import RequestError
from glucose_tracker.domain.nutrition import Food, FoodNutrient
from glucose_tracker.services.storage import EntryStore, InMemoryKeyValueStore

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


def make_food(  # noqa: PLR0913
    fdc_id: int = 171077,
    description: str = "Chicken, broilers or fryers, breast",
    calories: float | None = 165,
    carbs: float | None = 0,
    protein: float | None = 31,
    fat: float | None = 3.6,
    fiber: float | None = None,
    sugar: float | None = None,
) -> Food:
    """Build a food with per-100g nutrients; None leaves a nutrient out."""
    values = [
        (1008, "Energy", "KCAL", calories),
        (1005, "Carbohydrate, by difference", "G", carbs),
        (1003, "Protein", "G", protein),
        (1004, "Total lipid (fat)", "G", fat),
        (1079, "Fiber, total dietary", "G", fiber),
        (2000, "Total Sugars", "G", sugar),
    ]
    return Food(
        fdc_id=fdc_id,
        description=description,
        data_type="SR Legacy",
        food_nutrients=[
            FoodNutrient(
                nutrient_id=nutrient_id,
                nutrient_name=name,
                unit_name=unit,
                value=value,
            )
            for nutrient_id, name, unit, value in values
            if value is not None
        ],
    )


def make_meal(
    entry_id: str = "meal-1",
    food: Food | None = None,
    serving_size: float = 100,
    meal_type: MealType = MealType.LUNCH,
    timestamp: datetime = NOW,
) -> MealEntry:
    return MealEntry(
        id=entry_id,
        food=food or make_food(),
        serving_size=serving_size,
        meal_type=meal_type,
        timestamp=timestamp,
    )


def make_reading(
    level: float,
    entry_id: str | None = None,
    timestamp: datetime = NOW,
) -> GlucoseReading:
    return GlucoseReading(
        id=entry_id or f"reading-{level}",
        level=level,
        timestamp=timestamp,
    )


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "totalHits": 2,
            "currentPage": 1,
            "totalPages": 1,
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broilers or fryers, breast",
                    "dataType": "SR Legacy",
                    "foodNutrients": [
                        {
                            "nutrientId": 1008,
                            "nutrientName": "Energy",
                            "nutrientNumber": "208",
                            "unitName": "KCAL",
                            "value": 165,
                        },
                        {
                            "nutrientId": 1005,
                            "nutrientName": "Carbohydrate, by difference",
                            "nutrientNumber": "205",
                            "unitName": "G",
                            "value": 0,
                        },
                    ],
                },
                {
                    "fdcId": 2345678,
                    "description": "Chicken breast strips",
                    "dataType": "Branded",
                    "brandOwner": "Costco",
                    "brandName": "Kirkland",
                    "foodNutrients": [],
                },
            ],
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 171077,
            "description": "Chicken, broilers or fryers, breast",
            "dataType": "SR Legacy",
            "foodNutrients": [
                {
                    "nutrient": {
                        "id": 1008,
                        "number": "208",
                        "name": "Energy",
                        "unitName": "kcal",
                    },
                    "amount": 165,
                },
                {
                    "nutrient": {
                        "id": 1003,
                        "number": "203",
                        "name": "Protein",
                        "unitName": "g",
                    },
                    "amount": 31,
                },
            ],
        }
    )
    error: RequestError | None = None
    search_calls: list[tuple[str, int, int]] = field(default_factory=list)
    batch_calls: list[list[int]] = field(default_factory=list)

    async def search_foods(
        self, query: str, page_number: int = 1, page_size: int = 25
    ) -> dict[str, object]:
        self.search_calls.append((query, page_number, page_size))
        if self.error:
            raise self.error
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        if self.error:
            raise self.error
        return {**self.food_payload, "fdcId": fdc_id}

    async def get_foods(self, fdc_ids: list[int]) -> list[dict[str, object]]:
        self.batch_calls.append(fdc_ids)
        if self.error:
            raise self.error
        return [{**self.food_payload, "fdcId": fdc_id} for fdc_id in fdc_ids]


@pytest.fixture(autouse=True)
def _reset_app_logger():  # type: ignore[no-untyped-def]
    yield
    logger = logging.getLogger("glucose_tracker")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings() -> Settings:
    return Settings(fdc_api_key="fdc-key", storage_backend="memory")


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def entry_store(kv_store: InMemoryKeyValueStore) -> EntryStore:
    return EntryStore.create(kv_store)
