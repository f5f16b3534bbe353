"""Nutrition domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FoodNutrient(BaseModel):
    """Single nutrient measurement for a food, per 100 grams."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    nutrient_id: int = Field(alias="nutrientId")
    nutrient_name: str = Field(default="", alias="nutrientName")
    nutrient_number: str | None = Field(default=None, alias="nutrientNumber")
    unit_name: str = Field(default="", alias="unitName")
    value: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _flatten_detail_shape(cls, data: object) -> object:
        """Accept the nested shape returned by the single food endpoint."""
        if not isinstance(data, dict) or "nutrient" not in data:
            return data
        nutrient = data.get("nutrient") or {}
        return {
            "nutrientId": nutrient.get("id", data.get("nutrientId")),
            "nutrientName": nutrient.get("name", ""),
            "nutrientNumber": nutrient.get("number"),
            "unitName": nutrient.get("unitName", ""),
            "value": data.get("amount") if data.get("amount") is not None else 0.0,
        }


class Food(BaseModel):
    """Catalog item from FoodData Central."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    fdc_id: int = Field(alias="fdcId")
    description: str = ""
    data_type: str | None = Field(default=None, alias="dataType")
    brand_owner: str | None = Field(default=None, alias="brandOwner")
    brand_name: str | None = Field(default=None, alias="brandName")
    food_nutrients: tuple[FoodNutrient, ...] = Field(
        default=(), alias="foodNutrients"
    )


class SearchResult(BaseModel):
    """One page of food search results."""

    model_config = ConfigDict(populate_by_name=True)

    foods: list[Food] = Field(default_factory=list)
    total_hits: int = Field(default=0, alias="totalHits")
    current_page: int = Field(default=1, alias="currentPage")
    total_pages: int = Field(default=1, alias="totalPages")


@dataclass(frozen=True)
class NutrientSummary:
    """Nutrient totals derived from a set of meal entries."""

    calories: float = 0.0
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
