"""Nutrition lookup service over USDA FDC."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from glucose_tracker.adapters.fdc_client import FdcClient
from glucose_tracker.domain.errors import RequestError, ValidationError
from glucose_tracker.domain.nutrition import Food, SearchResult

_logger = logging.getLogger(__name__)

_FOOD_LIST = TypeAdapter(list[Food])

_ParsedT = TypeVar("_ParsedT")

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class NutritionService:
    """Service that turns FDC payloads into food models."""

    fdc_client: FdcClient
    debug: bool = False

    async def search(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> SearchResult:
        """Search foods, returning one page and its paging metadata."""
        if page < 1 or page_size < 1:
            raise ValidationError("Page and page size must be positive")
        cleaned = query.strip()
        if not cleaned:
            return SearchResult()

        payload = await self._call(
            lambda: self.fdc_client.search_foods(
                cleaned, page_number=page, page_size=page_size
            ),
            action="search",
        )
        result = _parse(SearchResult.model_validate, payload, action="search")
        if self.debug:
            _logger.info(
                "Nutrition search FDC: query=%s page=%s results=%s",
                cleaned,
                page,
                len(result.foods),
            )
        return result

    async def get_food(self, fdc_id: int) -> Food:
        """Fetch a single food with its nutrients."""
        payload = await self._call(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        return _parse(Food.model_validate, payload, action=f"get_food:{fdc_id}")

    async def get_foods(self, fdc_ids: list[int]) -> list[Food]:
        """Fetch several foods in one request."""
        if not fdc_ids:
            return []
        payload = await self._call(
            lambda: self.fdc_client.get_foods(fdc_ids),
            action="get_foods",
        )
        return _parse(_FOOD_LIST.validate_python, payload, action="get_foods")

    async def _call(
        self, func: "Callable[[], Awaitable[object]]", *, action: str
    ) -> object:
        """Run a single request, logging failures before re-raising."""
        try:
            return await func()
        except RequestError as exc:
            _logger.warning(
                "Nutrition %s failed (status=%s): %s",
                action,
                exc.status_code or "n/a",
                exc,
            )
            raise


def _parse(
    validate: "Callable[[object], _ParsedT]", payload: object, *, action: str
) -> _ParsedT:
    try:
        return validate(payload)
    except PydanticValidationError as exc:
        _logger.warning("Nutrition %s returned an unexpected payload: %s", action, exc)
        raise RequestError(f"Unexpected response for {action}") from exc
