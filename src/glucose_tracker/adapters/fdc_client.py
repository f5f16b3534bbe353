"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from glucose_tracker.domain.errors import RequestError

DEFAULT_DATA_TYPES = "Foundation,SR Legacy,Survey (FNDDS),Branded"


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(
        self, query: str, page_number: int = 1, page_size: int = 25
    ) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""

    async def get_foods(self, fdc_ids: list[int]) -> list[dict[str, object]]:
        """Fetch several foods by FDC id and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15
    data_types: str = DEFAULT_DATA_TYPES

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout: float = 15
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def search_foods(
        self, query: str, page_number: int = 1, page_size: int = 25
    ) -> dict[str, object]:
        """Search foods by query, one page at a time."""
        url = f"{self.base_url}/foods/search"
        return await self._send(
            "GET",
            url,
            params={
                "api_key": self.api_key,
                "query": query,
                "pageNumber": page_number,
                "pageSize": page_size,
                "dataType": self.data_types,
            },
        )

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id."""
        url = f"{self.base_url}/food/{fdc_id}"
        return await self._send("GET", url, params={"api_key": self.api_key})

    async def get_foods(self, fdc_ids: list[int]) -> list[dict[str, object]]:
        """Fetch several foods by FDC id in one request."""
        url = f"{self.base_url}/foods"
        return await self._send(
            "POST",
            url,
            params={"api_key": self.api_key},
            json={"fdcIds": fdc_ids},
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self.http_client.request(
                method, url, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RequestError(
                f"API request failed: {exc.response.status_code} "
                f"{exc.response.reason_phrase}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise RequestError(f"API request failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise RequestError("API returned invalid JSON") from exc
