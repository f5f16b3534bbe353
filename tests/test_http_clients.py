"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from glucose_tracker.adapters.fdc_client import DEFAULT_DATA_TYPES, HttpxFdcClient
from glucose_tracker.domain.errors import RequestError


def _client(handler) -> HttpxFdcClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxFdcClient(
        api_key="key",
        base_url="https://api.test",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_fdc_client_search_and_get() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/foods/search"):
            return httpx.Response(200, json={"foods": [], "totalHits": 0})
        return httpx.Response(200, json={"fdcId": 1, "foodNutrients": []})

    client = _client(handler)

    search = asyncio.run(client.search_foods("rice", page_number=3, page_size=5))
    food = asyncio.run(client.get_food(1))

    assert search == {"foods": [], "totalHits": 0}
    assert food["fdcId"] == 1
    params = seen[0].url.params
    assert seen[0].method == "GET"
    assert params["api_key"] == "key"
    assert params["query"] == "rice"
    assert params["pageNumber"] == "3"
    assert params["pageSize"] == "5"
    assert params["dataType"] == DEFAULT_DATA_TYPES
    assert seen[1].url.path == "/food/1"


def test_fdc_client_batch_posts_ids() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/foods"
        assert request.url.params["api_key"] == "key"
        payload = json.loads(request.content.decode())
        return httpx.Response(
            200, json=[{"fdcId": fdc_id} for fdc_id in payload["fdcIds"]]
        )

    client = _client(handler)

    foods = asyncio.run(client.get_foods([7, 8]))

    assert foods == [{"fdcId": 7}, {"fdcId": 8}]


def test_fdc_client_raises_request_error_on_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": "API_KEY_INVALID"})

    client = _client(handler)

    with pytest.raises(RequestError) as excinfo:
        asyncio.run(client.get_food(1))

    assert excinfo.value.status_code == 403
    assert "403" in str(excinfo.value)


def test_fdc_client_raises_request_error_on_transport_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(RequestError) as excinfo:
        asyncio.run(client.search_foods("rice"))

    assert excinfo.value.status_code is None


def test_fdc_client_close() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))

    asyncio.run(client.close())

    assert client.http_client.is_closed
