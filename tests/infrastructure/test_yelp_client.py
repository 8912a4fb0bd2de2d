"""Yelp Search Client — result mapping and error translation."""

import httpx
import pytest

from callrelay.core.errors import SearchProviderError
from callrelay.infrastructure.yelp_client import YelpSearchClient


def _client(handler):
    return YelpSearchClient("yelp-key", transport=httpx.MockTransport(handler))


async def test_search_maps_businesses():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json={"businesses": [{
            "id": "joes", "name": "Joe's Pizza", "phone": "+15551234567",
            "rating": 4.5, "price": "$$",
            "location": {"display_address": ["7 Carmine St", "New York, NY 10014"]},
            "categories": [{"alias": "pizza", "title": "Pizza"}],
        }]})

    results = await _client(handler).search("pizza", "New York", limit=50)

    assert seen["auth"] == "Bearer yelp-key"
    assert seen["params"]["limit"] == "20"
    assert seen["params"]["categories"] == "restaurants"
    assert results == [{
        "id": "joes", "name": "Joe's Pizza", "phone": "+15551234567",
        "rating": 4.5, "price": "$$",
        "address": "7 Carmine St, New York, NY 10014",
        "categories": ["Pizza"],
    }]


async def test_search_errors_raise_provider_error():
    with pytest.raises(SearchProviderError, match="401"):
        await _client(lambda request: httpx.Response(401)).search("pizza", "NYC")

    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(SearchProviderError, match="Restaurant search failed"):
        await _client(handler).search("pizza", "NYC")


@pytest.mark.parametrize("body", [{"text": "Service Unavailable"}, {"json": []}])
async def test_unreadable_body_raises_provider_error(body):
    client = _client(lambda request: httpx.Response(200, **body))
    with pytest.raises(SearchProviderError, match="unreadable response \\(200\\)"):
        await client.search("pizza", "NYC")
