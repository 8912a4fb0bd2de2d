"""Yelp Search Client — restaurant search returning {id, name, phone, ...} records.

Invariants:
    - search() returns plain dicts with at least id, name, phone (phone may be "")
    - Any transport failure, non-2xx or non-object body raises SearchProviderError
"""

import logging

import httpx

from callrelay.core.errors import SearchProviderError

logger = logging.getLogger(__name__)

MAX_LIMIT = 20


class YelpSearchClient:

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.yelp.com/v3",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def search(
        self, term: str, location: str, limit: int = 5,
    ) -> list[dict]:
        params = {
            "term": term,
            "location": location,
            "categories": "restaurants",
            "limit": max(1, min(limit, MAX_LIMIT)),
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport,
                headers={"Authorization": f"Bearer {self._api_key}"},
            ) as client:
                response = await client.get(
                    f"{self.base_url}/businesses/search", params=params,
                )
        except httpx.HTTPError as e:
            raise SearchProviderError(f"Restaurant search failed: {e}")
        if response.is_error:
            raise SearchProviderError(
                f"Restaurant search failed: {response.status_code} {response.reason_phrase}",
            )
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise SearchProviderError(
                f"Restaurant search failed: unreadable response ({response.status_code})",
            )
        businesses = data.get("businesses") or []
        logger.info(f"Yelp search returned {len(businesses)} businesses")
        return [self._to_result(b) for b in businesses]

    @staticmethod
    def _to_result(business: dict) -> dict:
        location = business.get("location") or {}
        return {
            "id": business.get("id", ""),
            "name": business.get("name", ""),
            "phone": business.get("phone") or "",
            "rating": business.get("rating"),
            "price": business.get("price"),
            "address": ", ".join(location.get("display_address") or []),
            "categories": [c.get("title", "") for c in business.get("categories") or []],
        }
