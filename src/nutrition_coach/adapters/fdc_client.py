"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SEARCH_DATA_TYPES = ["Foundation", "SR Legacy", "Survey (FNDDS)", "Branded"]
REQUEST_TIMEOUT_SECONDS = 15


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search foods by query and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FoodData Central over a shared ``httpx.AsyncClient``.

    Errors are not caught here: ``httpx.HTTPStatusError`` carries the status
    code the lookup service uses to decide whether to retry.
    """

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS),
        )

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        """Search foods across the generic and branded data sets."""
        body = {
            "query": query.strip(),
            "pageSize": page_size,
            "pageNumber": 1,
            "sortBy": "dataType.keyword",
            "sortOrder": "asc",
            "dataType": SEARCH_DATA_TYPES,
        }
        return await self._request("POST", "/foods/search", json=body)

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        return await self._request("GET", f"/food/{fdc_id}")

    async def _request(
        self, method: str, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            self.base_url + path,
            params={"api_key": self.api_key},
            json=json,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
