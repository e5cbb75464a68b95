"""DataForSEO Google search tool."""

import os
from typing import Any

import httpx

from vecstore.errors import ToolError
from vecstore.observability.logging import get_logger
from vecstore.tools.base import Tool

logger = get_logger(__name__)


class DataForSeoTool(Tool):
    """Google organic search through the DataForSEO SERP API.

    Returns the description of the top organic result for a query.
    """

    BASE_URL = "https://api.dataforseo.com/v3/serp/google/organic/live/regular"

    def __init__(
        self,
        access_token: str | None = None,
        location: str = "United States",
        language_code: str = "en",
        depth: int = 100,
        timeout: float = 60.0,
    ):
        """Initialize the search tool.

        Args:
            access_token: DataForSEO token (defaults to DATAFORSEO_ACCESS_TOKEN env var)
            location: Search location name
            language_code: Search language
            depth: Number of results DataForSEO crawls
            timeout: Request timeout in seconds
        """
        self._access_token = access_token or os.environ.get("DATAFORSEO_ACCESS_TOKEN", "")
        self._location = location
        self._language_code = language_code
        self._depth = depth
        self._client = httpx.AsyncClient(timeout=timeout)

    @property
    def name(self) -> str:
        return "GoogleSearch"

    @property
    def description(self) -> str:
        return (
            "A wrapper around Google Search. "
            "Useful for when you need to answer questions about current events. "
            "Always one of the first options when you need to find information on internet. "
            "Input should be a search query."
        )

    async def run(self, input: str) -> str:
        """Search for ``input`` and return the top result's description."""
        return await self.search(input)

    async def search(self, query: str) -> str:
        """Run a live Google organic search.

        Raises:
            ToolError: On transport failure, non-200 response, or no results
        """
        payload = [{
            "language_code": self._language_code,
            "location_name": self._location,
            "group_organic_results": True,
            "se_domain": "google.com",
            "keyword": query,
            "depth": self._depth,
        }]

        logger.debug("dataforseo_search_request", depth=self._depth, location=self._location)

        try:
            response = await self._client.post(
                self.BASE_URL,
                auth=(self._access_token, ""),
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error("dataforseo_transport_error", error=str(e))
            raise ToolError(f"DataForSEO request failed: {e}", cause=e) from e

        if response.status_code != 200:
            logger.error(
                "dataforseo_search_error",
                status_code=response.status_code,
                error=response.text,
            )
            raise ToolError(f"DataForSEO API error ({response.status_code}): {response.text}")

        return extract_top_description(response.json())

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def extract_top_description(data: dict[str, Any]) -> str:
    """Pull the first organic item's description out of a SERP response.

    Raises:
        ToolError: If any level of the response is missing or empty
    """
    try:
        item = data["tasks"][0]["result"][0]["items"][0]
        description = item["description"]
    except (KeyError, IndexError, TypeError) as e:
        raise ToolError("No results found", cause=e) from e

    if not isinstance(description, str):
        raise ToolError("No results found")
    return description
