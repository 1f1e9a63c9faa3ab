"""Web search through the Brave Search API."""

from typing import Optional

import httpx
from pydantic import BaseModel, Field

from autopilot.agent_core.logger import get_logger
from autopilot.agent_core.tools import ToolDefinition, ToolResult
from .common import build_definition

logger = get_logger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
DEFAULT_RESULT_COUNT = 5
MAX_RESULT_COUNT = 20
SEARCH_TIMEOUT_SECONDS = 15.0


class WebSearchParams(BaseModel):
    query: str = Field(description="Search query")
    count: int = Field(default=DEFAULT_RESULT_COUNT, ge=1, description="Number of results (default 5, max 20)")


def create_web_search_tool(
    api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None
) -> ToolDefinition:
    """
    Args:
        api_key: Brave Search subscription token. Searches fail with an error result when missing.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    async def web_search(query: str, count: int = DEFAULT_RESULT_COUNT) -> ToolResult:
        if not api_key:
            return ToolResult.failure("BRAVE_API_KEY not set. Configure it via the environment or the config file.")

        try:
            async with httpx.AsyncClient(transport=transport, timeout=SEARCH_TIMEOUT_SECONDS) as client:
                response = await client.get(
                    BRAVE_SEARCH_URL,
                    params={"q": query, "count": min(count, MAX_RESULT_COUNT)},
                    headers={"Accept": "application/json", "X-Subscription-Token": api_key},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Web search failed: {e}")
            return ToolResult.failure(f"Web search failed: {e}", query=query)

        if not response.is_success:
            return ToolResult.failure(
                f"Brave Search API error: HTTP {response.status_code}", query=query, status=response.status_code
            )

        results = (response.json().get("web") or {}).get("results") or []
        if not results:
            return ToolResult.ok(f"No results found for: {query}", query=query, result_count=0)

        formatted = "\n\n".join(
            f"{index}. **{item.get('title', '')}**\n   {item.get('url', '')}\n   {item.get('description', '')}"
            for index, item in enumerate(results, start=1)
        )
        return ToolResult.ok(formatted, query=query, result_count=len(results))

    return build_definition(
        name="web_search",
        description=" ".join(
            [
                "Search the web using Brave Search API.",
                "Returns a list of search results with title, URL, and description.",
                "Requires BRAVE_API_KEY.",
            ]
        ),
        func=web_search,
        args_model=WebSearchParams,
    )
