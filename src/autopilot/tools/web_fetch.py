"""Fetch a web page and reduce it to readable text."""

import html
import re
from typing import Optional

import httpx
from pydantic import BaseModel, Field

from autopilot.agent_core.logger import get_logger
from autopilot.agent_core.tools import ToolDefinition, ToolResult
from .common import build_definition

logger = get_logger(__name__)

MAX_CONTENT_CHARS = 40_000
FETCH_TIMEOUT_SECONDS = 15.0
USER_AGENT = "AutoPilot/0.1 (web-fetch tool)"

_BOILERPLATE_BLOCKS = re.compile(r"<(script|style|nav|footer|header)\b[\s\S]*?</\1\s*>", re.IGNORECASE)
_TAGS = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


class WebFetchParams(BaseModel):
    url: str = Field(description="The URL to fetch")
    max_chars: int = Field(default=MAX_CONTENT_CHARS, ge=1, description="Max characters to return (default 40000)")


def strip_html(markup: str) -> str:
    """Drop scripts, styles and page chrome, then tags; decode entities and collapse whitespace."""
    text = _BOILERPLATE_BLOCKS.sub("", markup)
    text = _TAGS.sub(" ", text)
    text = html.unescape(text)
    return _WHITESPACE.sub(" ", text).strip()


def create_web_fetch_tool(transport: Optional[httpx.AsyncBaseTransport] = None) -> ToolDefinition:
    """
    Args:
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    async def web_fetch(url: str, max_chars: int = MAX_CONTENT_CHARS) -> ToolResult:
        try:
            async with httpx.AsyncClient(
                transport=transport, timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True
            ) as client:
                response = await client.get(
                    url,
                    headers={
                        "User-Agent": USER_AGENT,
                        "Accept": "text/html, application/xhtml+xml, text/plain, */*",
                    },
                )
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            return ToolResult.failure(f"Failed to fetch {url}: {e}", url=url)

        if not response.is_success:
            return ToolResult.failure(
                f"HTTP {response.status_code} {response.reason_phrase}", url=url, status=response.status_code
            )

        content_type = response.headers.get("content-type", "")
        body = response.text
        text = strip_html(body) if "text/html" in content_type or "xhtml" in content_type else body

        if len(text) > max_chars:
            content = text[:max_chars] + "\n\n…[truncated]"
        else:
            content = text
        return ToolResult.ok(content, url=url, status=response.status_code, chars=len(text))

    return build_definition(
        name="web_fetch",
        description=" ".join(
            [
                "Fetch the content of a web page and extract readable text.",
                "Returns the main text content, stripping navigation, scripts, and styles.",
                "Use for reading articles, documentation, or web page content.",
            ]
        ),
        func=web_fetch,
        args_model=WebFetchParams,
    )
