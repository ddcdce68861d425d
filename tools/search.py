"""Serper search client for shopping and image results.

This module provides the two searches the product scout relies on:

shopping:
    Google Shopping results. Items carry 'title', 'price', 'link' and
    'imageUrl'.

images:
    Google Images results. Items carry 'imageUrl' (and usually 'link').

Both are POSTs of {q, gl} with the API key in the X-API-KEY header.

Error Handling:
    - Invalid key, quota, non-2xx, timeout, transport error: raises SearchError
    - Response without the expected result array: returns an empty list
    The scout treats SearchError as a failed layer and moves on.
"""

import asyncio
import logging
from typing import Any

import aiohttp

from errors import TransportError

logger = logging.getLogger(__name__)

SERPER_BASE_URL = "https://google.serper.dev"


class SearchError(TransportError):
    """Raised when the search API call fails.

    Examples:
    - Invalid API key
    - Quota exceeded
    - API returned error status or timed out
    """
    pass


class SerperClient:
    """Async client for the Serper shopping and image endpoints.

    Example:
        >>> search = SerperClient(session, api_key="...", region="in")
        >>> items = await search.shopping("bamboo toothbrush")
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str,
        region: str = "in",
        timeout: float = 60.0,
    ):
        self._session = session
        self._api_key = api_key
        self.region = region
        self._timeout = timeout

    async def _search(self, endpoint: str, query: str, result_key: str) -> list[dict[str, Any]]:
        """POST a query to a Serper endpoint and return its result array.

        Raises:
            SearchError: If the API returns an error status or the call fails
        """
        url = f"{SERPER_BASE_URL}/{endpoint}"
        try:
            async with self._session.post(
                url,
                json={"q": query, "gl": self.region},
                headers={"X-API-KEY": self._api_key, "Content-Type": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                if resp.status in (401, 403):
                    raise SearchError("Serper API key invalid")
                if resp.status == 429:
                    raise SearchError("Serper quota exceeded")
                if not 200 <= resp.status < 300:
                    raise SearchError(f"Serper API error: HTTP {resp.status}")
                data = await resp.json()
        except asyncio.TimeoutError as e:
            raise SearchError(f"Serper {endpoint} timed out") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise SearchError(f"Serper {endpoint} failed: {type(e).__name__}: {e}") from e

        items = data.get(result_key) if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.debug("Serper %s: no '%s' array in response", endpoint, result_key)
            return []

        logger.debug("Serper %s complete | query=%s results=%d", endpoint, query[:50], len(items))
        return [item for item in items if isinstance(item, dict)]

    async def shopping(self, query: str) -> list[dict[str, Any]]:
        """Search Google Shopping via Serper."""
        return await self._search("shopping", query, "shopping")

    async def images(self, query: str) -> list[dict[str, Any]]:
        """Search Google Images via Serper."""
        return await self._search("images", query, "images")
