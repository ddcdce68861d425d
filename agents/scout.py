"""Product scout: resolves a keyword to one usable product record.

The scout never raises. It tries layers in strict order and the first
success wins:

    1. priced:   shopping search -> cheapest item with price, link and image
                 -> AI marketing description
    2. generic:  image search "{keyword} product photo" (or a placeholder
                 image) -> AI description + Amazon search link (declared JSON)
    3. terminal: "Not Found" placeholder image + web search link. No
                 external dependency, so it cannot fail.

Each layer catches its own failures and reports them as a ScoutAttempt;
partial failure at any AI or network call degrades to the next layer
instead of aborting the lookup.

Price Selection:
    Prices are compared numerically after stripping everything but digits,
    '.' and '-'. A price that does not parse sorts after every valid price,
    so it can only win when no item has a valid price.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from agents.prompts import LINK_REQUIRED, description_prompt, link_prompt
from models.product import ProductRecord
from tools.affiliate import add_affiliate_tag
from tools.extract import parse_payload
from tools.utils import placeholder_image, search_url

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "A great sustainable choice."
FALLBACK_DESCRIPTION = "A popular and sustainable alternative. Click to explore options."
NOT_FOUND_IMAGE = "https://placehold.co/600x400/334155/white?text=Not+Found"

_PRICE_JUNK = re.compile(r"[^0-9.\-]+")
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)")


def parse_price(price: Any) -> float:
    """Parse a display price like '₹1,299.00' into a float.

    Returns:
        The numeric value, or NaN if nothing numeric remains
    """
    cleaned = _PRICE_JUNK.sub("", str(price))
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return math.nan
    return float(match.group())


def _price_key(item: dict[str, Any]) -> float:
    value = parse_price(item.get("price", ""))
    return math.inf if math.isnan(value) else value


def pick_cheapest(items: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Return the lowest-priced item (first one on ties), or None if empty."""
    if not items:
        return None
    return min(items, key=_price_key)


def terminal_record(keyword: str) -> ProductRecord:
    """Dependency-free fallback record for a keyword."""
    return ProductRecord(
        name=keyword,
        image=NOT_FOUND_IMAGE,
        link=search_url(keyword),
        description=FALLBACK_DESCRIPTION,
    )


@dataclass
class ScoutAttempt:
    """Outcome of one scout layer.

    Attributes:
        layer: Layer name ('priced' or 'generic')
        record: Resolved record on success
        error: Failure description on failure
    """

    layer: str
    record: ProductRecord | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.record is not None


class ProductScout:
    """Layered product lookup.

    Args:
        generator: Object with ``async generate(prompt) -> str``
        search: Object with ``async shopping(q)`` and ``async images(q)``
        affiliate_tag: Amazon affiliate tag applied to the final link (optional)

    Example:
        >>> scout = ProductScout(gemini, serper)
        >>> record = await scout.find_product("Beeswax food wraps")
        >>> record.image and record.link
        True
    """

    def __init__(self, generator, search, affiliate_tag: str = ""):
        self._generator = generator
        self._search = search
        self._affiliate_tag = affiliate_tag

    async def _priced_layer(self, keyword: str) -> ScoutAttempt:
        try:
            results = await self._search.shopping(keyword)
            candidates = [
                item for item in results
                if item.get("price") and item.get("link") and item.get("imageUrl")
            ]
            best = pick_cheapest(candidates)
            if best is None:
                return ScoutAttempt("priced", error=f"no priced results ({len(results)} total)")

            description = (await self._generator.generate(description_prompt(keyword))).strip()
            record = ProductRecord(
                name=keyword,
                image=best["imageUrl"],
                link=best["link"],
                description=description or DEFAULT_DESCRIPTION,
            )
            logger.debug(
                "Priced result | keyword=%s price=%s candidates=%d",
                keyword, best.get("price"), len(candidates),
            )
            return ScoutAttempt("priced", record=record)
        except Exception as e:
            return ScoutAttempt("priced", error=f"{type(e).__name__}: {e}")

    async def _generic_layer(self, keyword: str) -> ScoutAttempt:
        try:
            images = await self._search.images(f"{keyword} product photo")
            image = next((img["imageUrl"] for img in images if img.get("imageUrl")), None)
            if not image:
                image = placeholder_image(keyword)

            text = await self._generator.generate(link_prompt(keyword))
            result = parse_payload(text, required=LINK_REQUIRED)
            if not result.success:
                return ScoutAttempt("generic", error=result.error)

            link = str(result.payload["amazon_link"]).strip()
            if not link:
                return ScoutAttempt("generic", error="empty amazon_link")

            record = ProductRecord(
                name=keyword,
                image=image,
                link=link,
                description=str(result.payload["description"]).strip(),
            )
            return ScoutAttempt("generic", record=record)
        except Exception as e:
            return ScoutAttempt("generic", error=f"{type(e).__name__}: {e}")

    def _finalize(self, record: ProductRecord) -> ProductRecord:
        if not self._affiliate_tag:
            return record
        return record.model_copy(update={"link": add_affiliate_tag(record.link, self._affiliate_tag)})

    async def find_product(self, keyword: str) -> ProductRecord:
        """Resolve a keyword to a product record. Never raises.

        Args:
            keyword: Product keyword or name

        Returns:
            ProductRecord with non-empty image and link
        """
        logger.info("Scout mission | keyword=%s", keyword)

        for layer in (self._priced_layer, self._generic_layer):
            attempt = await layer(keyword)
            if attempt.success:
                logger.info("Scout found product | keyword=%s layer=%s", keyword, attempt.layer)
                return self._finalize(attempt.record)
            logger.warning(
                "Scout layer failed | keyword=%s layer=%s error=%s",
                keyword, attempt.layer, attempt.error,
            )

        logger.warning("Scout using terminal fallback | keyword=%s", keyword)
        return self._finalize(terminal_record(keyword))
