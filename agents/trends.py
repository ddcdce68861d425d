"""Trend spotter: asks the model for trending sustainable product categories."""

import logging

from pydantic import TypeAdapter, ValidationError

from agents.prompts import TREND_REQUIRED, trend_spotter_prompt
from errors import ShapeError
from models.product import TrendingCategory
from tools.extract import extract

logger = logging.getLogger(__name__)

_CATEGORY_LIST = TypeAdapter(list[TrendingCategory])


class TrendSpotter:
    """Single AI call producing category/example-product pairs.

    Failures propagate: there is no fallback for trend discovery.
    """

    def __init__(self, generator, count: int = 6):
        self._generator = generator
        self.count = count

    async def spot(self) -> list[TrendingCategory]:
        """Return trending categories in model order.

        Raises:
            GenerationError: The model call failed
            FormatError: The output contained no JSON object
            ShapeError: 'trending_categories' missing or malformed
        """
        text = await self._generator.generate(trend_spotter_prompt(self.count))
        payload = extract(text, required=TREND_REQUIRED)
        try:
            categories = _CATEGORY_LIST.validate_python(payload["trending_categories"])
        except ValidationError as e:
            raise ShapeError.from_validation(e) from e

        if not categories:
            raise ShapeError(["trending_categories"])
        if len(categories) != self.count:
            logger.info("Trend spotter returned %d categories (asked for %d)", len(categories), self.count)
        logger.info(
            "Trends spotted | categories=%s",
            ", ".join(c.category for c in categories),
        )
        return categories
