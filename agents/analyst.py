"""Product analyst and image scanner.

ProductAnalyst.analyze:
    Eco-assessment of a typed-in product. Produces scout keywords for
    alternatives; scouting itself is orchestrated by the pipeline.

ProductAnalyst.scan:
    Structured read-out of a product photo using a response schema.
    Degrades to a fixed "Analysis Failed" result instead of raising.
"""

import logging

from pydantic import ValidationError

from agents.prompts import ANALYST_REQUIRED, SCAN_PROMPT, analyst_prompt
from errors import ShapeError
from models.analysis import SCAN_RESPONSE_SCHEMA, ProductAnalysis, ScanResult
from tools.extract import extract

logger = logging.getLogger(__name__)


class ProductAnalyst:
    """Single-call product assessments.

    Args:
        generator: Object with ``async generate(prompt, *, image_b64=None,
            response_schema=None) -> str``
    """

    def __init__(self, generator):
        self._generator = generator

    async def analyze(self, title: str, category: str, description: str = "") -> ProductAnalysis:
        """Assess a product from its title and category.

        Raises:
            ValueError: If title or category is blank
            GenerationError, FormatError, ShapeError: On model failure
        """
        if not title or not category:
            raise ValueError("Title and category are required.")

        text = await self._generator.generate(analyst_prompt(category, title, description))
        payload = extract(text, required=ANALYST_REQUIRED)
        try:
            analysis = ProductAnalysis.model_validate(payload)
        except ValidationError as e:
            raise ShapeError.from_validation(e) from e

        logger.info(
            "Product analyzed | product=%s recommended=%s keywords=%d",
            analysis.product_name, analysis.is_recommended, len(analysis.scout_keywords),
        )
        return analysis

    async def scan(self, image_b64: str) -> ScanResult:
        """Identify a product photo and suggest alternatives. Never raises."""
        image = f"data:image/jpeg;base64,{image_b64}"
        try:
            text = await self._generator.generate(
                SCAN_PROMPT,
                image_b64=image_b64,
                response_schema=SCAN_RESPONSE_SCHEMA,
            )
            payload = extract(text, required=("name", "brand", "product_category"))
            result = ScanResult.model_validate(payload)
        except Exception as e:
            logger.error("Image scan failed | %s: %s", type(e).__name__, e)
            return ScanResult.failed(image)

        logger.info("Image scanned | name=%s category=%s", result.name, result.product_category)
        return result.model_copy(update={"image": image})
