"""Learn-hub content writer: articles, article images, and Q&A.

Two article flows exist. write_articles invents a fresh batch in one call;
write_article expands one entry of the curated ARTICLE_CATALOGUE, running
the body, takeaways and image calls concurrently.
"""

import asyncio
import logging

from pydantic import TypeAdapter, ValidationError

from agents.prompts import (
    ANSWER_REQUIRED,
    ARTICLES_REQUIRED,
    article_body_prompt,
    article_image_prompt,
    articles_prompt,
    question_prompt,
    takeaways_prompt,
)
from errors import NotFoundError, ShapeError
from models.article import ArticleContent, ArticleDraft, ArticleSummary, QuestionAnswer
from tools.extract import extract

logger = logging.getLogger(__name__)

IMAGE_PLACEHOLDER = "https://placehold.co/800x400/334155/white?text=Image+Generation+Error"

_DRAFT_LIST = TypeAdapter(list[ArticleDraft])

ARTICLE_CATALOGUE: tuple[ArticleSummary, ...] = (
    ArticleSummary(
        id="guide-to-eco-certifications",
        title="A Simple Guide to Eco-Certifications in India",
        author="Priya Sharma",
        date="August 10, 2025",
        summary=(
            "Ever felt confused by all the green labels on products? We break down what "
            "certifications like GOTS, Fair Trade, and Leaping Bunny actually mean for you "
            "and the planet."
        ),
    ),
    ArticleSummary(
        id="kitchen-swaps",
        title="5 Simple Swaps for a More Sustainable Kitchen",
        author="Rohan Desai",
        date="August 5, 2025",
        summary=(
            "Ready to reduce waste in your kitchen? These five easy and affordable swaps are "
            "a great place to start, from ditching plastic wrap to composting your food scraps."
        ),
    ),
    ArticleSummary(
        id="cosmetic-ingredients",
        title="Clean Beauty: 5 Cosmetic Ingredients to Avoid",
        author="Anjali Mehta",
        date="July 28, 2025",
        summary=(
            "The beauty industry can be full of confusing ingredients. We highlight five "
            "common chemicals to look out for and explain why choosing cleaner alternatives "
            "is better for your skin and health."
        ),
    ),
)


class ContentWriter:
    """Generates learn-hub articles and answers questions.

    Args:
        generator: Object with ``async generate(prompt)`` and
            ``async generate_image(prompt)``
        count: Number of articles to request
    """

    def __init__(self, generator, count: int = 3):
        self._generator = generator
        self.count = count

    async def write_articles(self) -> list[ArticleDraft]:
        """Generate article drafts in one call.

        Raises:
            GenerationError, FormatError, ShapeError: No fallback for this step
        """
        text = await self._generator.generate(articles_prompt(self.count))
        payload = extract(text, required=ARTICLES_REQUIRED)
        try:
            drafts = _DRAFT_LIST.validate_python(payload["articles"])
        except ValidationError as e:
            raise ShapeError.from_validation(e) from e
        if not drafts:
            raise ShapeError(["articles"])
        logger.info("Articles written | count=%d", len(drafts))
        return drafts

    async def illustrate(self, title: str) -> str:
        """Generate an image for an article title. Never raises.

        Returns:
            A data URL, or IMAGE_PLACEHOLDER if generation fails
        """
        try:
            return await self._generator.generate_image(article_image_prompt(title))
        except Exception as e:
            logger.warning("Image generation failed | title=%s error=%s", title[:60], e)
            return IMAGE_PLACEHOLDER

    async def answer(self, question: str) -> QuestionAnswer:
        """Answer a sustainability question with follow-up suggestions.

        Raises:
            ValueError: If the question is blank
            GenerationError, FormatError, ShapeError: On model failure
        """
        if not question or not question.strip():
            raise ValueError("No question provided.")
        text = await self._generator.generate(question_prompt(question.strip()))
        payload = extract(text, required=ANSWER_REQUIRED)
        try:
            return QuestionAnswer.model_validate(payload)
        except ValidationError as e:
            raise ShapeError.from_validation(e) from e

    def list_articles(self) -> list[ArticleSummary]:
        """Curated catalogue entries, in display order."""
        return list(ARTICLE_CATALOGUE)

    async def write_article(self, article_id: str) -> ArticleContent:
        """Generate body, takeaways and image for one catalogue article.

        The three calls run concurrently. The image degrades to
        IMAGE_PLACEHOLDER; a failed text call fails the whole article.

        Raises:
            NotFoundError: If article_id is not in the catalogue
            GenerationError: If the body or takeaways call fails
        """
        article = next((a for a in ARTICLE_CATALOGUE if a.id == article_id), None)
        if article is None:
            raise NotFoundError("Article not found.")

        content, takeaways, image = await asyncio.gather(
            self._generator.generate(article_body_prompt(article.title, article.summary)),
            self._generator.generate(takeaways_prompt(article.title)),
            self.illustrate(article.title),
        )
        logger.info("Article expanded | id=%s chars=%d", article.id, len(content))
        return ArticleContent(content=content, takeaways=takeaways, image=image)
