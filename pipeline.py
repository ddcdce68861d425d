"""Orchestration of the discovery, learn-hub and scanner flows.

Pipeline Flow (discovery):
    1. TRENDS: One AI call -> N category/example-product pairs (fatal on failure)
    2. SCOUT: One scout per category, concurrently; each branch degrades
       through its own fallbacks and never aborts the batch
    3. TAG: Each record tagged with its source category
    4. VERIFY (optional): Dead links replaced with a web search link
    5. CURATE: First product promoted (aliased) to editors' picks

Pipeline Flow (learn hub):
    1. WRITE: One AI call -> N articles (fatal on failure)
    2. ILLUSTRATE: One image per article, concurrently; a failed image
       becomes a placeholder for that article only
    3. MERGE: i-th image attached to the i-th article (positional)

The overall failure rate depends only on the first call of each flow.
Concurrent branches are joined with asyncio.gather, which keeps input order.
"""

import asyncio
import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Generator

import aiohttp

from agents.analyst import ProductAnalyst
from agents.learn import IMAGE_PLACEHOLDER, ContentWriter
from agents.scout import ProductScout, terminal_record
from agents.trends import TrendSpotter
from config import Config
from models.analysis import ProductAnalysis, Recommendations, ScanResult
from models.article import ArticleContent, ArticleRecord, ArticleSummary, QuestionAnswer
from models.product import DiscoveryResult, ProductRecord, TrendingCategory
from observability.logging import clear_context, set_run_context
from observability.tracing import trace_operation
from tools.gemini import GeminiClient
from tools.search import SerperClient
from tools.utils import search_url
from tools.verify import verify_link

logger = logging.getLogger(__name__)


@contextmanager
def _operation(name: str) -> Generator[dict[str, Any], None, None]:
    """Run-scoped logging and tracing for one top-level operation."""
    set_run_context(uuid.uuid4().hex[:8])
    start = time.time()
    logger.info("%s started", name)
    try:
        with trace_operation(name) as attrs:
            yield attrs
    except asyncio.CancelledError:
        logger.info("%s cancelled", name)
        raise
    except Exception as e:
        logger.error("%s failed | type=%s error=%s", name, type(e).__name__, e, exc_info=True)
        raise
    else:
        logger.info("%s done | duration=%.1fs", name, time.time() - start)
    finally:
        clear_context()


class Pipeline:
    """Async orchestrator owning the HTTP session and all agents.

    Components:
        - GeminiClient: text + image generation
        - SerperClient: shopping + image search
        - TrendSpotter, ProductScout, ContentWriter, ProductAnalyst

    The Gemini and search clients can be injected (tests, alternate
    providers); otherwise they are built from config on open().

    Example:
        >>> async with Pipeline(Config.load()) as pipeline:
        ...     result = await pipeline.discover()
    """

    def __init__(
        self,
        config: Config,
        gemini: GeminiClient | None = None,
        search: SerperClient | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the pipeline.

        Raises:
            ConfigurationError: If an API key is missing (before any network call)
        """
        config.require()
        self.config = config
        self.gemini = gemini
        self.search = search
        self._session = session
        self._owns_session = False

        # Optional: Distributed tracing
        if config.enable_logfire:
            from observability.tracing import setup_tracing
            setup_tracing(enabled=True, service_name="ecoscout", token=config.logfire_token)

    async def open(self) -> "Pipeline":
        """Create the shared session and wire up the agents."""
        if self._session is None and (self.gemini is None or self.search is None):
            self._session = aiohttp.ClientSession()
            self._owns_session = True

        if self.gemini is None:
            self.gemini = GeminiClient(
                self._session,
                api_key=self.config.gemini_api_key,
                model=self.config.gemini_model,
                image_model=self.config.imagen_model,
                timeout=self.config.request_timeout,
            )
        if self.search is None:
            self.search = SerperClient(
                self._session,
                api_key=self.config.serper_api_key,
                region=self.config.search_region,
                timeout=self.config.request_timeout,
            )

        self.trends = TrendSpotter(self.gemini, count=self.config.trend_count)
        self.scout = ProductScout(self.gemini, self.search, affiliate_tag=self.config.affiliate_tag)
        self.writer = ContentWriter(self.gemini, count=self.config.article_count)
        self.analyst = ProductAnalyst(self.gemini)
        return self

    async def close(self) -> None:
        """Clean up resources."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def __aenter__(self) -> "Pipeline":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # === Fan-out helpers ===

    async def _scout_category(self, category: TrendingCategory) -> ProductRecord:
        record = await self.scout.find_product(category.example_product)
        return record.model_copy(update={"tags": [category.category]})

    async def _scout_all(self, keywords: list[str]) -> list[ProductRecord]:
        """Scout keywords concurrently, preserving order."""
        results = await asyncio.gather(
            *(self.scout.find_product(k) for k in keywords),
            return_exceptions=True,
        )
        records = []
        for keyword, result in zip(keywords, results):
            if isinstance(result, BaseException):
                logger.error("Scout branch error | keyword=%s error=%s", keyword, result, exc_info=result)
                records.append(terminal_record(keyword))
            else:
                records.append(result)
        return records

    async def _verify_products(self, products: list[ProductRecord]) -> list[ProductRecord]:
        """Replace links that fail a liveness check with a web search link."""
        checks = await asyncio.gather(
            *(verify_link(p.link, self._session, timeout=self.config.verify_timeout) for p in products)
        )
        verified = []
        for product, ok in zip(products, checks):
            if ok:
                verified.append(product)
            else:
                logger.info("Dead link replaced | product=%s link=%s", product.name, product.link[:80])
                verified.append(product.model_copy(update={"link": search_url(product.name)}))
        logger.info("Links verified | ok=%d/%d", sum(checks), len(products))
        return verified

    # === Operations ===

    async def discover(self) -> DiscoveryResult:
        """Build the discovery page from AI-spotted trends.

        Raises:
            GenerationError, FormatError, ShapeError: If trend discovery fails
        """
        with _operation("discover") as attrs:
            categories = await self.trends.spot()

            results = await asyncio.gather(
                *(self._scout_category(c) for c in categories),
                return_exceptions=True,
            )
            products = []
            for category, result in zip(categories, results):
                if isinstance(result, BaseException):
                    logger.error(
                        "Scout branch error | category=%s error=%s",
                        category.category, result, exc_info=result,
                    )
                    result = terminal_record(category.example_product).model_copy(
                        update={"tags": [category.category]}
                    )
                products.append(result)

            if self.config.verify_links:
                products = await self._verify_products(products)

            attrs["products"] = len(products)
            return DiscoveryResult.from_products(products)

    async def get_full_content(self) -> list[ArticleRecord]:
        """Write learn-hub articles and attach one image to each.

        Raises:
            GenerationError, FormatError, ShapeError: If article writing fails
        """
        with _operation("get_full_content") as attrs:
            drafts = await self.writer.write_articles()
            images = await asyncio.gather(
                *(self.writer.illustrate(d.title) for d in drafts),
                return_exceptions=True,
            )

            articles = []
            for draft, image in zip(drafts, images, strict=True):
                if isinstance(image, BaseException) or not image:
                    image = IMAGE_PLACEHOLDER
                articles.append(draft.with_image(image))

            attrs["articles"] = len(articles)
            attrs["placeholders"] = sum(1 for a in articles if a.image == IMAGE_PLACEHOLDER)
            return articles

    def get_article_list(self) -> list[ArticleSummary]:
        """Curated learn-hub catalogue. No model call."""
        return self.writer.list_articles()

    async def get_article_content(self, article_id: str) -> ArticleContent:
        """Expand one catalogue article (body, takeaways and image concurrently).

        Raises:
            NotFoundError: Unknown article id
            GenerationError: If the body or takeaways call fails
        """
        with _operation("get_article_content") as attrs:
            article = await self.writer.write_article(article_id)
            attrs["placeholder_image"] = article.image == IMAGE_PLACEHOLDER
            return article

    async def analyze_product(self, title: str, category: str, description: str = "") -> ProductAnalysis:
        """Assess a product and scout better alternatives.

        Raises:
            ValueError: If title or category is blank
            GenerationError, FormatError, ShapeError: If the analysis call fails
        """
        with _operation("analyze_product") as attrs:
            analysis = await self.analyst.analyze(title, category, description)
            main, *items = await self._scout_all([analysis.product_name, *analysis.scout_keywords])
            attrs["alternatives"] = len(items)
            return analysis.model_copy(update={
                "product_image": main.image,
                "recommendations": Recommendations(title=analysis.recommendations_title, items=items),
            })

    async def ask_question(self, question: str) -> QuestionAnswer:
        """Answer a user's sustainability question."""
        with _operation("ask_question"):
            return await self.writer.answer(question)

    async def scan_image(self, image_b64: str) -> ScanResult:
        """Identify a product photo. Degrades to an 'Analysis Failed' result."""
        with _operation("scan_image"):
            return await self.analyst.scan(image_b64)

    async def find_product(self, keyword: str) -> ProductRecord:
        """Scout a single keyword. Never raises."""
        with _operation("find_product"):
            return await self.scout.find_product(keyword)

    async def verify_link(self, url: str) -> bool:
        """Check a single link. Never raises."""
        return await verify_link(url, self._session, timeout=self.config.verify_timeout)


async def run_discover(config: Config) -> DiscoveryResult:
    """Run discovery once with a fresh pipeline."""
    async with Pipeline(config) as pipeline:
        return await pipeline.discover()


async def run_full_content(config: Config) -> list[ArticleRecord]:
    """Generate learn-hub content once with a fresh pipeline."""
    async with Pipeline(config) as pipeline:
        return await pipeline.get_full_content()
