"""AI agents for the EcoScout pipeline.

Each agent wraps one kind of model call; the pipeline composes them.

TrendSpotter:
    Trending sustainable product categories for the discovery page.

ProductScout:
    Keyword -> product record via layered search with fallbacks.

ContentWriter:
    Learn-hub articles, article images, and Q&A.

ProductAnalyst:
    Eco-assessment of typed-in products and product photos.

Example:
    >>> from agents import ProductScout
    >>> scout = ProductScout(gemini, serper)
    >>> record = await scout.find_product("Bamboo toothbrush")
"""

from agents.trends import TrendSpotter
from agents.scout import ProductScout
from agents.learn import ContentWriter
from agents.analyst import ProductAnalyst

__all__ = [
    "TrendSpotter",
    "ProductScout",
    "ContentWriter",
    "ProductAnalyst",
]
