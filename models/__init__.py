"""Pydantic models for the EcoScout pipeline.

TrendingCategory:
    Category/example-product pair returned by the trend spotter.

ProductRecord:
    Scouted product with guaranteed image and link.

DiscoveryResult:
    Discovery page: editors' picks aliased from the product grid.

ArticleDraft / ArticleRecord:
    Learn-hub article text, and the same with its image attached.

QuestionAnswer:
    Answer plus related follow-up questions.

ProductAnalysis / ScanResult:
    Scanner outputs for typed-in products and product photos.

Example:
    >>> from models import ProductRecord, DiscoveryResult
    >>> result = DiscoveryResult.from_products([record])
    >>> result.editors_picks[0] is result.products[0]
    True
"""

from models.product import TrendingCategory, ProductRecord, DiscoveryResult
from models.article import ArticleDraft, ArticleRecord, QuestionAnswer
from models.analysis import EcoScore, ProductAnalysis, Recommendations, ScanResult

__all__ = [
    "TrendingCategory",
    "ProductRecord",
    "DiscoveryResult",
    "ArticleDraft",
    "ArticleRecord",
    "QuestionAnswer",
    "EcoScore",
    "ProductAnalysis",
    "Recommendations",
    "ScanResult",
]
