"""Product models produced by the scout and assembled by discovery.

Model Hierarchy:
    TrendingCategory: One category/example pair from the trend spotter
    ProductRecord: A resolved product handed to the renderer
    DiscoveryResult: The assembled discovery page (editors' picks + grid)

ProductRecord guarantees non-empty image and link fields; the scout fills
them with real values or with deterministic placeholders.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator


class TrendingCategory(BaseModel):
    """A trending product category suggested by the AI trend spotter."""

    category: str = Field(min_length=1, description="Category label, used as a tag")
    example_product: str = Field(min_length=1, description="Keyword handed to the scout")


class ProductRecord(BaseModel):
    """A product resolved by the scout.

    Attributes:
        name: Keyword or product name the record was scouted for
        image: Product image URL (real or placeholder, never empty)
        link: Purchase or search URL (real or fallback, never empty)
        description: Short marketing description
        tags: Ordered tags, e.g. the source category

    Example:
        >>> record = ProductRecord(
        ...     name="Beeswax food wraps",
        ...     image="https://example.com/wrap.jpg",
        ...     link="https://www.amazon.in/s?k=beeswax+wraps",
        ...     description="Ditch cling film 🐝",
        ... )
    """

    name: str = Field(description="Product name or scout keyword")
    image: str = Field(min_length=1, description="Image URL")
    link: str = Field(min_length=1, description="Product or search URL")
    description: str = Field(default="", description="Short marketing description")
    tags: list[str] = Field(default_factory=list, description="Ordered tags")

    @field_validator("image", "link")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def __str__(self) -> str:
        """Human-readable representation for logging."""
        return f"ProductRecord('{self.name[:40]}', link={self.link[:60]})"


@dataclass
class DiscoveryResult:
    """Assembled discovery page.

    The featured pick is the first product itself, not a copy: mutating
    ``editors_picks[0]`` is visible in ``products[0]``.
    """

    editors_picks: list[ProductRecord] = field(default_factory=list)
    products: list[ProductRecord] = field(default_factory=list)

    @classmethod
    def from_products(cls, products: list[ProductRecord]) -> "DiscoveryResult":
        """Curate a discovery page, promoting the first product to featured pick."""
        picks = [products[0]] if products else []
        return cls(editors_picks=picks, products=products)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the renderer's wire format."""
        return {
            "editorsPicks": [p.model_dump(mode="json") for p in self.editors_picks],
            "products": [p.model_dump(mode="json") for p in self.products],
        }
