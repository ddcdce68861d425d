"""Product analysis models for the scanner.

ProductAnalysis:
    Eco-assessment of a product the user typed in (title + category),
    with scouted alternatives attached.

ScanResult:
    Structured read-out of a product photo, with one suggested alternative.

Both mirror the camelCase field names the models are prompted with and
serialize back to them for the renderer (``model_dump(by_alias=True)``).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.product import ProductRecord


class EcoScore(BaseModel):
    """0-100 sustainability score with a short justification."""

    score: int = Field(ge=0, le=100)
    title: str = ""
    justification: str = ""


class Recommendations(BaseModel):
    """Scouted alternatives shown below an analysis."""

    title: str
    items: list[ProductRecord] = Field(default_factory=list)


class ProductAnalysis(BaseModel):
    """Analyst verdict for a user-supplied product."""

    model_config = ConfigDict(populate_by_name=True)

    product_name: str = Field(alias="productName", min_length=1)
    is_recommended: bool = Field(default=False, alias="isRecommended")
    verdict: str = ""
    eco_score: EcoScore | None = Field(default=None, alias="ecoScore")
    summary: str = ""
    recommendations_title: str = Field(
        default="Better, Eco-Friendly Alternatives",
        alias="recommendationsTitle",
    )
    scout_keywords: list[str] = Field(default_factory=list, alias="scoutKeywords")

    # Filled in after scouting
    product_image: str = Field(default="", alias="productImage")
    recommendations: Recommendations | None = None


class HealthAnalysis(BaseModel):
    rating: str = ""
    health_concern: str = ""
    sufficient_intake: str = ""


class Alternative(BaseModel):
    name: str = ""
    reason: str = ""
    link: str = ""
    search_query: str = ""
    recipe: list[str] = Field(default_factory=list)
    diy_instructions: list[str] = Field(default_factory=list)


class ScanResult(BaseModel):
    """Scanner output for a product photo."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    brand: str = ""
    product_category: str = "Unknown"
    eco_score: str = Field(default="", alias="ecoScore")
    carbon_footprint: float | None = Field(default=None, alias="carbonFootprint")
    health_analysis: HealthAnalysis | None = None
    alternatives: list[Alternative] = Field(default_factory=list)
    image: str = ""

    @field_validator("eco_score", mode="before")
    @classmethod
    def _score_as_text(cls, v):
        # Letter grades are expected, but numeric scores also come back
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @classmethod
    def failed(cls, image: str) -> "ScanResult":
        """Placeholder shown when the scan could not be completed."""
        return cls(
            name="Analysis Failed",
            brand="Please try again",
            product_category="Unknown",
            image=image,
        )


# Response schema sent with scan requests (Gemini OpenAPI subset)
SCAN_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "brand": {"type": "STRING"},
        "product_category": {"type": "STRING", "enum": ["Food", "Non-Food"]},
        "ecoScore": {"type": "STRING"},
        "carbonFootprint": {"type": "NUMBER"},
        "health_analysis": {
            "type": "OBJECT",
            "properties": {
                "rating": {"type": "STRING"},
                "health_concern": {"type": "STRING"},
                "sufficient_intake": {"type": "STRING"},
            },
        },
        "alternatives": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "reason": {"type": "STRING"},
                    "link": {"type": "STRING"},
                    "search_query": {"type": "STRING"},
                    "recipe": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "diy_instructions": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
            },
        },
    },
    "required": ["name", "brand", "product_category"],
}
