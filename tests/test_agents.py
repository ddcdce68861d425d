"""Unit tests for the trend spotter, content writer and product analyst."""

from __future__ import annotations

import pytest

from agents.analyst import ProductAnalyst
from agents.learn import IMAGE_PLACEHOLDER, ContentWriter
from agents.trends import TrendSpotter
from errors import FormatError, GenerationError, NotFoundError, ShapeError

from conftest import FakeGenerator, fenced

TRENDS = {
    "trending_categories": [
        {"category": "Zero-Waste Dental Care", "example_product": "Bamboo toothbrush"},
        {"category": "Solar Gadgets", "example_product": "Solar power bank"},
    ]
}


# === TrendSpotter ===


@pytest.mark.asyncio
async def test_trends_in_model_order():
    generator = FakeGenerator(routes=[("trend analyst", fenced(TRENDS))])
    categories = await TrendSpotter(generator, count=2).spot()
    assert [c.example_product for c in categories] == ["Bamboo toothbrush", "Solar power bank"]
    assert "Identify 2 current" in generator.prompts[0]


@pytest.mark.asyncio
async def test_trends_missing_key_is_shape_error():
    generator = FakeGenerator(routes=[("trend analyst", '{"categories": []}')])
    with pytest.raises(ShapeError) as exc_info:
        await TrendSpotter(generator).spot()
    assert exc_info.value.missing == ["trending_categories"]


@pytest.mark.asyncio
async def test_trends_entry_without_example_is_shape_error():
    bad = {"trending_categories": [{"category": "Solar Gadgets"}]}
    generator = FakeGenerator(routes=[("trend analyst", fenced(bad))])
    with pytest.raises(ShapeError, match="0.example_product"):
        await TrendSpotter(generator).spot()


@pytest.mark.asyncio
async def test_trends_empty_list_is_shape_error():
    generator = FakeGenerator(routes=[("trend analyst", '{"trending_categories": []}')])
    with pytest.raises(ShapeError):
        await TrendSpotter(generator).spot()


@pytest.mark.asyncio
async def test_trends_unparseable_output_is_format_error():
    generator = FakeGenerator(routes=[("trend analyst", "I cannot help with that.")])
    with pytest.raises(FormatError):
        await TrendSpotter(generator).spot()


@pytest.mark.asyncio
async def test_trends_generation_error_propagates():
    generator = FakeGenerator(routes=[("trend analyst", GenerationError("generation failed: HTTP 500"))])
    with pytest.raises(GenerationError):
        await TrendSpotter(generator).spot()


# === ContentWriter ===

ARTICLES = {
    "articles": [
        {
            "title": "5 Simple Swaps for a More Sustainable Kitchen",
            "author": "Rohan Desai",
            "date": "August 5, 2025",
            "summary": "Small changes.",
            "content": "## Swaps\n- Beeswax wraps",
            "takeaways": "- Use wraps\n- Compost scraps\n\n- Buy loose",
        },
        {
            "id": "certs",
            "title": "Decoding Eco-Labels",
            "summary": "Labels.",
            "content": "## Labels",
            "takeaways": ["Look for FSC"],
        },
    ]
}


@pytest.mark.asyncio
async def test_write_articles_normalizes_ids_and_takeaways():
    generator = FakeGenerator(routes=[("blog posts", fenced(ARTICLES))])
    drafts = await ContentWriter(generator, count=2).write_articles()

    assert drafts[0].id == "5-simple-swaps-for-a-more-sustainable-kitchen"
    assert drafts[0].takeaways == ["Use wraps", "Compost scraps", "Buy loose"]
    assert drafts[1].id == "certs"
    assert drafts[1].author == ""


@pytest.mark.asyncio
async def test_write_articles_missing_body_is_shape_error():
    bad = {"articles": [{"title": "T", "summary": "S"}]}
    generator = FakeGenerator(routes=[("blog posts", fenced(bad))])
    with pytest.raises(ShapeError) as exc_info:
        await ContentWriter(generator).write_articles()
    assert "0.content" in exc_info.value.missing


@pytest.mark.asyncio
async def test_illustrate_falls_back_to_placeholder():
    generator = FakeGenerator(image=GenerationError("image generation failed"))
    assert await ContentWriter(generator).illustrate("Kitchen swaps") == IMAGE_PLACEHOLDER


@pytest.mark.asyncio
async def test_answer_question():
    generator = FakeGenerator(routes=[
        ("Eco Jinner", fenced({"answer": "Yes, mostly.", "relatedQuestions": ["Is it compostable?"]})),
    ])
    answer = await ContentWriter(generator).answer("  Is bamboo sustainable? ")
    assert answer.answer == "Yes, mostly."
    assert answer.related_questions == ["Is it compostable?"]
    assert '"Is bamboo sustainable?"' in generator.prompts[0]


@pytest.mark.asyncio
async def test_blank_question_is_rejected():
    generator = FakeGenerator()
    with pytest.raises(ValueError, match="No question provided."):
        await ContentWriter(generator).answer("   ")
    assert generator.prompts == []


# === catalogue articles ===

BODY_ROUTE = "sustainable living in India. Write a detailed"
TAKEAWAYS_ROUTE = "Key Takeaways"


def test_catalogue_lists_curated_articles():
    ids = [a.id for a in ContentWriter(FakeGenerator()).list_articles()]
    assert ids == ["guide-to-eco-certifications", "kitchen-swaps", "cosmetic-ingredients"]


@pytest.mark.asyncio
async def test_write_article_unknown_id_makes_no_calls():
    generator = FakeGenerator()
    with pytest.raises(NotFoundError, match="Article not found."):
        await ContentWriter(generator).write_article("no-such-article")
    assert generator.prompts == []
    assert generator.image_prompts == []


@pytest.mark.asyncio
async def test_write_article_splits_bulleted_takeaways():
    generator = FakeGenerator(routes=[
        (BODY_ROUTE, "## Swap 1\nUse beeswax wraps."),
        (TAKEAWAYS_ROUTE, "* Ditch cling film\n* Compost scraps\n- Buy loose produce"),
    ])
    article = await ContentWriter(generator).write_article("kitchen-swaps")

    assert article.content == "## Swap 1\nUse beeswax wraps."
    assert article.takeaways == ["Ditch cling film", "Compost scraps", "Buy loose produce"]
    assert article.image == "data:image/png;base64,AAAA"
    assert "5 Simple Swaps for a More Sustainable Kitchen" in generator.prompts[0]
    assert "Summary: Ready to reduce waste" in generator.prompts[0]


@pytest.mark.asyncio
async def test_write_article_image_failure_uses_placeholder():
    generator = FakeGenerator(
        routes=[(BODY_ROUTE, "Body"), (TAKEAWAYS_ROUTE, "- One")],
        image=GenerationError("image generation failed: HTTP 500"),
    )
    article = await ContentWriter(generator).write_article("cosmetic-ingredients")
    assert article.image == IMAGE_PLACEHOLDER
    assert article.content == "Body"


@pytest.mark.asyncio
async def test_write_article_text_failure_propagates():
    generator = FakeGenerator(routes=[
        (BODY_ROUTE, "Body"),
        (TAKEAWAYS_ROUTE, GenerationError("generation failed: HTTP 429")),
    ])
    with pytest.raises(GenerationError):
        await ContentWriter(generator).write_article("kitchen-swaps")


# === ProductAnalyst ===

ANALYSIS = {
    "productName": "Plastic Water Bottle",
    "isRecommended": False,
    "verdict": "Avoid.",
    "ecoScore": {"score": 20, "title": "Poor", "justification": "Virgin plastic."},
    "summary": "## Summary",
    "scoutKeywords": ["Steel bottle", "Glass bottle"],
}


@pytest.mark.asyncio
async def test_analyze_parses_camel_case_payload():
    generator = FakeGenerator(routes=[("sustainability analyst", fenced(ANALYSIS))])
    analysis = await ProductAnalyst(generator).analyze("Plastic bottle", "Kitchen")

    assert analysis.product_name == "Plastic Water Bottle"
    assert analysis.eco_score.score == 20
    assert analysis.scout_keywords == ["Steel bottle", "Glass bottle"]
    assert analysis.recommendations_title == "Better, Eco-Friendly Alternatives"
    assert "No description provided" in generator.prompts[0]


@pytest.mark.asyncio
async def test_analyze_requires_title_and_category():
    with pytest.raises(ValueError):
        await ProductAnalyst(FakeGenerator()).analyze("", "Kitchen")


@pytest.mark.asyncio
async def test_analyze_without_keywords_is_shape_error():
    payload = {k: v for k, v in ANALYSIS.items() if k != "scoutKeywords"}
    generator = FakeGenerator(routes=[("sustainability analyst", fenced(payload))])
    with pytest.raises(ShapeError):
        await ProductAnalyst(generator).analyze("Plastic bottle", "Kitchen")


@pytest.mark.asyncio
async def test_scan_sends_image_and_schema():
    scan = {"name": "Oat Milk", "brand": "Oatly", "product_category": "Food", "ecoScore": "B", "carbonFootprint": 0.9}
    generator = FakeGenerator(routes=[("Analyze the product", fenced(scan))])

    result = await ProductAnalyst(generator).scan("QUJD")

    assert result.name == "Oat Milk"
    assert result.eco_score == "B"
    assert result.image == "data:image/jpeg;base64,QUJD"
    assert generator.kwargs[0]["image_b64"] == "QUJD"
    assert generator.kwargs[0]["response_schema"]["required"] == ["name", "brand", "product_category"]


@pytest.mark.asyncio
async def test_scan_failure_degrades_to_failed_result():
    generator = FakeGenerator(routes=[("Analyze the product", GenerationError("generation failed: timeout"))])
    result = await ProductAnalyst(generator).scan("QUJD")
    assert result.name == "Analysis Failed"
    assert result.brand == "Please try again"
    assert result.image == "data:image/jpeg;base64,QUJD"
