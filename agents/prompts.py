"""Prompt templates for every AI call in the pipeline.

Declared-shape prompts embed the exact JSON structure the caller will
extract; the matching REQUIRED_* tuples list the keys the extractor checks.
"""

# === Trend spotter ===

TREND_REQUIRED = ("trending_categories",)


def trend_spotter_prompt(count: int = 6) -> str:
    return f"""You are an AI market trend analyst for India. Identify {count} current and popular trending categories of sustainable, eco-friendly products. Provide unique and interesting categories.

**JSON Output (MUST follow this exactly):**
```json
{{
  "trending_categories": [
    {{ "category": "Upcycled Home Decor", "example_product": "Handmade rug from recycled fabrics" }},
    {{ "category": "Zero-Waste Dental Care", "example_product": "Natural toothpaste tablets" }},
    {{ "category": "Cruelty-Free Vegan Skincare", "example_product": "Plant-based face serum" }},
    {{ "category": "Sustainable Kitchen Storage", "example_product": "Beeswax food wraps" }},
    {{ "category": "Artisanal Indian Crafts", "example_product": "Block-print cotton scarf" }},
    {{ "category": "Solar-Powered Gadgets", "example_product": "Solar power bank for phones" }}
  ]
}}
```
Return exactly {count} entries."""


# === Product scout ===

LINK_REQUIRED = ("description", "amazon_link")


def description_prompt(keyword: str) -> str:
    return (
        "You are a marketing expert. Write a short, exciting, and compelling "
        f'description (around 15 words) for the product: "{keyword}". Use emojis. '
        "Return only the description."
    )


def link_prompt(keyword: str) -> str:
    return f"""You are an intelligent shopping assistant. Your task is to generate a compelling product description and a highly relevant Amazon search link for a given product name.

**JSON Output Structure (MUST follow this exactly):**
```json
{{
  "description": "Your short, exciting, and compelling description (around 15-20 words) with emojis goes here.",
  "amazon_link": "Your generated Amazon search URL goes here (e.g., https://www.amazon.in/s?k=stainless+steel+bottle)."
}}
```
--- PRODUCT NAME ---
"{keyword}"
"""


# === Product analyst ===

ANALYST_REQUIRED = ("productName", "scoutKeywords")


def analyst_prompt(category: str, title: str, description: str = "") -> str:
    return f"""You are a senior sustainability analyst for a global market with expertise in India. Your task is to analyze a user's product and provide a comprehensive eco-assessment.

**JSON Output Structure (MUST follow this exactly):**
```json
{{
  "productName": "User's Product Name",
  "isRecommended": false,
  "verdict": "A short, clear verdict.",
  "ecoScore": {{
    "score": 25,
    "title": "Poor",
    "justification": "Made from virgin plastic with excessive non-recyclable packaging."
  }},
  "summary": "A detailed analysis in Markdown format.",
  "recommendationsTitle": "Better, Eco-Friendly Alternatives",
  "scoutKeywords": ["Stainless Steel Water Bottle", "Glass Water Bottle with Silicone Sleeve", "Handmade Copper Water Vessel"]
}}
```
--- USER INPUT ---
Category: {category}
Title: {title}
Description: {description or "No description provided"}
"""


# === Image scanner ===

SCAN_PROMPT = """Analyze the product in this image and return a single JSON object.
1. Identify the product's name, brand, and key attributes.
2. Determine whether the product is 'Food' or 'Non-Food'.
3. Estimate an eco score (A-E) and a carbon footprint in kg CO2e.
4. For food, add a short health analysis (rating, health concern, sufficient intake).
5. Suggest ONE best alternative: healthier for food, lower-carbon otherwise.
   - Commercial products: give a direct Amazon.in product link if you know one,
     otherwise a 'search_query' for Google Shopping.
   - Home-made remedies or DIY: give a short 'recipe' (food) or
     'diy_instructions' (non-food) as an array of strings.
6. Always add a second alternative that is a non-purchase lifestyle suggestion.
Ensure every field is logical and relevant to the pictured product."""


# === Learn hub ===

ARTICLES_REQUIRED = ("articles",)
ANSWER_REQUIRED = ("answer",)


def articles_prompt(count: int = 3) -> str:
    return f"""You are an expert on sustainable living in India writing for an eco-friendly shopping app. Write {count} original, engaging, and informative blog posts on different practical topics (for example eco-certifications, kitchen swaps, clean beauty).

Each article needs a detailed Markdown body (headings, lists, bold text) and 3-4 concise key takeaways.

**JSON Output Structure (MUST follow this exactly):**
```json
{{
  "articles": [
    {{
      "id": "kitchen-swaps",
      "title": "5 Simple Swaps for a More Sustainable Kitchen",
      "author": "Rohan Desai",
      "date": "August 5, 2025",
      "summary": "One or two sentence teaser.",
      "content": "## Heading\\nFull Markdown article body...",
      "takeaways": ["Takeaway 1", "Takeaway 2", "Takeaway 3"]
    }}
  ]
}}
```
Return exactly {count} articles."""


def article_body_prompt(title: str, summary: str) -> str:
    return (
        "You are an expert on sustainable living in India. Write a detailed, engaging, "
        "and informative blog post based on the following title and summary. Use Markdown "
        f"for formatting (headings, lists, bold text). Title: {title}. Summary: {summary}"
    )


def takeaways_prompt(title: str) -> str:
    return (
        f'Based on the article titled "{title}", generate a bulleted list of 3-4 '
        '"Key Takeaways". The tone should be concise and easy to understand.'
    )


def article_image_prompt(title: str) -> str:
    return (
        "Photorealistic, vibrant, high-quality stock photo representing the concept: "
        f'"{title}". The image should be clean, modern, and have a positive, '
        "eco-friendly aesthetic."
    )


def question_prompt(question: str) -> str:
    return f"""You are "Eco Jinner," an AI expert on sustainability in India. A user has asked the following question. Provide a clear, concise, and helpful answer (around 100-150 words). Then, suggest 3 related follow-up questions the user might have.

User's Question: "{question}"

**JSON Output Structure (MUST follow this exactly):**
```json
{{
  "answer": "Your detailed answer goes here.",
  "relatedQuestions": ["Follow-up question 1?", "Follow-up question 2?", "Follow-up question 3?"]
}}
```"""
