"""External-call tools for the EcoScout pipeline.

GeminiClient:
    Text generation (generateContent) and Imagen image generation.

parse_payload / extract:
    Recover JSON objects from raw model text (fenced block, then raw).

SerperClient:
    Shopping and image search.

verify_link:
    Bounded HEAD check for scouted links.

add_affiliate_tag:
    Tag Amazon links with the configured affiliate id.

Example:
    >>> from tools import GeminiClient, extract
    >>> text = await gemini.generate(prompt)
    >>> payload = extract(text, required=("trending_categories",))
"""

from tools.utils import create_ssl_context, placeholder_image, search_url, USER_AGENT
from tools.gemini import GeminiClient
from tools.extract import ExtractResult, extract, parse_payload
from tools.search import SearchError, SerperClient
from tools.verify import verify_link
from tools.affiliate import add_affiliate_tag

__all__ = [
    "GeminiClient",
    "ExtractResult",
    "extract",
    "parse_payload",
    "SearchError",
    "SerperClient",
    "verify_link",
    "add_affiliate_tag",
    "create_ssl_context",
    "placeholder_image",
    "search_url",
    "USER_AGENT",
]
