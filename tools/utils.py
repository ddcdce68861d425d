"""Shared utilities for tools module.

Constants and helpers used by more than one tool.
"""

import ssl
from urllib.parse import quote

import certifi

# Browser-like User-Agent; some storefronts reject HEAD requests without one
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

PLACEHOLDER_BASE = "https://placehold.co"


def create_ssl_context(verify: bool = True) -> ssl.SSLContext:
    """Create SSL context with optional certificate verification.

    Args:
        verify: If True, verify SSL certificates using certifi bundle.
                If False, disable verification (for problematic servers).

    Returns:
        Configured SSL context
    """
    if verify:
        return ssl.create_default_context(cafile=certifi.where())
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


def encode_component(value: str) -> str:
    """Percent-encode a value for use inside a URL query component."""
    return quote(value, safe="")


def placeholder_image(text: str, size: str = "600x400") -> str:
    """Build a deterministic placeholder image URL labelled with text."""
    return f"{PLACEHOLDER_BASE}/{size}/334155/white?text={encode_component(text)}"


def search_url(keyword: str) -> str:
    """Generic web search URL for a keyword."""
    return f"https://www.google.com/search?q={encode_component(keyword)}"
