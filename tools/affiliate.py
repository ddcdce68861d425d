"""Affiliate tagging for outbound store links.

Adds the configured Amazon affiliate tag to Amazon links. Other hosts and
unparseable URLs are returned unchanged.
"""

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

AMAZON_HOSTS = ("amazon.in", "amazon.com")


def add_affiliate_tag(url: str, tag: str) -> str:
    """Return url with tag set as its 'tag' query parameter when it is an Amazon link.

    Example:
        >>> add_affiliate_tag("https://www.amazon.in/s?k=bottle", "ecojinner-21")
        'https://www.amazon.in/s?k=bottle&tag=ecojinner-21'
    """
    if not url or not tag:
        return url

    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
    except ValueError:
        logger.warning("Could not parse URL for affiliate tag: %s", url[:80])
        return url

    if not any(host == h or host.endswith("." + h) for h in AMAZON_HOSTS):
        return url

    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "tag"]
    query.append(("tag", tag))
    return urlunsplit(parts._replace(query=urlencode(query)))
