"""Link verification: a lightweight liveness check for scouted URLs.

A HEAD request (following redirects) with a bounded wait. Used as an
optional pre-trust filter before a scouted link reaches the renderer.

Never raises: anything other than a 2xx answer within the bound is False.
"""

import asyncio
import logging

import aiohttp

from tools.utils import create_ssl_context, USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_TIMEOUT = 3.5
_SCHEMES = ("http://", "https://")

# Shared by every check in the process
_SSL_CONTEXT = create_ssl_context()


async def _head_status(session: aiohttp.ClientSession, url: str, timeout: float) -> int:
    async with session.head(
        url,
        allow_redirects=True,
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers={"User-Agent": USER_AGENT},
        ssl=_SSL_CONTEXT,
    ) as resp:
        return resp.status


async def verify_link(
    url: str,
    session: aiohttp.ClientSession | None = None,
    timeout: float = DEFAULT_VERIFY_TIMEOUT,
) -> bool:
    """Check whether a URL answers with a 2xx status.

    Args:
        url: URL to check; must start with http:// or https://
        session: Shared session (a temporary one is opened if omitted)
        timeout: Upper bound on the whole check in seconds

    Returns:
        True for a 200-299 response, False otherwise
    """
    if not url or not url.lower().startswith(_SCHEMES):
        return False

    try:
        if session is None:
            async with aiohttp.ClientSession() as own_session:
                status = await asyncio.wait_for(_head_status(own_session, url, timeout), timeout)
        else:
            status = await asyncio.wait_for(_head_status(session, url, timeout), timeout)
    except asyncio.TimeoutError:
        logger.warning("Link verification timed out after %.1fs | url=%s", timeout, url[:80])
        return False
    except Exception as e:
        logger.warning("Link verification failed | url=%s error=%s", url[:80], e)
        return False

    ok = 200 <= status < 300
    if not ok:
        logger.debug("Link verification rejected | url=%s status=%d", url[:80], status)
    return ok
