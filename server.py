"""HTTP function surface for the web app and browser extension.

Routes (all JSON, all with permissive CORS):
    GET|POST /discover-content   Discovery page (cached for CACHE_TTL_SECONDS)
    POST /learn-content          {action, payload}; actions: getArticleList,
                                 getArticleContent, getFullContent, askQuestion
    POST /gemini-proxy           {category, title[, description]} -> analysis
    POST /scan-image             {image: base64 JPEG} -> scan result
    OPTIONS *                    Preflight (204)

Error Responses:
    400 for missing/invalid client input, 500 with a generic message for
    everything else. Internal error text is logged, never returned.
"""

import logging
import time
from typing import Any, Callable

from aiohttp import web

from config import Config
from errors import NotFoundError
from models.product import DiscoveryResult
from pipeline import Pipeline

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

CONFIG_ERROR = "API keys are not configured."
DISCOVER_ERROR = "An internal server error occurred while discovering products."
GENERIC_ERROR = "An internal server error occurred."

PIPELINE_KEY = web.AppKey("pipeline", Pipeline)
CONFIG_KEY = web.AppKey("config", Config)


class DiscoveryCache:
    """Keeps the last successful discovery result for a short period."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._stored_at: float | None = None
        self._data: dict[str, Any] | None = None

    def get(self) -> dict[str, Any] | None:
        if self._data is None or self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            return None
        return self._data

    def set(self, data: dict[str, Any]) -> None:
        self._data = data
        self._stored_at = self._clock()


CACHE_KEY = web.AppKey("discovery_cache", DiscoveryCache)


def _json(data: Any, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, headers=CORS_HEADERS)


def _error(message: str, status: int = 500) -> web.Response:
    return _json({"error": message}, status=status)


async def _read_body(request: web.Request) -> dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _pipeline(request: web.Request) -> Pipeline | None:
    return request.app[PIPELINE_KEY]


async def handle_preflight(request: web.Request) -> web.Response:
    return web.Response(status=204, headers=CORS_HEADERS)


async def handle_discover(request: web.Request) -> web.Response:
    pipeline = _pipeline(request)
    if pipeline is None:
        return _error(CONFIG_ERROR)

    cache: DiscoveryCache = request.app[CACHE_KEY]
    if (cached := cache.get()) is not None:
        logger.debug("Discovery served from cache")
        return _json(cached)

    try:
        result: DiscoveryResult = await pipeline.discover()
    except Exception as e:
        logger.error("Error in discovery engine: %s", e)
        return _error(DISCOVER_ERROR)

    data = result.to_dict()
    cache.set(data)
    return _json(data)


async def handle_learn(request: web.Request) -> web.Response:
    pipeline = _pipeline(request)
    if pipeline is None:
        return _error(CONFIG_ERROR)

    body = await _read_body(request)
    action = body.get("action")
    payload = body.get("payload")

    try:
        if action == "getArticleList":
            return _json({"articles": [a.model_dump(mode="json") for a in pipeline.get_article_list()]})
        if action == "getArticleContent":
            if not isinstance(payload, str) or not payload:
                return _error("No article id provided.", status=400)
            content = await pipeline.get_article_content(payload)
            return _json(content.model_dump(mode="json"))
        if action == "getFullContent":
            articles = await pipeline.get_full_content()
            return _json({"articles": [a.model_dump(mode="json") for a in articles]})
        if action == "askQuestion":
            if not isinstance(payload, str) or not payload.strip():
                return _error("No question provided.", status=400)
            answer = await pipeline.ask_question(payload)
            return _json(answer.model_dump(mode="json", by_alias=True))
    except NotFoundError as e:
        return _error(str(e), status=400)
    except Exception as e:
        logger.error("Learn hub error | action=%s error=%s", action, e)
        return _error(GENERIC_ERROR)

    return _error("Invalid action.", status=400)


async def handle_analyze(request: web.Request) -> web.Response:
    pipeline = _pipeline(request)
    if pipeline is None:
        return _error(CONFIG_ERROR)

    body = await _read_body(request)
    title = body.get("title")
    category = body.get("category")
    if not title or not category:
        return _error("Title and category are required.", status=400)

    try:
        analysis = await pipeline.analyze_product(
            str(title), str(category), str(body.get("description") or "")
        )
    except Exception as e:
        logger.error("Product analysis error: %s", e)
        return _error(GENERIC_ERROR)

    return _json(analysis.model_dump(mode="json", by_alias=True))


async def handle_scan(request: web.Request) -> web.Response:
    pipeline = _pipeline(request)
    if pipeline is None:
        return _error(CONFIG_ERROR)

    body = await _read_body(request)
    image = body.get("image")
    if not isinstance(image, str) or not image:
        return _error("An image is required.", status=400)

    try:
        result = await pipeline.scan_image(image)
    except Exception as e:
        logger.error("Image scan error: %s", e)
        return _error(GENERIC_ERROR)

    return _json(result.model_dump(mode="json", by_alias=True))


def create_app(config: Config, pipeline: Pipeline | None = None) -> web.Application:
    """Build the aiohttp application.

    Args:
        config: Application configuration
        pipeline: Pre-built pipeline (opened by the app if not given and
            the configuration is valid)
    """
    owned = pipeline is None
    if owned:
        if error := config.validate():
            logger.error("Configuration error: %s", error)
        else:
            pipeline = Pipeline(config)

    app = web.Application()
    app[CONFIG_KEY] = config
    app[CACHE_KEY] = DiscoveryCache(config.cache_ttl_seconds)
    app[PIPELINE_KEY] = pipeline

    async def on_startup(app: web.Application) -> None:
        if owned and app[PIPELINE_KEY] is not None:
            await app[PIPELINE_KEY].open()

    async def on_cleanup(app: web.Application) -> None:
        if app[PIPELINE_KEY] is not None:
            await app[PIPELINE_KEY].close()

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    app.router.add_get("/discover-content", handle_discover)
    app.router.add_post("/discover-content", handle_discover)
    app.router.add_post("/learn-content", handle_learn)
    app.router.add_post("/gemini-proxy", handle_analyze)
    app.router.add_post("/scan-image", handle_scan)
    app.router.add_route("OPTIONS", "/{tail:.*}", handle_preflight)
    return app


def run_server(config: Config) -> None:
    """Serve the application until interrupted."""
    logger.info("Starting server | host=%s port=%d", config.server_host, config.server_port)
    web.run_app(
        create_app(config),
        host=config.server_host,
        port=config.server_port,
        print=None,
    )
