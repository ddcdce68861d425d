#!/usr/bin/env python3
"""EcoScout: AI-curated sustainable product discovery.

This CLI tool spots trending eco-friendly product categories with Gemini,
scouts a concrete product for each via shopping/image search, writes
learn-hub articles, and analyzes or scans individual products.

Commands:
    discover    Build the discovery page (trends -> scouted products)
    learn       Generate learn-hub articles with images
    ask         Answer a sustainability question
    analyze     Assess a product and scout alternatives
    scan        Identify a product from a photo
    scout       Find a single product for a keyword
    verify      Check whether a link is alive
    serve       Run the HTTP server
    status      Show configuration

Examples:
    python main.py discover                         # JSON to stdout
    python main.py learn
    python main.py learn --article kitchen-swaps
    python main.py ask "Is bamboo really sustainable?"
    python main.py analyze --title "Plastic bottle" --category "Kitchen"
    python main.py scan --image photo.jpg
    python main.py scout --keyword "reusable water bottle"
    python main.py serve --port 8888

Environment:
    GEMINI_API_KEY, SERPER_API_KEY: Required for AI and search
    See config.py for all configuration options
"""

import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

from config import Config
from observability.logging import setup_logging

logger = logging.getLogger(__name__)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _run(args: argparse.Namespace, config: Config, op: Callable[[Any], Awaitable[Any]]) -> int:
    """Open a pipeline, run one operation and print its JSON result.

    Returns:
        Exit code (0 success, 1 failure, 130 interrupted)
    """
    from pipeline import Pipeline

    async def runner() -> Any:
        async with Pipeline(config) as pipeline:
            return await op(pipeline)

    try:
        result = asyncio.run(runner())
    except KeyboardInterrupt:
        logger.info("Stopped by user (Ctrl+C)")
        return 130
    except Exception as e:
        logger.error("Command failed | cmd=%s error=%s type=%s", args.command, e, type(e).__name__, exc_info=True)
        print(f"Error: {args.command} failed. See log for details.", file=sys.stderr)
        return 1

    _print_json(result)
    return 0


def cmd_discover(args: argparse.Namespace, config: Config) -> int:
    """Print the discovery page as JSON."""
    if args.verify_links:
        config.verify_links = True
    if args.count:
        config.trend_count = args.count

    async def op(pipeline):
        return (await pipeline.discover()).to_dict()

    return _run(args, config, op)


def cmd_learn(args: argparse.Namespace, config: Config) -> int:
    """Print learn-hub articles as JSON."""
    if args.count:
        config.article_count = args.count

    async def op(pipeline):
        if args.list:
            return {"articles": [a.model_dump(mode="json") for a in pipeline.get_article_list()]}
        if args.article:
            return (await pipeline.get_article_content(args.article)).model_dump(mode="json")
        articles = await pipeline.get_full_content()
        return {"articles": [a.model_dump(mode="json") for a in articles]}

    return _run(args, config, op)


def cmd_ask(args: argparse.Namespace, config: Config) -> int:
    """Answer a sustainability question."""
    async def op(pipeline):
        answer = await pipeline.ask_question(args.question)
        return answer.model_dump(mode="json", by_alias=True)

    return _run(args, config, op)


def cmd_analyze(args: argparse.Namespace, config: Config) -> int:
    """Assess a product and scout alternatives."""
    async def op(pipeline):
        analysis = await pipeline.analyze_product(args.title, args.category, args.description or "")
        return analysis.model_dump(mode="json", by_alias=True)

    return _run(args, config, op)


def cmd_scan(args: argparse.Namespace, config: Config) -> int:
    """Identify a product from an image file."""
    path = Path(args.image)
    if not path.is_file():
        print(f"Error: image not found: {path}", file=sys.stderr)
        return 1
    image_b64 = base64.b64encode(path.read_bytes()).decode("ascii")

    async def op(pipeline):
        result = await pipeline.scan_image(image_b64)
        return result.model_dump(mode="json", by_alias=True)

    return _run(args, config, op)


def cmd_scout(args: argparse.Namespace, config: Config) -> int:
    """Find one product for a keyword."""
    if args.affiliate_tag:
        config.affiliate_tag = args.affiliate_tag

    async def op(pipeline):
        record = await pipeline.find_product(args.keyword)
        return record.model_dump(mode="json")

    return _run(args, config, op)


def cmd_verify(args: argparse.Namespace, config: Config) -> int:
    """Check a link without needing any API key."""
    from tools.verify import verify_link

    if args.timeout:
        config.verify_timeout = args.timeout

    try:
        ok = asyncio.run(verify_link(args.url, timeout=config.verify_timeout))
    except KeyboardInterrupt:
        return 130

    _print_json({"url": args.url, "ok": ok})
    return 0 if ok else 1


def cmd_serve(args: argparse.Namespace, config: Config) -> int:
    """Run the HTTP server until interrupted."""
    from server import run_server

    if args.host:
        config.server_host = args.host
    if args.port:
        config.server_port = args.port

    try:
        run_server(config)
    except KeyboardInterrupt:
        logger.info("Stopped by user (Ctrl+C)")
        return 130
    return 0


def cmd_status(args: argparse.Namespace, config: Config) -> int:
    """Display configuration. Keys are reported as set/unset only."""
    status = {
        "config": {
            "gemini_api_key": "set" if config.gemini_api_key else "missing",
            "serper_api_key": "set" if config.serper_api_key else "missing",
            "gemini_model": config.gemini_model,
            "imagen_model": config.imagen_model,
            "search_region": config.search_region,
            "trend_count": config.trend_count,
            "article_count": config.article_count,
            "verify_links": config.verify_links,
            "affiliate_tag": bool(config.affiliate_tag),
            "request_timeout": config.request_timeout,
            "verify_timeout": config.verify_timeout,
            "enable_logfire": config.enable_logfire,
        },
        "server": {
            "host": config.server_host,
            "port": config.server_port,
            "cache_ttl_seconds": config.cache_ttl_seconds,
        },
        "valid": config.validate() is None,
    }

    _print_json(status)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="EcoScout: AI-curated sustainable product discovery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # discover command
    discover_parser = subparsers.add_parser("discover", help="Build the discovery page")
    discover_parser.add_argument(
        "--count",
        type=int,
        help="Number of trending categories (default: config TREND_COUNT)",
    )
    discover_parser.add_argument(
        "--verify-links",
        action="store_true",
        help="Replace dead product links with a web search link",
    )

    # learn command
    learn_parser = subparsers.add_parser("learn", help="Generate learn-hub articles")
    learn_parser.add_argument(
        "--count",
        type=int,
        help="Number of articles (default: config ARTICLE_COUNT)",
    )
    learn_group = learn_parser.add_mutually_exclusive_group()
    learn_group.add_argument(
        "--list",
        action="store_true",
        help="Print the curated article catalogue",
    )
    learn_group.add_argument(
        "--article",
        help="Expand one catalogue article by id (body, takeaways, image)",
    )

    # ask command
    ask_parser = subparsers.add_parser("ask", help="Answer a sustainability question")
    ask_parser.add_argument("question", help="The question to answer")

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Assess a product and scout alternatives")
    analyze_parser.add_argument("--title", required=True, help="Product title")
    analyze_parser.add_argument("--category", required=True, help="Product category")
    analyze_parser.add_argument("--description", help="Product description")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Identify a product from a photo")
    scan_parser.add_argument("--image", required=True, help="Path to a JPEG image")

    # scout command
    scout_parser = subparsers.add_parser("scout", help="Find a single product")
    scout_parser.add_argument("--keyword", required=True, help="Product keyword")
    scout_parser.add_argument("--affiliate-tag", help="Amazon affiliate tag to apply")

    # verify command
    verify_parser = subparsers.add_parser("verify", help="Check whether a link is alive")
    verify_parser.add_argument("--url", required=True, help="Link to check")
    verify_parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait (default: config VERIFY_TIMEOUT)",
    )

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Bind host (default: config SERVER_HOST)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default: config SERVER_PORT)")

    # status command
    subparsers.add_parser("status", help="Show configuration")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Load configuration
    config = Config.load()

    # Setup logging
    setup_logging(config, verbose=args.verbose)

    # Validate configuration for commands that need it
    if args.command in ("discover", "learn", "ask", "analyze", "scan", "scout", "serve"):
        error = config.validate()
        if error:
            print(f"Configuration error: {error}", file=sys.stderr)
            return 1

    # Route to command handler
    commands = {
        "discover": cmd_discover,
        "learn": cmd_learn,
        "ask": cmd_ask,
        "analyze": cmd_analyze,
        "scan": cmd_scan,
        "scout": cmd_scout,
        "verify": cmd_verify,
        "serve": cmd_serve,
        "status": cmd_status,
    }

    if args.command in commands:
        if args.command == "ask" and not args.question.strip():
            print("Error: a question is required", file=sys.stderr)
            return 1
        return commands[args.command](args, config)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
