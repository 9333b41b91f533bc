"""Main entry point for the URL unshortener."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .agent.unshorten_agent import Unshortener
from .config.loader import Config, load_config
from .models.unshorten_result import UnshortenResult


async def _unshorten_all(urls: list[str], config: Config) -> list[UnshortenResult]:
    async with Unshortener(config) as unshortener:
        return [await unshortener.unshorten(url) for url in urls]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Resolve shortened URLs to their final destination"
    )
    parser.add_argument("urls", nargs="+", metavar="URL", help="URL(s) to unshorten")
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (YAML or JSON)",
    )
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip external verification services",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON result per line",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Config not found: {config_path}", file=sys.stderr)
            return 1
        config = load_config(config_path)
    else:
        config = Config()
    if args.no_verify:
        config = config.with_verification(False)

    results = asyncio.run(_unshorten_all(args.urls, config))
    for result in results:
        if args.json:
            print(result.model_dump_json())
        else:
            print(f"{result.url}\t{result.final_url}\t{result.status.value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
