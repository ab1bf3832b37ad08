#!/usr/bin/env python
"""
Extract a recipe from a URL or a saved HTML file and print it as JSON.

Run manually:
    python scripts/parse_url.py https://example.com/some-recipe
    python scripts/parse_url.py page.html --source-url https://example.com/some-recipe
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from recipe_keeper.app.core.config import get_settings
from recipe_keeper.app.services import url_recipe_parser
from recipe_keeper.app.services.url_parsing import ExtractionFailure, decode_html, fetch_html, format_duration

logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger("parse_url")


def _is_url(target: str) -> bool:
    return target.startswith(("http://", "https://"))


def _load_document(target: str) -> str:
    if _is_url(target):
        return asyncio.run(fetch_html(target))
    return decode_html(Path(target).read_bytes())


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("target", help="Recipe page URL or path to a saved HTML file")
    parser.add_argument("--source-url", help="URL the saved HTML file came from")
    parser.add_argument("--pretty-times", action="store_true", help="Render durations for humans")
    args = parser.parse_args(argv)
    if not _is_url(args.target) and not args.source_url:
        parser.error("--source-url is required when reading a saved HTML file")

    source_url = args.source_url or args.target
    try:
        document = _load_document(args.target)
        record, strategy = url_recipe_parser.run_extraction(document, source_url)
    except ExtractionFailure as exc:
        logger.error("%s (%s)", exc.message, exc.detail)
        return 1

    logger.info("Parsed with %s", strategy)
    payload = record.model_dump(mode="json", by_alias=True)
    if args.pretty_times:
        for key in ("cookTime", "prepTime", "totalTime"):
            payload[key] = format_duration(payload[key])
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
