import logging
from typing import Tuple, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup

from recipe_keeper.app.services.url_parsing.errors import ExtractionFailure, FetchError
from recipe_keeper.app.services.url_parsing.extractors import (
    extract_recipe_from_microdata,
    extract_recipe_from_schema_org,
    extract_recipe_heuristic,
)
from recipe_keeper.app.services.url_parsing.html_fetcher import fetch_html
from recipe_keeper.app.services.url_parsing.models import ParseResult, RecipeRecord

logger = logging.getLogger(__name__)

Document = Union[str, bytes, BeautifulSoup]


def parse_document(document: Document) -> BeautifulSoup:
    if isinstance(document, BeautifulSoup):
        return document
    try:
        return BeautifulSoup(document or "", "lxml")
    except ParserRejectedMarkup as exc:
        raise ExtractionFailure(detail=f"Unparseable document: {exc}") from exc


def run_extraction(document: Document, source_url: str) -> Tuple[RecipeRecord, str]:
    """Try JSON-LD, then microdata, then heuristics; the first viable record wins.

    The heuristic tier always yields a record, so ExtractionFailure only
    surfaces when the document cannot be parsed or the heuristic tier breaks.
    """
    soup = parse_document(document)
    tiers = (
        ("schema_org_json_ld", extract_recipe_from_schema_org),
        ("microdata", extract_recipe_from_microdata),
    )
    for strategy, extractor in tiers:
        try:
            record = extractor(soup, source_url)
        except Exception:  # noqa: BLE001
            logger.exception("%s extraction failed for %s", strategy, source_url)
            continue
        if record:
            logger.info("Extracted %s using %s", source_url, strategy)
            return record.model_copy(update={"url": source_url}), strategy

    try:
        record = extract_recipe_heuristic(soup, source_url)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Heuristic extraction failed for %s", source_url)
        raise ExtractionFailure(detail=str(exc)) from exc
    logger.info("Extracted %s using heuristic", source_url)
    return record, "heuristic"


def extract_recipe(document: Document, source_url: str) -> RecipeRecord:
    record, _ = run_extraction(document, source_url)
    return record


async def parse_recipe_from_url(url: str) -> ParseResult:
    try:
        html = await fetch_html(url)
    except FetchError as exc:
        logger.warning("Failed to fetch URL %s: %s", url, exc.detail)
        return ParseResult(success=False, error_code=exc.error_code, error_message=exc.message)

    try:
        record, strategy = run_extraction(html, url)
    except ExtractionFailure as exc:
        logger.warning("Failed to extract recipe from %s: %s", url, exc.detail)
        return ParseResult(success=False, error_code=exc.error_code, error_message=exc.message)

    return ParseResult(success=True, recipe=record, parser_strategy=strategy)
