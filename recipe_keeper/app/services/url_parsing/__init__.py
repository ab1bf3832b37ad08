"""URL recipe parsing package.

This package provides functionality for extracting recipes from URLs using
multiple strategies: schema.org JSON-LD, schema.org microdata, and heuristic
HTML parsing.
"""

from recipe_keeper.app.services.url_parsing.errors import ExtractionFailure, FetchError
from recipe_keeper.app.services.url_parsing.html_fetcher import (
    decode_html,
    fetch_html,
    is_private_host,
)
from recipe_keeper.app.services.url_parsing.models import ParseResult, RecipeRecord
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    coerce_keywords,
    dedupe_categories,
    extract_image,
    extract_instruction_text,
    format_duration,
    normalize_yield,
    placeholder_image_url,
    resolve_image_url,
)

__all__ = [
    # Models
    "ParseResult",
    "RecipeRecord",
    # Errors
    "ExtractionFailure",
    "FetchError",
    # HTML fetching
    "decode_html",
    "fetch_html",
    "is_private_host",
    # Parsing utilities
    "clean_text",
    "coerce_keywords",
    "dedupe_categories",
    "extract_image",
    "extract_instruction_text",
    "format_duration",
    "normalize_yield",
    "placeholder_image_url",
    "resolve_image_url",
]
