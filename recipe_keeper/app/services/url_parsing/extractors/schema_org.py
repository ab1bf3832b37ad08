"""Schema.org JSON-LD recipe extraction."""

import json
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from recipe_keeper.app.core.config import get_settings
from recipe_keeper.app.services.url_parsing.models import RecipeRecord
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    coerce_keywords,
    extract_image,
    extract_instruction_text,
    normalize_yield,
)
from recipe_keeper.app.services.url_parsing.record_builder import build_record, is_viable

logger = logging.getLogger(__name__)

_JSON_LD_TYPE_RE = re.compile(r"application/ld\+json", re.I)


def _is_recipe_type(value) -> bool:
    types = [value] if isinstance(value, str) else value
    if not isinstance(types, list):
        return False
    return any(isinstance(t, str) and t.lower() == "recipe" for t in types)


def find_recipe_nodes(data, max_depth: int, depth: int = 0) -> List[dict]:
    """Depth-first search of a JSON-LD value for Recipe-typed objects.

    Lists are searched element by element, a Recipe object is returned as is,
    ``@graph`` arrays are filtered for Recipes, and otherwise every nested
    object or list is searched in key order. The first non-empty hit wins.
    """
    if depth > max_depth:
        logger.debug("JSON-LD search stopped at depth %d", depth)
        return []
    if isinstance(data, list):
        for item in data:
            found = find_recipe_nodes(item, max_depth, depth + 1)
            if found:
                return found
        return []
    if not isinstance(data, dict):
        return []

    if _is_recipe_type(data.get("@type")):
        return [data]

    graph = data.get("@graph")
    if isinstance(graph, list):
        recipes = [
            item for item in graph if isinstance(item, dict) and _is_recipe_type(item.get("@type"))
        ]
        if recipes:
            return recipes

    for value in data.values():
        if isinstance(value, (dict, list)):
            found = find_recipe_nodes(value, max_depth, depth + 1)
            if found:
                return found
    return []


def _scalar_text(value) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return clean_text(value)
    return ""


def _extract_ingredient_list(node: dict) -> List[str]:
    raw = node.get("recipeIngredient")
    if not isinstance(raw, list):
        raw = node.get("ingredients")
    if not isinstance(raw, list):
        return []
    return [text for text in (_scalar_text(item) for item in raw) if text]


def _extract_categories(node: dict) -> List[str]:
    categories: List[str] = []
    recipe_category = node.get("recipeCategory")
    if isinstance(recipe_category, list):
        categories.extend(_scalar_text(item) for item in recipe_category)
    elif isinstance(recipe_category, str):
        categories.append(clean_text(recipe_category))
    categories.extend(coerce_keywords(node.get("keywords")))
    return categories


def _extract_yield(value) -> str:
    if isinstance(value, list):
        for item in value:
            if isinstance(item, str) and item.strip():
                return normalize_yield(item.strip())
        return ""
    if isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return normalize_yield(value)
    return ""


def _time_value(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def map_recipe_node(node: dict, url: str) -> Optional[RecipeRecord]:
    """Map one schema.org Recipe object onto a record, or None if not viable."""
    title = _scalar_text(node.get("name"))
    ingredients = _extract_ingredient_list(node)
    directions = extract_instruction_text(node.get("recipeInstructions"))

    logger.info(
        "Recipe candidate: title=%s, ingredients=%d, directions=%d",
        title[:50] if title else "None",
        len(ingredients),
        len(directions),
    )
    if not is_viable(title, ingredients, directions):
        logger.warning("Recipe candidate is missing a title or both ingredients and directions")
        return None

    return build_record(
        url=url,
        title=title,
        description=_scalar_text(node.get("description")),
        image=extract_image(node.get("image")),
        ingredients=ingredients,
        directions=directions,
        categories=_extract_categories(node),
        cook_time=_time_value(node.get("cookTime")),
        prep_time=_time_value(node.get("prepTime")),
        total_time=_time_value(node.get("totalTime")),
        recipe_yield=_extract_yield(node.get("recipeYield")),
    )


def extract_recipe_from_schema_org(soup: BeautifulSoup, url: str) -> Optional[RecipeRecord]:
    """Extract recipe from schema.org JSON-LD data embedded in the page."""
    max_depth = get_settings().json_ld_max_depth
    scripts = soup.find_all("script", attrs={"type": _JSON_LD_TYPE_RE})
    logger.info("Found %d JSON-LD script blocks", len(scripts))

    for idx, script in enumerate(scripts):
        raw_json = (script.string or script.get_text() or "").strip()
        if not raw_json:
            logger.debug("JSON-LD block %d is empty", idx)
            continue
        try:
            data = json.loads(raw_json)
        except (ValueError, RecursionError) as exc:
            logger.warning(
                "JSON-LD block %d failed to parse: %s (first 200 chars: %s)",
                idx,
                exc,
                raw_json[:200],
            )
            continue

        recipes = find_recipe_nodes(data, max_depth)
        if not recipes:
            logger.debug("JSON-LD block %d has no Recipe node", idx)
            continue
        logger.info("JSON-LD block %d has %d Recipe node(s)", idx, len(recipes))

        record = map_recipe_node(recipes[0], url)
        if record:
            return record
    return None
