"""Schema.org microdata (itemtype/itemprop) recipe extraction."""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from recipe_keeper.app.services.url_parsing.constants import RECIPE_ITEMTYPES
from recipe_keeper.app.services.url_parsing.models import RecipeRecord
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    element_text,
    normalize_yield,
)
from recipe_keeper.app.services.url_parsing.record_builder import build_record, is_viable

logger = logging.getLogger(__name__)


def _is_recipe_itemtype(value) -> bool:
    return isinstance(value, str) and value.strip().lower() in RECIPE_ITEMTYPES


def _itemprop_matcher(*names: str):
    def matches(value) -> bool:
        return isinstance(value, str) and any(name in value.split() for name in names)

    return matches


def _props(root: Tag, *names: str) -> List[Tag]:
    return root.find_all(attrs={"itemprop": _itemprop_matcher(*names)})


def _prop(root: Tag, name: str) -> Optional[Tag]:
    return root.find(attrs={"itemprop": _itemprop_matcher(name)})


def _text_or_content(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return element_text(element) or clean_text(element.get("content"))


def _extract_image(root: Tag) -> str:
    element = _prop(root, "image")
    if element is None:
        return ""
    for attr in ("src", "content", "href"):
        value = element.get(attr)
        if value and value.strip():
            return value.strip()
    nested = element.find("img")
    if nested is not None and nested.get("src"):
        return nested["src"].strip()
    return ""


def _extract_directions(root: Tag) -> List[str]:
    directions: List[str] = []
    for element in _props(root, "recipeInstructions"):
        list_items = element.find_all("li")
        if list_items:
            directions.extend(text for text in (element_text(li) for li in list_items) if text)
        else:
            text = element_text(element)
            if text:
                directions.append(text)
    return directions


def _extract_time(root: Tag, name: str) -> str:
    element = _prop(root, name)
    if element is None:
        return ""
    return (element.get("content") or "").strip()


def _extract_yield(root: Tag) -> str:
    element = _prop(root, "recipeYield")
    if element is None:
        return ""
    return normalize_yield(element.get("content") or element_text(element))


def extract_recipe_from_microdata(soup: BeautifulSoup, url: str) -> Optional[RecipeRecord]:
    """Extract recipe from an itemtype=schema.org/Recipe subtree."""
    root = soup.find(attrs={"itemtype": _is_recipe_itemtype})
    if root is None:
        logger.debug("No microdata Recipe root found")
        return None

    title = (
        _text_or_content(_prop(root, "name"))
        or element_text(soup.find("h1"))
        or element_text(soup.title)
    )
    ingredients = [
        text for text in (element_text(el) for el in _props(root, "recipeIngredient", "ingredients")) if text
    ]
    directions = _extract_directions(root)

    logger.info(
        "Microdata candidate: title=%s, ingredients=%d, directions=%d",
        title[:50] if title else "None",
        len(ingredients),
        len(directions),
    )
    if not is_viable(title, ingredients, directions):
        logger.warning("Microdata candidate is missing a title or both ingredients and directions")
        return None

    return build_record(
        url=url,
        title=title,
        description=_text_or_content(_prop(root, "description")),
        image=_extract_image(root),
        ingredients=ingredients,
        directions=directions,
        categories=[_text_or_content(el) for el in _props(root, "recipeCategory")],
        cook_time=_extract_time(root, "cookTime"),
        prep_time=_extract_time(root, "prepTime"),
        total_time=_extract_time(root, "totalTime"),
        recipe_yield=_extract_yield(root),
    )
