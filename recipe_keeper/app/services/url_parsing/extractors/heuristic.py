"""Heuristic recipe extraction from HTML structure.

Every field is resolved by an ordered tuple of independent strategies. Each
strategy takes the parsed page and its URL and returns a value or something
falsy; the first truthy result wins for that field.
"""

import logging
import re
from typing import Callable, Iterator, List, Optional, Sequence
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from recipe_keeper.app.services.url_parsing.constants import (
    CONTENT_AREA_SELECTORS,
    DEFAULT_CATEGORY,
    DESCRIPTION_SELECTORS,
    DIRECTION_HEADING_KEYWORDS,
    DIRECTION_SECTION_SELECTOR,
    INGREDIENT_SECTION_SELECTOR,
    MEAT_KEYWORDS,
    META_IMAGE_SELECTORS,
    RECIPE_IMAGE_SELECTORS,
    TITLE_CATEGORY_KEYWORDS,
    YIELD_DATA_ATTRIBUTES,
    YIELD_SELECTOR,
)
from recipe_keeper.app.services.url_parsing.models import RecipeRecord
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    clean_text,
    element_text,
    normalize_yield,
)
from recipe_keeper.app.services.url_parsing.record_builder import build_record

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup, str], object]

SHORT_TEXT_LIMIT = 100
_IMAGE_FILE_RE = re.compile(r"\.(jpe?g|png|webp)($|\?)", re.I)
_DURATION_VALUE = (
    r"(\d+\s*(?:hours?|hrs?)(?:\s*(?:and\s*)?\d+\s*(?:minutes?|mins?))?|\d+\s*(?:minutes?|mins?))"
)
_TIME_PATTERNS = {
    "cook": (
        re.compile(r"cook(?:ing)?\s*time", re.I),
        re.compile(rf"cook(?:ing)?\s*time:?\s*{_DURATION_VALUE}", re.I),
    ),
    "prep": (
        re.compile(r"prep(?:aration)?\s*time", re.I),
        re.compile(rf"prep(?:aration)?\s*time:?\s*{_DURATION_VALUE}", re.I),
    ),
    "total": (
        re.compile(r"total\s*time", re.I),
        re.compile(rf"total\s*time:?\s*{_DURATION_VALUE}", re.I),
    ),
}
_YIELD_MENTION_RE = re.compile(r"serves|servings|yield|makes", re.I)
_YIELD_PATTERNS = (
    re.compile(r"serves:?\s*(\d+(?:-\d+)?(?:\s*(?:people|persons|servings))?)", re.I),
    re.compile(r"servings:?\s*(\d+(?:-\d+)?)", re.I),
    re.compile(r"yields?:?\s*(\d+(?:-\d+)?(?:\s*(?:servings|portions))?)", re.I),
    re.compile(r"makes:?\s*(\d+(?:-\d+)?(?:\s*(?:servings|portions|people))?)", re.I),
    re.compile(r"for:?\s*(\d+(?:-\d+)?(?:\s*(?:people|persons|servings))?)", re.I),
)
_SKIPPED_TEXT_PARENTS = ["script", "style", "noscript", "template"]


def _first_result(strategies: Sequence[Strategy], soup: BeautifulSoup, url: str):
    for strategy in strategies:
        result = strategy(soup, url)
        if result:
            logger.debug("Heuristic strategy %s matched", strategy.__name__)
            return result
    return None


def _append_unique(items: List[str], text: str) -> None:
    if text and text not in items:
        items.append(text)


def _short_texts_matching(soup: BeautifulSoup, pattern: re.Pattern) -> Iterator[str]:
    """Yield the text of short elements whose full text matches pattern.

    Elements are visited in document order and their text is read across
    inline children, so ``<b>Cook</b> Time`` still matches. Elements whose
    text reaches SHORT_TEXT_LIMIT are skipped so long prose is never mined.
    """
    for element in soup.find_all(True):
        if element.name in _SKIPPED_TEXT_PARENTS or element.find_parent(_SKIPPED_TEXT_PARENTS):
            continue
        text = element_text(element)
        if len(text) < SHORT_TEXT_LIMIT and pattern.search(text):
            yield text


# Title


def _title_from_heading(soup: BeautifulSoup, url: str) -> str:
    return element_text(soup.find("h1"))


def _title_from_document_title(soup: BeautifulSoup, url: str) -> str:
    return element_text(soup.title)


def _title_from_host(soup: BeautifulSoup, url: str) -> str:
    try:
        host = urlparse(url).hostname
    except ValueError:
        host = None
    return f"{host} {DEFAULT_CATEGORY}" if host else DEFAULT_CATEGORY


TITLE_STRATEGIES = (_title_from_heading, _title_from_document_title, _title_from_host)


# Description


def _description_from_meta(soup: BeautifulSoup, url: str) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    return clean_text(meta.get("content")) if meta else ""


def _description_from_blocks(soup: BeautifulSoup, url: str) -> str:
    for selector in DESCRIPTION_SELECTORS:
        text = element_text(soup.select_one(selector))
        if 20 < len(text) < 500:
            return text
    return ""


DESCRIPTION_STRATEGIES = (_description_from_meta, _description_from_blocks)


# Image


def _image_source(img: Tag, attrs: Sequence[str]) -> str:
    for attr in attrs:
        value = img.get(attr)
        if value and value.strip():
            return value.strip()
    return ""


def _dimension(value) -> int:
    match = re.match(r"\s*(\d{1,9})", value or "")
    return int(match.group(1)) if match else 0


def _is_large_image(img: Tag) -> bool:
    width = _dimension(img.get("width"))
    height = _dimension(img.get("height"))
    return (width > 300 and height > 200) or not width or not height


def _image_from_meta(soup: BeautifulSoup, url: str) -> str:
    for selector in META_IMAGE_SELECTORS:
        meta = soup.select_one(selector)
        if meta and (meta.get("content") or "").strip():
            return meta["content"].strip()
    return ""


def _image_from_recipe_selectors(soup: BeautifulSoup, url: str) -> str:
    for selector in RECIPE_IMAGE_SELECTORS:
        img = soup.select_one(selector)
        if img is None:
            continue
        src = _image_source(img, ("src", "data-src", "data-lazy-src", "data-pin-media"))
        if src:
            return src
    return ""


def _image_from_content_area(soup: BeautifulSoup, url: str) -> str:
    for selector in CONTENT_AREA_SELECTORS:
        for area in soup.select(selector):
            for img in area.find_all("img"):
                src = _image_source(img, ("src", "data-src", "data-lazy-src"))
                if src and _is_large_image(img):
                    return src
    return ""


def _image_from_large_files(soup: BeautifulSoup, url: str) -> str:
    for img in soup.find_all("img"):
        src = _image_source(img, ("src", "data-src"))
        if src and _IMAGE_FILE_RE.search(src) and _is_large_image(img):
            return src
    return ""


def _image_from_first_img(soup: BeautifulSoup, url: str) -> str:
    img = soup.find("img")
    return _image_source(img, ("src",)) if img else ""


IMAGE_STRATEGIES = (
    _image_from_meta,
    _image_from_recipe_selectors,
    _image_from_content_area,
    _image_from_large_files,
    _image_from_first_img,
)


# Ingredients and directions


def _list_after_heading(heading: Tag, names: Sequence[str]) -> Optional[Tag]:
    sibling = heading.find_next_sibling()
    if sibling is not None and sibling.name in names:
        return sibling
    if heading.parent is not None:
        return heading.parent.find(list(names))
    return None


def _headings_containing(soup: BeautifulSoup, keywords: Sequence[str]) -> Iterator[Tag]:
    for heading in soup.find_all(["h2", "h3", "h4"]):
        text = element_text(heading).lower()
        if any(keyword in text for keyword in keywords):
            yield heading


def _ingredients_from_sections(soup: BeautifulSoup, url: str) -> List[str]:
    items: List[str] = []
    for section in soup.select(INGREDIENT_SECTION_SELECTOR):
        for li in section.find_all("li"):
            _append_unique(items, element_text(li))
    return items


def _ingredients_after_heading(soup: BeautifulSoup, url: str) -> List[str]:
    for heading in _headings_containing(soup, ("ingredient",)):
        found = _list_after_heading(heading, ("ul", "ol"))
        if found is None:
            continue
        items: List[str] = []
        for li in found.find_all("li"):
            _append_unique(items, element_text(li))
        if items:
            return items
    return []


def _ingredients_from_any_list(soup: BeautifulSoup, url: str) -> List[str]:
    items: List[str] = []
    for li in soup.select("ul li"):
        text = element_text(li)
        if 3 < len(text) < 200 and "http" not in text:
            items.append(text)
    return items


INGREDIENT_STRATEGIES = (
    _ingredients_from_sections,
    _ingredients_after_heading,
    _ingredients_from_any_list,
)


def _directions_from_sections(soup: BeautifulSoup, url: str) -> List[str]:
    steps: List[str] = []
    for section in soup.select(DIRECTION_SECTION_SELECTOR):
        for element in section.find_all(["li", "p"]):
            text = element_text(element)
            if len(text) > 10:
                _append_unique(steps, text)
    return steps


def _directions_after_heading(soup: BeautifulSoup, url: str) -> List[str]:
    for heading in _headings_containing(soup, DIRECTION_HEADING_KEYWORDS):
        found = _list_after_heading(heading, ("ol", "ul"))
        if found is not None:
            candidates = [element_text(li) for li in found.find_all("li")]
        else:
            candidates = [element_text(p) for p in heading.find_next_siblings("p", limit=10)]
        steps = [text for text in candidates if len(text) > 10]
        if steps:
            return steps
    return []


def _directions_from_ordered_lists(soup: BeautifulSoup, url: str) -> List[str]:
    steps: List[str] = []
    for li in soup.select("ol li"):
        text = element_text(li)
        if 10 < len(text) < 500:
            steps.append(text)
    return steps


DIRECTION_STRATEGIES = (
    _directions_from_sections,
    _directions_after_heading,
    _directions_from_ordered_lists,
)


# Times and yield


def _find_time(soup: BeautifulSoup, kind: str) -> str:
    mention, value_pattern = _TIME_PATTERNS[kind]
    for text in _short_texts_matching(soup, mention):
        match = value_pattern.search(text)
        if match:
            return clean_text(match.group(1))
    return ""


def _yield_from_phrases(soup: BeautifulSoup, url: str) -> str:
    for text in _short_texts_matching(soup, _YIELD_MENTION_RE):
        for pattern in _YIELD_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(1).strip()
    return ""


def _yield_from_named_elements(soup: BeautifulSoup, url: str) -> str:
    for element in soup.select(YIELD_SELECTOR):
        text = element_text(element)
        if not text or len(text) >= SHORT_TEXT_LIMIT:
            continue
        number = re.search(r"\d+(?:-\d+)?", text)
        return number.group(0) if number else text
    return ""


def _yield_from_data_attributes(soup: BeautifulSoup, url: str) -> str:
    selector = ", ".join(f"[{attr}]" for attr in YIELD_DATA_ATTRIBUTES)
    for element in soup.select(selector):
        for attr in YIELD_DATA_ATTRIBUTES:
            value = (element.get(attr) or "").strip()
            if value:
                return value
    return ""


def _yield_from_meta(soup: BeautifulSoup, url: str) -> str:
    meta = soup.select_one('meta[name="servings"], meta[property="servings"]')
    return (meta.get("content") or "").strip() if meta else ""


YIELD_STRATEGIES = (
    _yield_from_phrases,
    _yield_from_named_elements,
    _yield_from_data_attributes,
    _yield_from_meta,
)


# Categories


def _derive_categories(soup: BeautifulSoup, title: str, ingredients: List[str]) -> List[str]:
    categories: List[str] = []
    keywords = soup.find("meta", attrs={"name": "keywords"})
    if keywords and keywords.get("content"):
        for keyword in keywords["content"].split(","):
            cleaned = clean_text(keyword)
            if cleaned and len(cleaned) < 20:
                categories.append(cleaned)

    lower_title = title.lower()
    for title_keywords, category in TITLE_CATEGORY_KEYWORDS:
        if any(keyword in lower_title for keyword in title_keywords):
            categories.append(category)

    has_meat = any(meat in ingredient.lower() for ingredient in ingredients for meat in MEAT_KEYWORDS)
    if not has_meat:
        categories.append("Vegetarian")
    return categories


def extract_recipe_heuristic(soup: BeautifulSoup, url: str) -> RecipeRecord:
    """Extract recipe using heuristic HTML analysis. Always returns a record."""
    title = _first_result(TITLE_STRATEGIES, soup, url)
    ingredients = _first_result(INGREDIENT_STRATEGIES, soup, url) or []
    directions = _first_result(DIRECTION_STRATEGIES, soup, url) or []

    logger.info(
        "Heuristic candidate: title=%s, ingredients=%d, directions=%d",
        title[:50],
        len(ingredients),
        len(directions),
    )

    return build_record(
        url=url,
        title=title,
        description=_first_result(DESCRIPTION_STRATEGIES, soup, url) or "",
        image=_first_result(IMAGE_STRATEGIES, soup, url),
        ingredients=ingredients,
        directions=directions,
        categories=_derive_categories(soup, title, ingredients),
        cook_time=_find_time(soup, "cook"),
        prep_time=_find_time(soup, "prep"),
        total_time=_find_time(soup, "total"),
        recipe_yield=normalize_yield(_first_result(YIELD_STRATEGIES, soup, url) or ""),
    )
