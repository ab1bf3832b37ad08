"""Assembly of RecipeRecord values shared by every extraction tier."""

from typing import Iterable, List, Optional

from recipe_keeper.app.services.url_parsing.constants import (
    DEFAULT_CATEGORY,
    DIRECTIONS_PLACEHOLDER,
    INGREDIENTS_PLACEHOLDER,
)
from recipe_keeper.app.services.url_parsing.models import RecipeRecord
from recipe_keeper.app.services.url_parsing.parsing_utils import (
    dedupe_categories,
    placeholder_image_url,
    resolve_image_url,
)


def is_viable(title: str, ingredients: List[str], directions: List[str]) -> bool:
    """A candidate needs a title plus at least one ingredient or direction."""
    return bool(title) and bool(ingredients or directions)


def build_record(
    *,
    url: str,
    title: str,
    ingredients: List[str],
    directions: List[str],
    categories: Iterable[str] = (),
    description: str = "",
    image: Optional[str] = None,
    cook_time: str = "",
    prep_time: str = "",
    total_time: str = "",
    recipe_yield: str = "",
) -> RecipeRecord:
    """Fill placeholders and defaults, then freeze the record."""
    resolved_image = resolve_image_url(image, url) if image else ""
    return RecipeRecord(
        url=url,
        title=title,
        description=description,
        image=resolved_image or placeholder_image_url(title),
        ingredients=ingredients or [INGREDIENTS_PLACEHOLDER],
        directions=directions or [DIRECTIONS_PLACEHOLDER],
        categories=dedupe_categories(categories) or [DEFAULT_CATEGORY],
        cook_time=cook_time,
        prep_time=prep_time,
        total_time=total_time,
        recipe_yield=recipe_yield,
    )
