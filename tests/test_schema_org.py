import json

from bs4 import BeautifulSoup

from recipe_keeper.app.services.url_parsing.constants import (
    DIRECTIONS_PLACEHOLDER,
    INGREDIENTS_PLACEHOLDER,
)
from recipe_keeper.app.services.url_parsing.extractors.schema_org import (
    extract_recipe_from_schema_org,
    find_recipe_nodes,
)

PAGE_URL = "https://site.com/recipes/x"


def _page(*blocks) -> BeautifulSoup:
    scripts = "".join(
        f'<script type="application/ld+json">{b if isinstance(b, str) else json.dumps(b)}</script>'
        for b in blocks
    )
    return BeautifulSoup(f"<html><head>{scripts}</head><body></body></html>", "lxml")


def _recipe(**overrides):
    data = {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Test Recipe",
        "recipeIngredient": ["1 cup flour", "2 eggs"],
        "recipeInstructions": ["Mix", "Bake"],
    }
    data.update(overrides)
    return data


def test_extract_recipe_from_schema_org():
    soup = _page(
        _recipe(
            description="A &amp; B",
            totalTime="PT30M",
            cookTime="PT20M",
            prepTime="PT10M",
            recipeYield="4",
        )
    )

    parsed = extract_recipe_from_schema_org(soup, PAGE_URL)
    assert parsed is not None
    assert parsed.title == "Test Recipe"
    assert parsed.description == "A & B"
    assert parsed.ingredients == ["1 cup flour", "2 eggs"]
    assert parsed.directions == ["Mix", "Bake"]
    assert parsed.total_time == "PT30M"
    assert parsed.cook_time == "PT20M"
    assert parsed.prep_time == "PT10M"
    assert parsed.recipe_yield == "4 servings"
    assert parsed.categories == ["Recipe"]
    assert parsed.image.startswith("/placeholder.svg")


def test_recipe_nested_inside_unrelated_wrapper_is_found():
    wrapper = {
        "@type": "WebPage",
        "mainEntity": {"about": {"primaryTopic": _recipe(name="Deep Dish")}},
    }
    parsed = extract_recipe_from_schema_org(_page(wrapper), PAGE_URL)
    assert parsed is not None
    assert parsed.title == "Deep Dish"


def test_recipe_found_in_graph():
    graph = {
        "@context": "https://schema.org",
        "@graph": [
            {"@type": "WebSite", "name": "Site"},
            {"@type": "Person", "name": "Chef"},
            _recipe(name="Graph Stew"),
        ],
    }
    parsed = extract_recipe_from_schema_org(_page(graph), PAGE_URL)
    assert parsed.title == "Graph Stew"


def test_recipe_found_in_top_level_list_with_type_list():
    data = [{"@type": "BreadcrumbList"}, _recipe(**{"@type": ["Recipe", "NewsArticle"], "name": "Listed"})]
    parsed = extract_recipe_from_schema_org(_page(data), PAGE_URL)
    assert parsed.title == "Listed"


def test_first_candidate_wins_over_later_ones():
    graph = {"@graph": [_recipe(name="First"), _recipe(name="Second")]}
    parsed = extract_recipe_from_schema_org(_page(graph), PAGE_URL)
    assert parsed.title == "First"


def test_malformed_block_is_skipped():
    soup = _page('{"@type": "Recipe", "name": ', _recipe(name="Valid"))
    parsed = extract_recipe_from_schema_org(soup, PAGE_URL)
    assert parsed.title == "Valid"


def test_non_viable_candidate_falls_through_to_next_block():
    soup = _page(
        _recipe(name="", recipeIngredient=["salt"]),
        _recipe(name="No Content", recipeIngredient=[], recipeInstructions=[]),
        _recipe(name="Usable"),
    )
    parsed = extract_recipe_from_schema_org(soup, PAGE_URL)
    assert parsed.title == "Usable"


def test_returns_none_without_recipe():
    assert extract_recipe_from_schema_org(_page({"@type": "Article", "name": "News"}), PAGE_URL) is None
    assert extract_recipe_from_schema_org(BeautifulSoup("<p>nothing</p>", "lxml"), PAGE_URL) is None


def test_ingredients_only_recipe_gets_direction_placeholder():
    parsed = extract_recipe_from_schema_org(_page(_recipe(recipeInstructions=None)), PAGE_URL)
    assert parsed.directions == [DIRECTIONS_PLACEHOLDER]
    assert parsed.ingredients == ["1 cup flour", "2 eggs"]


def test_legacy_ingredients_key_and_directions_only():
    data = _recipe(recipeIngredient=None, ingredients=["3 apples"])
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).ingredients == ["3 apples"]

    data = _recipe(recipeIngredient="not a list")
    parsed = extract_recipe_from_schema_org(_page(data), PAGE_URL)
    assert parsed.ingredients == [INGREDIENTS_PLACEHOLDER]
    assert parsed.directions == ["Mix", "Bake"]


def test_instruction_objects_and_string():
    data = _recipe(
        recipeInstructions=[
            {"@type": "HowToStep", "text": "Whisk  eggs"},
            {"@type": "HowToStep", "name": "Fold in flour"},
            {"@type": "HowToStep", "text": ""},
        ]
    )
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).directions == ["Whisk eggs", "Fold in flour"]

    data = _recipe(recipeInstructions="Put it all in a pot.")
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).directions == ["Put it all in a pot."]


def test_image_shapes_are_resolved():
    data = _recipe(image=[{"@type": "ImageObject", "url": "/media/cake.jpg"}])
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).image == "https://site.com/media/cake.jpg"

    data = _recipe(image={"@id": "https://cdn.site.com/cake.jpg"})
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).image == "https://cdn.site.com/cake.jpg"

    data = _recipe(image="cake.jpg")
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).image == "https://site.com/recipes/cake.jpg"


def test_categories_merge_category_and_keywords_without_duplicates():
    data = _recipe(recipeCategory=["Dessert", "Baking"], keywords="dessert, chocolate, Baking ,")
    parsed = extract_recipe_from_schema_org(_page(data), PAGE_URL)
    assert parsed.categories == ["Dessert", "Baking", "chocolate"]

    data = _recipe(recipeCategory="Soup", keywords=["Winter", "soup"])
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).categories == ["Soup", "Winter"]


def test_yield_shapes():
    assert extract_recipe_from_schema_org(_page(_recipe(recipeYield=6)), PAGE_URL).recipe_yield == "6 servings"
    data = _recipe(recipeYield=["", "8", "8 slices"])
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).recipe_yield == "8 servings"
    data = _recipe(recipeYield="Serves: 1")
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).recipe_yield == "1 serving"
    assert extract_recipe_from_schema_org(_page(_recipe()), PAGE_URL).recipe_yield == ""


def test_document_url_is_not_used():
    data = _recipe(url="https://elsewhere.com/copy")
    assert extract_recipe_from_schema_org(_page(data), PAGE_URL).url == PAGE_URL


def test_non_string_times_are_ignored():
    data = _recipe(cookTime={"@type": "Duration"}, prepTime=None)
    parsed = extract_recipe_from_schema_org(_page(data), PAGE_URL)
    assert parsed.cook_time == ""
    assert parsed.prep_time == ""


def test_find_recipe_nodes_respects_depth_cap():
    data = _recipe(name="Buried")
    for _ in range(10):
        data = {"child": data}
    assert find_recipe_nodes(data, max_depth=5) == []
    assert find_recipe_nodes(data, max_depth=32)[0]["name"] == "Buried"


def test_find_recipe_nodes_ignores_scalars():
    assert find_recipe_nodes("Recipe", max_depth=32) == []
    assert find_recipe_nodes(None, max_depth=32) == []
    assert find_recipe_nodes({"@graph": "nope", "@type": "Thing"}, max_depth=32) == []


def test_deeply_nested_block_is_skipped():
    soup = _page("[" * 100000, _recipe(name="After Deep Block"))
    parsed = extract_recipe_from_schema_org(soup, PAGE_URL)
    assert parsed is not None
    assert parsed.title == "After Deep Block"
