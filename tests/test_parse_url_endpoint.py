from recipe_keeper.app.services import url_recipe_parser
from recipe_keeper.app.services.url_parsing.errors import FetchError

RECIPE_HTML = """
<html><head>
<script type="application/ld+json">
{"@type": "Recipe", "name": "Endpoint Stew", "recipeIngredient": ["1 potato"],
 "recipeInstructions": [{"@type": "HowToStep", "text": "Simmer for an hour."}],
 "totalTime": "PT1H30M", "cookTime": "PT1H", "recipeYield": "4"}
</script>
</head><body></body></html>
"""


def test_parse_url_returns_record(monkeypatch, client):
    async def fake_fetch(url: str):
        return RECIPE_HTML

    monkeypatch.setattr(url_recipe_parser, "fetch_html", fake_fetch)

    response = client.post("/recipes/parse-url", json={"url": "https://example.com/stew"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["parser_strategy"] == "schema_org_json_ld"
    recipe = body["recipe"]
    assert recipe["title"] == "Endpoint Stew"
    assert recipe["url"] == "https://example.com/stew"
    assert recipe["yield"] == "4 servings"
    assert recipe["totalTime"] == "PT1H30M"
    assert recipe["directions"] == ["Simmer for an hour."]
    assert body["display_times"] == {"cook": "1 hr", "total": "1 hr 30 mins"}


def test_parse_url_reports_failure(monkeypatch, client):
    async def fake_fetch(url: str):
        raise FetchError("fetch_failed", "Site returned status 403.")

    monkeypatch.setattr(url_recipe_parser, "fetch_html", fake_fetch)

    response = client.post("/recipes/parse-url", json={"url": "https://example.com/blocked"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["recipe"] is None
    assert body["error_code"] == "fetch_failed"
    assert body["message"].startswith("Failed to parse recipe")


def test_parse_url_validates_payload(client):
    response = client.post("/recipes/parse-url", json={"url": "not a url"})
    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "validation_error"
    assert body["details"][0]["field"] == "body.url"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
