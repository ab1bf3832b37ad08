import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "parse_url.py"


@pytest.fixture
def parse_url_script():
    spec = importlib.util.spec_from_file_location("parse_url_script", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_saved_file_requires_source_url(parse_url_script, tmp_path):
    page = tmp_path / "page.html"
    page.write_text("<h1>Soup</h1>", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        parse_url_script.main([str(page)])
    assert excinfo.value.code == 2


def test_saved_file_resolves_against_source_url(parse_url_script, tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(
        "<html><body><h1>Soup</h1><article><img src='dish.jpg'></article></body></html>",
        encoding="utf-8",
    )
    exit_code = parse_url_script.main(
        [str(page), "--source-url", "https://site.com/recipes/soup", "--pretty-times"]
    )
    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["url"] == "https://site.com/recipes/soup"
    assert payload["image"] == "https://site.com/recipes/dish.jpg"
    assert payload["title"] == "Soup"


def test_unreachable_url_exits_with_failure(parse_url_script):
    assert parse_url_script.main(["http://[::1"]) == 1
