import pytest
from fastapi.testclient import TestClient

from recipe_keeper.app.main import create_app


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def page_url():
    return "https://site.com/recipes/x"
