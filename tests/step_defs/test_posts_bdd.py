"""
BDD step definitions for the posts feature (pytest-bdd).
Express requirements in Gherkin; map to HTTP calls.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from pytest_bdd import given, parsers, scenarios, then, when

from posts_api.core.dependencies import get_document_store
from posts_api.main import app
from posts_api.repositories.post_repository import PostRepository
from posts_api.seed import seed_posts

# Load all scenarios from the feature file
scenarios("../features/posts.feature")


@pytest.fixture
def http(store):
    """Sync client over the in-memory store. No context manager, so startup hooks stay off."""
    app.dependency_overrides[get_document_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def response():
    """Store last response for then steps."""
    return {}


@given(parsers.parse('the posts "{first}" and "{second}" exist'))
def seeded_posts(store, first, second):
    asyncio.run(seed_posts(PostRepository(store), [first, second]))


@given("the index has been cleared")
def cleared_index(store):
    asyncio.run(PostRepository(store).delete_all())


@when(parsers.parse('I request "{method}" "{path}"'))
def request_path(http, response, method, path):
    r = http.request(method, path)
    response["status"] = r.status_code
    response["body"] = r.json()


@when(parsers.parse('I create a post titled "{title}" with content "{content}"'))
def create_post(http, response, title, content):
    r = http.post("/posts", json={"title": title, "content": content})
    response["status"] = r.status_code
    response["body"] = r.json()


@then(parsers.parse("the response status should be {code:d}"))
def status_is(response, code):
    assert response["status"] == code


@then(parsers.parse('the response should contain exactly the post titled "{title}"'))
def exactly_one_titled(response, title):
    assert [post["title"] for post in response["body"]] == [title]


@then("the response should be an empty list")
def empty_list(response):
    assert response["body"] == []


@then("the created post has a generated id")
def has_id(response):
    assert response["body"]["id"]


@then(parsers.parse('reading the created post returns title "{title}" and content "{content}"'))
def read_back(http, response, title, content):
    r = http.get(f"/posts/{response['body']['id']}")
    assert r.status_code == 200
    assert r.json()["title"] == title
    assert r.json()["content"] == content
