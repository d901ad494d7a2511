"""
HTTP surface tests using FastAPI's TestClient against the fixture engine.
"""

import pytest
from fastapi.testclient import TestClient

from api import create_app
from cinerank.config import Settings
from cinerank.errors import RecordStoreError


@pytest.fixture
def client(engine, settings):
	with TestClient(create_app(engine=engine, settings=settings)) as c:
		yield c


def test_health(client):
	body = client.get("/health").json()
	assert body["status"] == "ok"
	assert body["engine_ready"] is True


def test_search_returns_ranked_movies_without_embeddings(client):
	response = client.get("/movies/search", params={"q": "movies like inception"})
	assert response.status_code == 200
	items = response.json()
	assert {item["id"] for item in items} == {1, 2, 4, 8}
	assert all("embedding" not in item for item in items)
	scores = [item["score"] for item in items]
	assert scores == sorted(scores, reverse=True)
	assert all(item["similarity"] is not None for item in items)


def test_search_without_query_uses_default(client):
	items = client.get("/movies/search").json()
	assert 0 < len(items) <= 54


def test_genre_popular_requires_genre(client):
	for params in ({}, {"genre": ""}, {"genre": " , "}):
		response = client.get("/movies/genre/popular", params=params)
		assert response.status_code == 400
		assert response.json() == {"error": "genre query parameter is required"}


def test_genre_popular(client):
	items = client.get("/movies/genre/popular", params={"genre": "Comedy, romance"}).json()
	assert {item["id"] for item in items} == {5, 6, 9}
	assert all("embedding" not in item for item in items)


def test_trending_default_and_limit(client):
	assert len(client.get("/movies/trending").json()) <= 10
	assert len(client.get("/movies/trending", params={"limit": 2}).json()) == 2


def test_movies_like_this(client):
	body = client.get("/movies/moviesLikeThis/1", params={"page": 1, "limit": 2}).json()
	assert body["page"] == 1 and body["limit"] == 2 and body["total"] == 90
	assert [item["id"] for item in body["data"]] == [8, 2]
	assert all("similarity_score" in item and "embedding" not in item for item in body["data"])


def test_movies_like_this_without_embedding_is_empty(client):
	body = client.get("/movies/moviesLikeThis/6", params={"page": -5, "limit": 1000}).json()
	assert body == {"page": 1, "limit": 50, "total": 0, "data": []}


def test_store_failure_maps_to_503(engine, settings, monkeypatch):
	def boom(*args, **kwargs):
		raise RecordStoreError("database unavailable") from TimeoutError()

	monkeypatch.setattr(engine, "search", boom)
	with TestClient(create_app(engine=engine, settings=settings)) as c:
		response = c.get("/movies/search", params={"q": "batman"})
	assert response.status_code == 503
	assert response.json() == {"error": "database unavailable"}


def test_cors_allow_list(engine):
	settings = Settings(embedding_dimension=4, allowed_origins="https://app.example.com, https://admin.example.com")
	with TestClient(create_app(engine=engine, settings=settings)) as c:
		allowed = c.get("/health", headers={"Origin": "https://app.example.com"})
		blocked = c.get("/health", headers={"Origin": "https://evil.example.com"})
		no_origin = c.get("/health")
	assert allowed.headers.get("access-control-allow-origin") == "https://app.example.com"
	assert "access-control-allow-origin" not in blocked.headers
	assert no_origin.status_code == 200
