"""
Tests for "movies like this" pagination.
"""

import pytest

from cinerank.errors import InvalidRequestError
from cinerank.models import QueryContext
from cinerank.similarity import SimilarityPaginator


def test_missing_embedding_returns_empty_clamped_page(store):
	paginator = SimilarityPaginator(store)
	page = paginator.page(6, page=-5, limit=1000)  # Toy Story has no embedding
	assert (page.page, page.limit, page.total, page.data) == (1, 50, 0, [])

	page = paginator.page(12345, page=3, limit=0)  # unknown id
	assert (page.page, page.limit, page.total, page.data) == (3, 1, 0, [])


def test_clamp():
	assert SimilarityPaginator.clamp(0, 12) == (1, 12)
	assert SimilarityPaginator.clamp(2, -1) == (2, 1)
	assert SimilarityPaginator.clamp(1, 51) == (1, 50)


def test_neighbours_are_ordered_and_exclude_target(store):
	page = SimilarityPaginator(store, total_estimate=90).page(1, page=1, limit=3)
	ids = [item.movie.id for item in page.data]
	assert 1 not in ids
	assert ids == [8, 2, 3]
	scores = [item.similarity_score for item in page.data]
	assert scores == sorted(scores, reverse=True)
	assert scores[0] == pytest.approx(0.9945, abs=1e-3)
	assert page.total == 90
	assert all(item.movie.embedding is None for item in page.data)
	assert all('embedding' not in item.to_dict() for item in page.data)


def test_pages_do_not_overlap(store):
	paginator = SimilarityPaginator(store)
	first = [item.movie.id for item in paginator.page(1, page=1, limit=2).data]
	second = [item.movie.id for item in paginator.page(1, page=2, limit=2).data]
	assert first == [8, 2]
	assert second[0] == 3
	assert not set(first) & set(second)
	assert paginator.page(1, page=10, limit=50).data == []


def test_page_for_context(store):
	paginator = SimilarityPaginator(store)
	page = paginator.page_for(QueryContext.for_movie(1, page=1, limit=2))
	assert [item.movie.id for item in page.data] == [8, 2]
	assert page.to_dict()['total'] == 90

	with pytest.raises(InvalidRequestError):
		paginator.page_for(QueryContext(raw_query='heat', lowered='heat', length=4))
