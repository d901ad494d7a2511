"""
Tests for loading catalog records from JSON Lines.
"""

import json

import pytest

from cinerank.data_loader import DataLoader


def write_lines(path, lines):
	path.write_text("\n".join(lines) + "\n", encoding="utf-8")
	return path


def test_load_movies_from_jsonl(tmp_path):
	path = write_lines(tmp_path / "movies.jsonl", [
		json.dumps({
			"id": "27205", "title": "Inception", "vote_average": "8.364", "vote_count": "34495",
			"popularity": 83.952, "release_date": "2010-07-15", "adult": "False", "runtime": 148,
			"genres": "Action, Science Fiction, Adventure", "keywords": ["dream", "heist"],
			"tagline": "", "embedding": [0.1, 0.2, 0.3, 0.4],
		}),
		"{not json",
		json.dumps({"title": "No id"}),
		"",
		json.dumps({"id": 2, "title": "Short vector", "rating": 7.1, "votes": 12, "embedding": "[0.5, 0.5]"}),
	])

	loader = DataLoader(embedding_dimension=4)
	movies = loader.load_movies_from_jsonl(str(path))

	assert [m.id for m in movies] == [27205, 2]
	inception = movies[0]
	assert inception.rating == pytest.approx(8.364)
	assert inception.votes == 34495
	assert inception.adult is False
	assert inception.genres == ["Action", "Science Fiction", "Adventure"]
	assert inception.keywords == ["dream", "heist"]
	assert inception.tagline is None
	assert inception.embedding.shape == (4,)

	# Wrong-length vectors are dropped, the record stays
	short = movies[1]
	assert short.rating == pytest.approx(7.1)
	assert short.votes == 12
	assert short.embedding is None
	assert short.genres == []

	assert loader.get_all_genres(movies) == ["Action", "Adventure", "Science Fiction"]


def test_missing_file_raises(tmp_path):
	with pytest.raises(FileNotFoundError):
		DataLoader().load_movies_from_jsonl(str(tmp_path / "missing.jsonl"))


def test_to_dict_never_exposes_embedding(tmp_path):
	path = write_lines(tmp_path / "movies.jsonl", [
		json.dumps({"id": 1, "title": "A", "embedding": [1, 0]}),
	])
	movie = DataLoader().load_movies_from_jsonl(str(path))[0]
	assert movie.has_embedding()
	assert "embedding" not in movie.to_dict()
	assert movie.without_embedding().embedding is None
	assert movie.embedding is not None  # original untouched


def test_release_dates_are_normalised_to_iso():
	loader = DataLoader()

	def release(value):
		return loader.parse_movie({"id": 1, "title": "Heat", "release_date": value}).release_date

	assert release("1995-12-15") == "1995-12-15"
	assert release("15-12-1995") == "1995-12-15"
	assert release("5/2/1995") == "1995-02-05"
	assert release("December 1995") is None
	assert release("") is None
	assert release(None) is None
