"""
Tests for the sentence-transformers embedding provider with the model stubbed out.
"""

import numpy as np
import pytest

import cinerank.embeddings as embeddings
from cinerank.models import Movie


class FakeModel:
	def __init__(self, model_name):
		self.model_name = model_name
		self.encoded = []

	def get_sentence_embedding_dimension(self):
		return 3

	def encode(self, text, convert_to_numpy=True, normalize_embeddings=True):
		self.encoded.append(text)
		return np.array([float(len(text)), 0.0, 0.0], dtype='float64')


@pytest.fixture
def generator(monkeypatch):
	monkeypatch.setattr(embeddings, "SentenceTransformer", FakeModel)
	return embeddings.EmbeddingGenerator('fake-model')


def test_embed_returns_float32_vector(generator):
	vector = generator.embed('  heist thriller  ')
	assert vector.dtype == np.float32
	assert vector.shape == (3,)
	assert generator.model.encoded == ['heist thriller']
	assert generator.get_embedding_dimension() == 3


def test_embed_is_deterministic(generator):
	assert np.array_equal(generator.embed('space opera'), generator.embed('space opera'))


def test_embed_rejects_empty_text(generator):
	with pytest.raises(ValueError):
		generator.embed('   ')


def test_movie_text_lists_each_field():
	movie = Movie(
		id=27205, title='Inception', overview='A thief steals secrets through dreams.',
		genres=['Action', 'Science Fiction'], production_companies=['Legendary Pictures', 'Syncopy'],
		keywords=['dream', 'heist'],
	)
	assert embeddings.movie_text(movie).splitlines() == [
		'Title: Inception',
		'Overview: A thief steals secrets through dreams.',
		'Genres: Action Science Fiction',
		'Production Companies: Legendary Pictures Syncopy',
		'Keywords: dream heist',
	]


def test_movie_text_with_missing_fields():
	text = embeddings.movie_text(Movie(id=1, title='Untitled'))
	assert text.splitlines()[0] == 'Title: Untitled'
	assert 'Overview: \n' in text
	assert text.endswith('Keywords: ')


def test_embed_movie_encodes_document_text(generator):
	movie = Movie(id=1, title='Heat', overview='A crew of robbers.', genres=['Crime'])
	generator.embed_movie(movie)
	assert generator.model.encoded == [embeddings.movie_text(movie).strip()]
