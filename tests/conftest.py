"""
Shared fixtures: a small in-memory catalog with 4-dimensional embeddings.
"""

import random

import numpy as np
import pytest

from cinerank.config import Settings
from cinerank.models import Movie
from cinerank.record_store import InMemoryRecordStore
from cinerank.search_engine import MovieSearchEngine


def vec(*values):
	return np.array(values, dtype='float32')


def make_catalog():
	return [
		Movie(
			id=1, title='The Dark Knight', rating=8.5, votes=30000, popularity=120.0,
			release_date='2008-07-16', genres=['Action', 'Crime', 'Drama'],
			overview='Batman raises the stakes in his war on crime against the Joker.',
			tagline='Why so serious?', embedding=vec(1, 0, 0, 0),
		),
		Movie(
			id=2, title='Batman Begins', rating=7.7, votes=18000, popularity=80.0,
			release_date='2005-06-10', genres=['Action', 'Crime'],
			overview='A young Bruce Wayne travels the world seeking the means to fight injustice.',
			tagline='Evil fears the knight.', embedding=vec(0.9, 0.1, 0, 0),
		),
		Movie(
			id=3, title='Inception', rating=8.4, votes=35000, popularity=100.0,
			release_date='2010-07-15', genres=['Action', 'Science Fiction', 'Adventure'],
			overview='A thief who steals corporate secrets through dream-sharing technology.',
			tagline='Your mind is the scene of the crime.', embedding=vec(0.7, 0.7, 0, 0),
		),
		Movie(
			id=4, title='Interstellar', rating=8.4, votes=32000, popularity=140.0,
			release_date='2014-11-05', genres=['Adventure', 'Drama', 'Science Fiction'],
			overview='Explorers travel through a wormhole in space to ensure humanity survives.',
			tagline='Mankind was born on Earth. It was never meant to die here.', embedding=vec(0.6, 0.8, 0, 0),
		),
		Movie(
			id=5, title='The Notebook', rating=7.9, votes=10000, popularity=40.0,
			release_date='2004-06-25', genres=['Romance', 'Drama'],
			overview='An elderly man reads to a woman with dementia the story of two young lovers.',
			embedding=vec(0, 0, 1, 0),
		),
		Movie(
			id=6, title='Toy Story', rating=8.0, votes=17000, popularity=90.0,
			release_date='1995-10-30', genres=['Animation', 'Family', 'Comedy'],
			overview='A cowboy doll is threatened when a new spaceman figure supplants him.',
		),
		Movie(
			id=7, title='Obscure Indie', rating=6.0, votes=20, popularity=1.2,
			genres=['Drama'], overview='Two strangers share a quiet afternoon.',
			embedding=vec(0, 0, 0, 1),
		),
		Movie(
			id=8, title='Mad Max: Fury Road', rating=7.6, votes=21000, popularity=60.0,
			release_date='2015-05-13', genres=['Action', 'Adventure'],
			overview='In a post-apocalyptic wasteland a woman rebels against a tyrannical ruler.',
			tagline='What a lovely day.', embedding=vec(0.95, 0, 0.1, 0),
		),
		Movie(
			id=9, title='Superbad', rating=7.2, votes=9000, popularity=30.0,
			release_date='2007-08-17', genres=['Comedy'],
			overview='Two co-dependent high school seniors are forced to deal with separation anxiety.',
			embedding=vec(0, 0, 0.2, 1),
		),
	]


@pytest.fixture
def catalog():
	return make_catalog()


@pytest.fixture
def store(catalog):
	return InMemoryRecordStore(catalog, embedding_dimension=4)


@pytest.fixture
def settings():
	return Settings(embedding_dimension=4, live_query_embedding=False, allowed_origins='')


@pytest.fixture
def engine(store, settings):
	return MovieSearchEngine(store, settings=settings, rng=random.Random(7))


def popular_catalog(count=60, genres=('Drama',)):
	"""Many movies with strictly decreasing popularity (id 0 is the most popular)."""
	return [
		Movie(
			id=i, title=f'Movie {i}', rating=6.5, votes=1000 + i,
			popularity=float(1000 - i), release_date='2020-01-01', genres=list(genres),
		)
		for i in range(count)
	]
