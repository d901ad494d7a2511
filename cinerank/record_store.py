"""
Record store adapter.
Defines the query contract the ranking core consumes and an in-memory implementation of it.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import numpy as np
from loguru import logger
from rapidfuzz import utils

from .errors import RecordStoreError
from .models import Movie
from .vector_store import VectorStore, cosine_distance

Predicate = Callable[[Movie], bool]
SortKey = Callable[[Movie], float]


def trigrams(text: str) -> List[str]:
	"""
	Ordered trigrams of every word in text.
	Each word is padded with two leading spaces and one trailing space, so "cat" yields
	"  c", " ca", "cat", "at ".
	"""
	grams = []
	for word in utils.default_process(text).split():
		padded = f'  {word} '
		grams.extend(padded[i:i + 3] for i in range(len(padded) - 2))
	return grams


def word_similarity(needle: str, haystack: str) -> float:
	"""
	Greatest similarity between the trigram set of needle and any contiguous run of
	trigrams in haystack: shared / (needle + run - shared), in [0, 1].
	"""
	wanted = set(trigrams(needle))
	if not wanted:
		return 0.0
	grams = trigrams(haystack)
	# A best run always starts and ends on a shared trigram
	hits = [i for i, g in enumerate(grams) if g in wanted]
	best = 0.0
	for start in hits:
		seen = set()
		shared = 0
		for end in range(start, hits[-1] + 1):
			g = grams[end]
			if g in seen:
				continue
			seen.add(g)
			if g not in wanted:
				continue
			shared += 1
			best = max(best, shared / (len(wanted) + len(seen) - shared))
		if best == 1.0:
			break
	return best


class RecordStore(ABC):
	"""
	Query facade over the movie catalog.
	Exposes attribute filter/sort/paginate queries plus two similarity primitives:
	fuzzy string similarity and vector distance.
	"""

	@abstractmethod
	def get(self, movie_id: int) -> Optional[Movie]:
		"""Return one record by id, or None."""

	@abstractmethod
	def select(
		self,
		where: Optional[Predicate] = None,
		order_by: Optional[SortKey] = None,
		descending: bool = True,
		limit: Optional[int] = None,
		offset: int = 0,
	) -> List[Movie]:
		"""Filter, sort and paginate records."""

	@abstractmethod
	def fuzzy_similarity(self, field_value: Optional[str], query_value: str) -> float:
		"""How well query_value matches the best-matching stretch of field_value, in [0, 1]."""

	@abstractmethod
	def vector_distance(self, a: np.ndarray, b: np.ndarray) -> float:
		"""Distance between two vectors; similarity = 1 - distance."""

	@abstractmethod
	def nearest(
		self,
		vector: np.ndarray,
		where: Optional[Predicate] = None,
		limit: Optional[int] = None,
		offset: int = 0,
	) -> List[Tuple[Movie, float]]:
		"""Records with an embedding ordered by distance ascending, as (movie, distance) pairs."""


class InMemoryRecordStore(RecordStore):
	"""
	RecordStore over a list of movies held in memory.
	Fuzzy similarity is trigram word similarity over rapidfuzz-normalised text; nearest-neighbour ordering uses a FAISS index.
	"""

	def __init__(self, movies: Iterable[Movie], embedding_dimension: Optional[int] = None):
		self._movies: Dict[int, Movie] = {}
		for movie in movies:
			if movie.id in self._movies:
				raise ValueError(f"Duplicate movie id: {movie.id}")
			self._movies[movie.id] = movie

		embedded = [m for m in self._movies.values() if m.has_embedding()]
		if embedding_dimension is None:
			embedding_dimension = len(embedded[0].embedding) if embedded else 1
		self.vector_store = VectorStore(embedding_dimension)
		for movie in embedded:
			# Partial vectors are never stored
			if len(movie.embedding) != embedding_dimension:
				raise ValueError(
					f"Movie {movie.id} embedding has {len(movie.embedding)} dimensions, expected {embedding_dimension}"
				)
		if embedded:
			matrix = np.vstack([np.asarray(m.embedding, dtype='float32') for m in embedded])
			self.vector_store.add([m.id for m in embedded], matrix)
		logger.info(f"[Store] Ready with {len(self._movies)} movies ({self.vector_store.size()} embedded)")

	def __len__(self) -> int:
		return len(self._movies)

	def get(self, movie_id: int) -> Optional[Movie]:
		return self._movies.get(movie_id)

	def select(self, where=None, order_by=None, descending=True, limit=None, offset=0) -> List[Movie]:
		rows = [m for m in self._movies.values() if where is None or where(m)]
		if order_by is not None:
			rows.sort(key=order_by, reverse=descending)
		end = None if limit is None else offset + limit
		return rows[offset:end]

	def fuzzy_similarity(self, field_value: Optional[str], query_value: str) -> float:
		if not field_value or not query_value:
			return 0.0
		return word_similarity(query_value, field_value)

	def vector_distance(self, a: np.ndarray, b: np.ndarray) -> float:
		if len(a) != len(b):
			raise RecordStoreError(f"Cannot compare vectors of length {len(a)} and {len(b)}")
		return cosine_distance(a, b)

	def nearest(self, vector, where=None, limit=None, offset=0) -> List[Tuple[Movie, float]]:
		try:
			ranked = self.vector_store.search_all(vector)
		except ValueError as e:
			raise RecordStoreError(f"Nearest-neighbour query failed: {e}") from e
		matches = []
		for movie_id, distance in ranked:
			movie = self._movies[movie_id]
			if where is not None and not where(movie):
				continue
			matches.append((movie, distance))
		end = None if limit is None else offset + limit
		return matches[offset:end]
