"""
Candidate generators.
Each generator turns one signal (lexical, semantic, quality, genre) into scored candidates
and declares how its candidates fuse with entries other generators already produced.
"""

import math
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from loguru import logger

from .errors import RecordStoreError
from .models import Candidate, Movie, QueryContext
from .query_classifier import GENRE, LEXICAL, LIVE_QUERY, QUALITY, SEMANTIC, QueryClassifier
from .record_store import RecordStore

FUZZY_THRESHOLD = 0.25
RESULT_WINDOW = 50


def popularity_of(movie: Movie) -> float:
	return movie.popularity if movie.popularity is not None else 0.0


class CandidateGenerator(ABC):
	"""
	Capability interface shared by all generators.
	- insert_rank: contribution given to a movie id the result set has not seen yet
	- boost: increment applied when the id already exists (None leaves existing entries untouched)
	"""

	name: str = ''
	insert_rank: float = 1.0
	boost: Optional[float] = None

	def __init__(self, store: RecordStore):
		self.store = store

	@abstractmethod
	def generate(self, context: QueryContext, **params) -> List[Candidate]:
		"""Produce candidates for one query; read-only against the store."""

	def _candidates(self, movies: Iterable[Movie]) -> List[Candidate]:
		return [Candidate(movie=m, source=self.name, rank=self.insert_rank) for m in movies]


class LexicalFuzzyMatcher(CandidateGenerator):
	"""Fuzzy text match of the query against title, overview and tagline."""

	name = LEXICAL
	insert_rank = 1.0

	def score(self, movie: Movie, query: str) -> float:
		"""Best fuzzy similarity across the three text fields."""
		return max(
			self.store.fuzzy_similarity(movie.title, query),
			self.store.fuzzy_similarity(movie.overview, query),
			self.store.fuzzy_similarity(movie.tagline, query),
		)

	def generate(self, context: QueryContext, window: int = 20, **params) -> List[Candidate]:
		query = context.lowered
		scored = []
		for movie in self.store.select():
			s = self.score(movie, query)
			if s > FUZZY_THRESHOLD:
				scored.append((movie, s))
		scored.sort(key=lambda pair: pair[1], reverse=True)  # stable: ties keep store order
		logger.debug(f"[Lexical] '{query}' matched {len(scored)} movies, keeping {min(window, len(scored))}")
		return self._candidates(m for m, _ in scored[:window])


class SeedLookup:
	"""Finds the single catalog movie a "movies like X" style query is anchored on."""

	def __init__(self, store: RecordStore, threshold: float = FUZZY_THRESHOLD):
		self.store = store
		self.threshold = threshold

	def find(self, raw_query: str) -> Optional[Movie]:
		base_title = QueryClassifier.extract_base_title(raw_query)
		if not base_title:
			return None
		best = None
		best_key = None
		for movie in self.store.select():
			sim = self.store.fuzzy_similarity((movie.title or '').lower(), base_title)
			if sim <= self.threshold:
				continue
			key = (sim, popularity_of(movie))  # similarity first, popularity breaks ties
			if best_key is None or key > best_key:
				best, best_key = movie, key
		if best is not None:
			logger.debug(f"[Seed] '{base_title}' -> {best.title} ({best.id}) sim={best_key[0]:.3f}")
		else:
			logger.debug(f"[Seed] No title clears {self.threshold} for '{base_title}'")
		return best


class SemanticNeighborMatcher(CandidateGenerator):
	"""Nearest neighbours of the seed movie's embedding that share at least one genre with it."""

	name = SEMANTIC
	insert_rank = 1.0

	def __init__(self, store: RecordStore, seed_lookup: Optional[SeedLookup] = None):
		super().__init__(store)
		self.seed_lookup = seed_lookup or SeedLookup(store)

	def generate(self, context: QueryContext, **params) -> List[Candidate]:
		seed = self.seed_lookup.find(context.raw_query)
		if seed is None or not seed.has_embedding():
			return []  # missing signal: contribute nothing
		seed_genres = seed.genre_set()
		neighbours = self.store.nearest(
			seed.embedding,
			where=lambda m: m.id != seed.id and bool(m.genre_set() & seed_genres),
			limit=RESULT_WINDOW,
		)
		logger.debug(f"[Semantic] Seed {seed.id} produced {len(neighbours)} neighbours")
		return [
			Candidate(movie=m, source=self.name, rank=self.insert_rank, similarity=1.0 - distance)
			for m, distance in neighbours
		]


class QualityHeuristicMatcher(CandidateGenerator):
	"""Well-rated, widely-voted movies; rewards agreement with other generators additively."""

	name = QUALITY
	insert_rank = 1.1
	boost = 1.2

	MIN_VOTES = 500
	MIN_RATING = 7.5

	@staticmethod
	def quality(movie: Movie) -> float:
		return movie.rating * math.log(movie.votes + 1) + popularity_of(movie) * 0.5

	def generate(self, context: QueryContext, **params) -> List[Candidate]:
		movies = self.store.select(
			where=lambda m: m.votes is not None and m.votes > self.MIN_VOTES
			and m.rating is not None and m.rating >= self.MIN_RATING,
			order_by=self.quality,
			limit=RESULT_WINDOW,
		)
		logger.debug(f"[Quality] {len(movies)} high-quality movies")
		return self._candidates(movies)


class GenreMatcher(CandidateGenerator):
	"""Most popular movies in any of the genres recognised in the query."""

	name = GENRE
	insert_rank = 0.9

	def generate(self, context: QueryContext, genres=(), **params) -> List[Candidate]:
		wanted = {g.lower() for g in (genres or context.genres)}
		if not wanted:
			return []
		movies = self.store.select(
			where=lambda m: bool(m.genre_set() & wanted),
			order_by=lambda m: m.popularity if m.popularity is not None else float('-inf'),
			limit=RESULT_WINDOW,
		)
		logger.debug(f"[Genre] {sorted(wanted)} matched {len(movies)} movies")
		return self._candidates(movies)


class QueryEmbeddingMatcher(CandidateGenerator):
	"""Nearest neighbours of the live query text's own embedding."""

	name = LIVE_QUERY
	insert_rank = 0.9
	boost = 1.0

	WINDOW = 10

	def __init__(self, store: RecordStore, embedder):
		super().__init__(store)
		self.embedder = embedder  # anything with embed(text) -> vector

	def generate(self, context: QueryContext, **params) -> List[Candidate]:
		text = context.raw_query.strip()
		if not text:
			return []
		try:
			vector = self.embedder.embed(text)
		except Exception as e:
			raise RecordStoreError(f"Embedding provider failed for query '{text}': {e}") from e
		neighbours = self.store.nearest(vector, limit=self.WINDOW)
		logger.debug(f"[LiveQuery] '{text}' produced {len(neighbours)} neighbours")
		return [
			Candidate(movie=m, source=self.name, rank=self.insert_rank, similarity=1.0 - distance)
			for m, distance in neighbours
		]
