"""
Search engine module.
Routes queries to candidate generators, fuses their output and serves the discovery feeds.
"""

import random  # injectable randomness for the feeds
from typing import Dict, List, Optional, Sequence  # type annotations for clarity

# Import project modules for data structures and components
from .config import Settings  # runtime configuration
from .diversify import NoisyRankShuffle, TieredWeightedShuffle  # browsing feeds
from .fusion import MAX_RESULTS, ResultSet  # score fusion & dedup
from .generators import (  # candidate generators
	CandidateGenerator,
	GenreMatcher,
	LexicalFuzzyMatcher,
	QualityHeuristicMatcher,
	QueryEmbeddingMatcher,
	SemanticNeighborMatcher,
)
from .models import Movie, QueryContext, SearchResult, SimilarPage  # core data classes
from .query_classifier import QueryClassifier  # routing decisions
from .record_store import RecordStore  # catalog access
from .similarity import SimilarityPaginator  # movies like this

# Import loguru for console logging
from loguru import logger  # simple structured logger


class MovieSearchEngine:
	"""
	High-level API: free-text search, genre discovery, trending and movies-like-this.
	Holds no per-query state; each call builds its own result set.
	"""

	def __init__(
		self,
		store: RecordStore,  # catalog access
		settings: Optional[Settings] = None,  # runtime configuration
		rng: Optional[random.Random] = None,  # random source for the feeds
		embedder=None,  # embedding provider for live query vectors
	):
		self.store = store
		self.settings = settings or Settings()
		self.rng = rng or random.Random()

		live_query = self.settings.live_query_embedding and embedder is not None
		if self.settings.live_query_embedding and embedder is None:
			logger.warning("[Engine] Live query embedding enabled but no embedding provider given; disabled")
		self.classifier = QueryClassifier(live_query_embedding=live_query)

		# Generators keyed by the names the classifier plans with
		self.generators: Dict[str, CandidateGenerator] = {
			g.name: g for g in (
				SemanticNeighborMatcher(store),
				QualityHeuristicMatcher(store),
				LexicalFuzzyMatcher(store),
				GenreMatcher(store),
			)
		}
		if live_query:
			matcher = QueryEmbeddingMatcher(store, embedder)
			self.generators[matcher.name] = matcher

		self.trending_policy = TieredWeightedShuffle(store, rng=self.rng)
		self.discovery_policy = NoisyRankShuffle(store, rng=self.rng)
		self.paginator = SimilarityPaginator(store, total_estimate=self.settings.similar_total_estimate)
		logger.info(f"[Engine] Ready with generators {sorted(self.generators)}")

	def search(self, query: Optional[str], limit: int = MAX_RESULTS) -> List[SearchResult]:
		"""Run every planned generator in order, fuse their candidates and return the ranked window."""
		context = self.classifier.build_context(query or '')
		results = ResultSet()
		for step in self.classifier.plan(context):
			if step.fallback and len(results):
				logger.debug(f"[Engine] Skipping fallback '{step.generator}': {len(results)} candidates already")
				continue
			generator = self.generators[step.generator]
			candidates = generator.generate(context, **step.params)
			stats = results.merge(candidates, boost=generator.boost)
			logger.debug(f"[Engine] {generator.name} triggered | candidates={len(candidates)} | {stats}")

		ranked = results.ranked(limit=min(limit, MAX_RESULTS))
		logger.info(f"[Engine] '{context.raw_query}' -> {len(ranked)} of {len(results)} fused results")
		return ranked

	def popular_by_genre(self, genres: Sequence[str]) -> List[Movie]:
		"""Shuffled, diversified movies from the requested genres."""
		movies = self.discovery_policy.apply(genres)
		logger.info(f"[Engine] Genre discovery {list(genres)} -> {len(movies)} movies")
		return movies

	def trending(self, limit: int = 10) -> List[Movie]:
		"""Popularity-tiered trending feed."""
		movies = self.trending_policy.apply(limit)
		logger.info(f"[Engine] Trending limit={limit} -> {len(movies)} movies")
		return movies

	def movies_like_this(self, movie_id: int, page: int = 1, limit: int = 12) -> SimilarPage:
		"""Paginated nearest neighbours of one movie."""
		return self.paginator.page_for(QueryContext.for_movie(movie_id, page=page, limit=limit))
