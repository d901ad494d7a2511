"""
Diversification policies for browsing feeds.
Both policies take an injectable random source so callers can make the shuffles deterministic.
"""

import math
import random
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .models import Movie
from .record_store import RecordStore


class TieredWeightedShuffle:
	"""
	Trending feed: popular movies sampled by popularity tier, then shuffled.
	Tiers are the top 2*limit, the next 2*limit and the remainder of a limit*5 pool.
	"""

	POOL_FACTOR = 5
	TIER_FACTOR = 2
	TIER_SHARES = (50, 35, 15)  # percent of limit drawn from top / mid / low

	def __init__(self, store: RecordStore, rng: Optional[random.Random] = None):
		self.store = store
		self.rng = rng or random.Random()

	@classmethod
	def sample_sizes(cls, limit: int) -> Tuple[int, int, int]:
		"""ceil(limit*0.50), ceil(limit*0.35), ceil(limit*0.15)."""
		return tuple(math.ceil(limit * share / 100) for share in cls.TIER_SHARES)

	def tiers(self, pool: Sequence[Movie], limit: int) -> Tuple[List[Movie], List[Movie], List[Movie]]:
		cut = self.TIER_FACTOR * limit
		return list(pool[:cut]), list(pool[cut:2 * cut]), list(pool[2 * cut:])

	def draw(self, pool: Sequence[Movie], limit: int) -> List[Movie]:
		"""Shuffle each tier and take its share; the result may exceed limit by rounding."""
		picked: List[Movie] = []
		for tier, size in zip(self.tiers(pool, limit), self.sample_sizes(limit)):
			self.rng.shuffle(tier)
			picked.extend(tier[:size])
		return picked

	def apply(self, limit: int = 10) -> List[Movie]:
		if limit <= 0:
			return []
		pool = self.store.select(
			where=lambda m: m.popularity is not None and m.release_date is not None,
			order_by=lambda m: m.popularity,
			limit=limit * self.POOL_FACTOR,
		)
		picked = self.draw(pool, limit)
		self.rng.shuffle(picked)
		logger.debug(f"[Trending] pool={len(pool)} picked={len(picked)} limit={limit}")
		return [m.without_embedding() for m in picked[:limit]]


class NoisyRankShuffle:
	"""
	Genre discovery feed: popularity-ordered pool re-ranked with a dominant random term.
	"""

	POOL_SIZE = 300
	SHORTLIST = 50
	RESULT_SIZE = 30
	NOISE = 15.0

	def __init__(self, store: RecordStore, rng: Optional[random.Random] = None):
		self.store = store
		self.rng = rng or random.Random()

	@staticmethod
	def matches(movie: Movie, genres: Sequence[str]) -> bool:
		"""True when any requested genre is a case-insensitive substring of one of the movie's genres."""
		own = movie.genre_set()
		return any(wanted in g for wanted in genres for g in own)

	def noisy_score(self, movie: Movie) -> float:
		popularity = movie.popularity or 1.0
		rating = movie.rating if movie.rating is not None else 5.0
		votes = movie.votes or 1
		return (
			math.log(popularity + 1) * 2
			+ (rating / 2) * 2
			+ math.log(votes + 1)
			+ self.rng.uniform(0, self.NOISE)
		)

	def apply(self, genres: Sequence[str]) -> List[Movie]:
		wanted = [g.strip().lower() for g in genres if g and g.strip()]
		if not wanted:
			return []
		pool = self.store.select(
			where=lambda m: m.popularity is not None and self.matches(m, wanted),
			order_by=lambda m: m.popularity,
			limit=self.POOL_SIZE,
		)
		scored = [(self.noisy_score(m), m) for m in pool]
		scored.sort(key=lambda pair: pair[0], reverse=True)
		shortlist = [m for _, m in scored[:self.SHORTLIST]]
		self.rng.shuffle(shortlist)  # one Fisher-Yates pass
		logger.debug(f"[Discovery] genres={wanted} pool={len(pool)} shortlist={len(shortlist)}")
		return [m.without_embedding() for m in shortlist[:self.RESULT_SIZE]]
