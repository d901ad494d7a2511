"""
Score fusion module.
Merges candidates from several generators into one deduplicated result set and orders it by a composite key.
"""

import math
from collections import OrderedDict
from typing import Dict, List, Optional

from loguru import logger

from .models import Candidate, Movie, SearchResult

MAX_RESULTS = 54


def composite_key(movie: Movie, rank: float) -> float:
	"""
	rank + popularity*0.01 + rating*0.2 + ln(votes + 1)*0.15
	Missing popularity/rating count as 0 and missing votes as 1.
	"""
	popularity = movie.popularity or 0.0
	rating = movie.rating or 0.0
	votes = movie.votes or 1
	return rank + popularity * 0.01 + rating * 0.2 + math.log(votes + 1) * 0.15


class ResultSet:
	"""
	Movie id -> Candidate accumulator for one query.
	The first generator to introduce an id owns the entry; later generators can only boost it.
	"""

	def __init__(self):
		self._entries: "OrderedDict[int, Candidate]" = OrderedDict()

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, movie_id: int) -> bool:
		return movie_id in self._entries

	def get(self, movie_id: int) -> Optional[Candidate]:
		return self._entries.get(movie_id)

	def merge(self, candidates: List[Candidate], boost: Optional[float] = None) -> Dict[str, int]:
		"""
		Apply one generator's output.
		New ids are inserted with their own contribution; existing ids are incremented by
		`boost` when the generator defines one and left alone otherwise.
		"""
		inserted = boosted = 0
		for candidate in candidates:
			existing = self._entries.get(candidate.movie_id)
			if existing is None:
				self._entries[candidate.movie_id] = Candidate(
					movie=candidate.movie,
					source=candidate.source,
					rank=candidate.rank,
					similarity=candidate.similarity,
				)
				inserted += 1
			elif boost is not None:
				existing.rank += boost
				boosted += 1
		return {'inserted': inserted, 'boosted': boosted}

	def ranked(self, limit: int = MAX_RESULTS) -> List[SearchResult]:
		"""Sort by composite key descending, strip embeddings and truncate."""
		results = [
			SearchResult(
				movie=c.movie.without_embedding(),
				rank=c.rank,
				score=composite_key(c.movie, c.rank),
				similarity=c.similarity,
			)
			for c in self._entries.values()
		]
		results.sort(key=lambda r: r.score, reverse=True)  # stable: ties keep insertion order
		logger.debug(f"[Fusion] Ranked {len(results)} entries, returning {min(limit, len(results))}")
		return results[:limit]
