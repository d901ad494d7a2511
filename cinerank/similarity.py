"""
"Movies like this" pagination over the target movie's embedding neighbours.
"""

from loguru import logger

from .errors import InvalidRequestError
from .models import QueryContext, SimilarMovie, SimilarPage
from .record_store import RecordStore

MAX_PAGE_SIZE = 50


class SimilarityPaginator:
	"""
	Pages through every embedded movie ordered by distance to a target movie.
	The reported total is a configured estimate, not a count.
	"""

	def __init__(self, store: RecordStore, total_estimate: int = 90):
		self.store = store
		self.total_estimate = total_estimate

	@staticmethod
	def clamp(page: int, limit: int):
		"""page >= 1 and 1 <= limit <= 50."""
		return max(1, page), min(MAX_PAGE_SIZE, max(1, limit))

	def page(self, movie_id: int, page: int = 1, limit: int = 12) -> SimilarPage:
		page, limit = self.clamp(page, limit)
		target = self.store.get(movie_id)
		if target is None or not target.has_embedding():
			logger.debug(f"[Similar] Movie {movie_id} has no embedding; returning empty page")
			return SimilarPage(page=page, limit=limit, total=0, data=[])

		offset = (page - 1) * limit
		neighbours = self.store.nearest(
			target.embedding,
			where=lambda m: m.id != movie_id,
			limit=limit,
			offset=offset,
		)
		logger.debug(f"[Similar] movie={movie_id} page={page} limit={limit} -> {len(neighbours)} results")
		return SimilarPage(
			page=page,
			limit=limit,
			total=self.total_estimate,
			data=[SimilarMovie(movie=m.without_embedding(), similarity_score=1.0 - d) for m, d in neighbours],
		)

	def page_for(self, context: QueryContext) -> SimilarPage:
		"""Page for a similar-to context built with QueryContext.for_movie."""
		if context.movie_id is None:
			raise InvalidRequestError("movie id is required for a similar-to lookup")
		return self.page(context.movie_id, page=context.page, limit=context.limit)
