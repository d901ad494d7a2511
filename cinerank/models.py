"""
Data models for CineRank.
Defines the catalog record, the per-query candidate and the result shapes used across the engine.
"""

# Import dataclass helpers to define simple record-like classes without boilerplate
from dataclasses import dataclass, field, fields, replace  # auto-generated __init__/__repr__
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Tuple  # containers and optional values

import numpy as np  # embedding vectors


@dataclass
class Movie:
	"""
	Represents a single catalog movie and everything we know about it.
	Records are read-only once loaded; `embedding` is either None or a full-length vector.
	"""
	id: int  # unique, stable identifier
	title: str  # display title
	rating: Optional[float] = None  # average vote on a 0-10 scale
	votes: Optional[int] = None  # number of votes behind the rating
	popularity: Optional[float] = None  # popularity score from the dataset
	revenue: Optional[int] = None  # box office revenue
	budget: Optional[int] = None  # production budget
	runtime: Optional[int] = None  # minutes
	status: Optional[str] = None  # e.g. "Released"
	release_date: Optional[str] = None  # ISO date (YYYY-MM-DD)
	adult: Optional[bool] = None
	original_language: Optional[str] = None
	original_title: Optional[str] = None
	overview: Optional[str] = None  # synopsis
	tagline: Optional[str] = None
	homepage: Optional[str] = None
	imdb_id: Optional[str] = None
	poster_path: Optional[str] = None
	backdrop_path: Optional[str] = None
	genres: List[str] = field(default_factory=list)  # e.g. ["Action", "Thriller"]
	production_companies: List[str] = field(default_factory=list)
	production_countries: List[str] = field(default_factory=list)
	spoken_languages: List[str] = field(default_factory=list)
	keywords: List[str] = field(default_factory=list)
	embedding: Optional[np.ndarray] = field(default=None, repr=False, compare=False)  # internal matching artifact

	def has_embedding(self) -> bool:
		return self.embedding is not None

	def without_embedding(self) -> "Movie":
		"""Return a copy safe to hand to callers (embedding removed)."""
		return replace(self, embedding=None)

	def genre_set(self) -> set:
		"""Lowercased genre names for case-insensitive set tests."""
		return {g.lower() for g in self.genres if g}

	def to_dict(self) -> Dict[str, Any]:
		"""Serialize every public field; the embedding is never included."""
		return {f.name: getattr(self, f.name) for f in fields(self) if f.name != 'embedding'}


@dataclass
class Candidate:
	"""
	A movie proposed by one generator for one query.
	Candidates from different generators with the same movie id are the same entry for fusion.
	"""
	movie: Movie  # referenced record
	source: str  # generator name that introduced the entry
	rank: float  # accumulated rank contribution
	similarity: Optional[float] = None  # 1 - vector distance when a generator computed it

	@property
	def movie_id(self) -> int:
		return self.movie.id


@dataclass
class SearchResult:
	"""One ranked, embedding-free entry returned to callers."""
	movie: Movie
	rank: float  # source-agreement signal after fusion
	score: float  # composite ranking key
	similarity: Optional[float] = None

	def to_dict(self) -> Dict[str, Any]:
		data = self.movie.to_dict()
		data['rank'] = self.rank
		data['score'] = self.score
		if self.similarity is not None:
			data['similarity'] = self.similarity
		return data


@dataclass(frozen=True)
class QueryContext:
	"""
	Immutable input to one search invocation.
	`lowered` and `length` are derived from the raw query; `genres` holds canonical genres found in it.
	Similar-to lookups carry the target `movie_id` with `page` and `limit` instead of query text.
	"""
	raw_query: str
	lowered: str
	length: int
	genres: Tuple[str, ...] = ()
	movie_id: Optional[int] = None
	page: int = 1
	limit: int = 12

	@classmethod
	def for_movie(cls, movie_id: int, page: int = 1, limit: int = 12) -> 'QueryContext':
		return cls(raw_query='', lowered='', length=0, movie_id=movie_id, page=page, limit=limit)


@dataclass
class SimilarMovie:
	"""A neighbour of a target movie with its vector similarity attached."""
	movie: Movie
	similarity_score: float  # 1 - cosine distance to the target

	def to_dict(self) -> Dict[str, Any]:
		data = self.movie.to_dict()
		data['similarity_score'] = self.similarity_score
		return data


@dataclass
class SimilarPage:
	"""Paginated "movies like this" response."""
	page: int
	limit: int
	total: int
	data: List[SimilarMovie] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			'page': self.page,
			'limit': self.limit,
			'total': self.total,
			'data': [r.to_dict() for r in self.data],
		}
