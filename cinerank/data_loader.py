"""
Data loading module.
Reads catalog records from JSON Lines into Movie objects for the in-memory record store.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
import re  # release date formats
from typing import Any, Dict, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

import numpy as np  # embedding vectors

# Import our Movie data class used across the project
from .models import Movie  # structured movie record

# Console logging
from loguru import logger  # console logger

RE_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
RE_DAY_FIRST_DATE = re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$")


class DataLoader:
	"""
	Loads movie records that were prepared (and optionally embedded) upstream.
	"""

	LIST_FIELDS = ('genres', 'production_companies', 'production_countries', 'spoken_languages', 'keywords')
	TEXT_FIELDS = (
		'status', 'original_language', 'original_title', 'overview', 'tagline',
		'homepage', 'imdb_id', 'poster_path', 'backdrop_path',
	)

	def __init__(self, embedding_dimension: Optional[int] = None):
		"""embedding_dimension: expected vector length; vectors of any other length are dropped."""
		self.embedding_dimension = embedding_dimension

	def load_movies_from_jsonl(self, filepath: str) -> List[Movie]:
		"""
		Load movies from a JSON Lines (JSONL) file where each line is one JSON object.
		Returns a list of Movie objects.
		"""
		movies = []  # accumulator for parsed Movie objects
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Movie data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading movies from {filepath}...")  # log action

		# Read line-by-line to handle large catalogs
		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # blank line
					continue
				try:
					data = json.loads(line)  # parse JSON object per line
					movies.append(self.parse_movie(data))  # convert dict -> Movie
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
				except (KeyError, TypeError, ValueError) as e:
					logger.warning(f"[DataLoader] Error parsing movie at line {line_num}: {e}")  # bad field

		logger.info(f"[DataLoader] Successfully loaded {len(movies)} movies.")  # summary
		return movies  # return list

	def parse_movie(self, data: Dict[str, Any]) -> Movie:
		"""
		Convert a raw dictionary into a Movie.
		Accepts TMDB column names (vote_average/vote_count) or rating/votes.
		"""
		if 'id' not in data or data['id'] in (None, ''):
			raise KeyError("id")

		movie = Movie(
			id=int(data['id']),
			title=str(data.get('title') or ''),
			rating=self._to_float(self._first(data, 'vote_average', 'rating')),
			votes=self._to_int(self._first(data, 'vote_count', 'votes')),
			popularity=self._to_float(data.get('popularity')),
			revenue=self._to_int(data.get('revenue')),
			budget=self._to_int(data.get('budget')),
			runtime=self._to_int(data.get('runtime')),
			release_date=self._to_date(data.get('release_date')),
			adult=self._to_bool(data.get('adult')),
			embedding=self._parse_embedding(data.get('embedding'), data['id']),
		)
		for name in self.TEXT_FIELDS:
			setattr(movie, name, data.get(name) or None)  # empty string -> None
		for name in self.LIST_FIELDS:
			setattr(movie, name, self._parse_comma_separated(data.get(name)))
		return movie

	@staticmethod
	def _first(data: Dict[str, Any], *keys: str) -> Any:
		for key in keys:
			if data.get(key) not in (None, ''):
				return data[key]
		return None

	@staticmethod
	def _to_float(value) -> Optional[float]:
		if value in (None, ''):
			return None
		return float(value)

	@staticmethod
	def _to_int(value) -> Optional[int]:
		if value in (None, ''):
			return None
		return int(float(value))

	@staticmethod
	def _to_date(value) -> Optional[str]:
		"""ISO YYYY-MM-DD from either ISO or DD-MM-YYYY / DD/MM/YYYY input; anything else is None."""
		if not value:
			return None
		text = str(value).strip()
		if RE_ISO_DATE.match(text):
			return text
		match = RE_DAY_FIRST_DATE.match(text)
		if match is None:
			logger.debug(f"[DataLoader] Unrecognised release date '{text}'")
			return None
		day, month, year = match.groups()
		return f"{year}-{int(month):02d}-{int(day):02d}"

	@staticmethod
	def _to_bool(value) -> Optional[bool]:
		if value in (None, ''):
			return None
		if isinstance(value, bool):
			return value
		return str(value).lower() == 'true'

	def _parse_comma_separated(self, value) -> List[str]:
		"""
		Normalize a value that may be None, a list, or a comma-separated string
		into a list of clean strings.
		"""
		if value is None:  # missing field
			return []  # treat as empty list
		if isinstance(value, list):  # already a list
			return [str(item).strip() for item in value if item]  # clean each
		if isinstance(value, str):  # comma-separated string
			return [item.strip() for item in value.split(',') if item.strip()]  # split/trim
		return []  # any other type becomes empty

	def _parse_embedding(self, value, movie_id) -> Optional[np.ndarray]:
		"""Return a float32 vector, or None when missing or not full length."""
		if value is None:
			return None
		if isinstance(value, str):  # pgvector text form "[0.1,0.2,...]"
			value = json.loads(value)
		vector = np.asarray(value, dtype='float32').reshape(-1)
		if vector.size == 0:
			return None
		if self.embedding_dimension and vector.size != self.embedding_dimension:
			logger.warning(
				f"[DataLoader] Dropping embedding for movie {movie_id}: {vector.size} dims, expected {self.embedding_dimension}"
			)
			return None
		return vector

	def get_all_genres(self, movies: List[Movie]) -> List[str]:
		"""Return a sorted list of all unique genres in the dataset."""
		genres = set()  # unique genres
		for movie in movies:  # iterate
			genres.update(movie.genres)
		return sorted(genres)  # sorted output
