"""
Vector store module using FAISS.
Keeps movie embeddings in an exact inner-product index and answers nearest-neighbour queries by cosine distance.
"""

# Import NumPy for typed arrays passed to FAISS
import numpy as np  # numeric arrays
# Import FAISS (Facebook AI Similarity Search) for exact nearest-neighbor search
import faiss  # vector index
# Typing hints for clarity of public API
from typing import List, Tuple  # type hints

# Console logging
from loguru import logger  # console logger


def normalize(vector: np.ndarray) -> np.ndarray:
	"""Return a float32 L2-normalised copy of a single vector."""
	vec = np.asarray(vector, dtype='float32').reshape(-1)
	norm = float(np.linalg.norm(vec))
	if norm == 0.0:
		return vec
	return vec / norm


def cosine_distance(a: np.ndarray, b: np.ndarray) -> float:
	"""Cosine distance between two vectors; smaller means more similar (similarity = 1 - distance)."""
	return float(1.0 - np.dot(normalize(a), normalize(b)))


class VectorStore:
	"""
	Manages a FAISS index of movie embeddings.
	Rows are L2-normalised so inner product equals cosine similarity.
	"""

	def __init__(self, embedding_dimension: int):
		"""
		Initialize the FAISS index for a specific embedding dimension.
		- embedding_dimension: length of each embedding vector (e.g., 768)
		"""
		self.embedding_dimension = embedding_dimension  # vector length
		self.index = faiss.IndexFlatIP(embedding_dimension)  # inner product on unit vectors == cosine
		self.movie_ids: List[int] = []  # index row -> movie id
		logger.info(f"[VectorStore] Initialized FAISS index | dim={embedding_dimension} | metric=cosine")

	def add(self, movie_ids: List[int], embeddings: np.ndarray):
		"""
		Add embeddings for the given movie ids.
		- embeddings: NumPy array of shape (len(movie_ids), embedding_dimension)
		"""
		embeddings = np.asarray(embeddings, dtype='float32')  # FAISS wants float32
		if embeddings.ndim == 1:
			embeddings = embeddings.reshape(1, -1)
		# Validate count consistency between ids and vectors
		if len(movie_ids) != embeddings.shape[0]:
			raise ValueError(
				f"Number of ids ({len(movie_ids)}) doesn't match number of embeddings ({embeddings.shape[0]})"
			)
		# Partial vectors are never stored
		if embeddings.shape[1] != self.embedding_dimension:
			raise ValueError(
				f"Embedding dimension ({embeddings.shape[1]}) doesn't match expected ({self.embedding_dimension})"
			)
		embeddings = embeddings.copy()
		faiss.normalize_L2(embeddings)  # in-place row normalisation
		self.index.add(embeddings)
		self.movie_ids.extend(movie_ids)
		logger.debug(f"[VectorStore] Added {len(movie_ids)} vectors | total in index: {self.index.ntotal}")

	def search_all(self, query_embedding: np.ndarray) -> List[Tuple[int, float]]:
		"""
		Rank every stored vector against the query.
		Returns (movie_id, cosine_distance) pairs ordered by distance ascending.
		"""
		if self.index.ntotal == 0:
			return []
		query = normalize(query_embedding).reshape(1, -1)
		# Validate vector length
		if query.shape[1] != self.embedding_dimension:
			raise ValueError(
				f"Query embedding dimension ({query.shape[1]}) doesn't match expected ({self.embedding_dimension})"
			)
		similarities, indices = self.index.search(query, self.index.ntotal)
		results = []
		for sim, idx in zip(similarities[0], indices[0]):
			if idx < 0:  # -1 marks an empty slot
				continue
			results.append((self.movie_ids[idx], float(1.0 - sim)))
		return results

	def size(self) -> int:
		"""Return the number of vectors currently stored in the index."""
		return self.index.ntotal
