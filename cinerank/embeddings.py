"""
Embedding provider module.
Turns free text into fixed-length dense vectors using sentence-transformers.
"""

# Import NumPy for numerical arrays that store embeddings
import numpy as np  # efficient numeric arrays
# Import the SentenceTransformer model to convert text into embeddings
from sentence_transformers import SentenceTransformer  # pre-trained embedding model

# Import loguru for consistent console logging
from loguru import logger  # console logger

# Movie record used to build document text
from .models import Movie  # structured movie record


def movie_text(movie: Movie) -> str:
	"""
	Document text a movie vector is built from.
	List fields are space-joined; a missing field leaves its label empty.
	"""
	return '\n'.join([
		f"Title: {movie.title or ''}",
		f"Overview: {movie.overview or ''}",
		f"Genres: {' '.join(movie.genres)}",
		f"Production Companies: {' '.join(movie.production_companies)}",
		f"Keywords: {' '.join(movie.keywords)}",
	])


class EmbeddingGenerator:
	"""
	Generates normalised embeddings for free text.
	"""

	def __init__(self, model_name: str = 'all-mpnet-base-v2'):
		"""
		Load the sentence transformer model.
		- model_name selects which pre-trained model to load (768-dim mean-pooled by default).
		"""
		logger.info(f"[Embeddings] Loading embedding model: {model_name}")  # log model selection
		# Downloads on first use then caches locally
		self.model = SentenceTransformer(model_name)  # load model weights
		self.model_name = model_name  # save model id
		self.embedding_dimension = self.model.get_sentence_embedding_dimension()  # vector size
		logger.info(f"[Embeddings] Model ready. Embedding dimension: {self.embedding_dimension}")  # confirm

	def embed(self, text: str) -> np.ndarray:
		"""
		Embed one text; identical text always yields the same vector.
		Returns a float32 NumPy array of length 'embedding_dimension'.
		"""
		# Validate the text to avoid confusing errors downstream
		if not text or not text.strip():  # empty or whitespace only
			raise ValueError("Text to embed cannot be empty")  # clear feedback

		embedding = self.model.encode(
			text.strip(),  # trim surrounding spaces
			convert_to_numpy=True,  # NumPy vector
			normalize_embeddings=True  # unit length for cosine distance
		)
		return embedding.astype('float32')  # single vector

	def get_embedding_dimension(self) -> int:
		"""
		Return the dimensionality of the embedding vectors produced by the model.
		"""
		return self.embedding_dimension  # cached value

	def embed_movie(self, movie: Movie) -> np.ndarray:
		"""Embed a movie's document text (see movie_text)."""
		return self.embed(movie_text(movie))
