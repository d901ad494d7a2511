"""
Configuration management using pydantic-settings.

Values come from environment variables prefixed with CINERANK_ (or a .env file)
and fall back to development defaults. The CORS allow-list also reads a bare
ALLOWED_ORIGINS variable.

Usage:
	from cinerank.config import get_settings

	settings = get_settings()
	print(settings.data_path)
"""

import sys
from functools import lru_cache
from typing import List

from loguru import logger
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	"""Application settings loaded from the environment."""

	model_config = SettingsConfigDict(
		env_prefix="CINERANK_",
		env_file=".env",
		env_file_encoding="utf-8",
		case_sensitive=False,
		extra="ignore",
		populate_by_name=True,
	)

	# Catalog
	data_path: str = Field(default="data/movies.jsonl", description="JSON Lines catalog file")

	# Embeddings
	embedding_model: str = Field(default="all-mpnet-base-v2", description="Sentence transformer model name")
	embedding_dimension: int = Field(default=768, description="Length of stored movie embeddings")
	live_query_embedding: bool = Field(
		default=False,
		description="Embed the live query text at search time and add its nearest neighbours",
	)

	# Similar-to pagination
	similar_total_estimate: int = Field(
		default=90,
		description="Approximate total reported by the movies-like-this endpoint",
	)

	# Logging
	log_level: str = Field(default="INFO", description="Logging level")

	# HTTP
	allowed_origins: str = Field(
		default="",
		validation_alias=AliasChoices("CINERANK_ALLOWED_ORIGINS", "ALLOWED_ORIGINS"),
		description="Comma-separated CORS allow-list",
	)

	@field_validator("log_level")
	@classmethod
	def validate_log_level(cls, v: str) -> str:
		"""Validate log level is one loguru understands."""
		valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
		upper = v.upper()
		if upper not in valid_levels:
			raise ValueError(f"log_level must be one of {valid_levels}")
		return upper

	def origins(self) -> List[str]:
		"""Split the CORS allow-list into clean origins."""
		return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
	"""Get cached settings; call get_settings.cache_clear() to reload."""
	return Settings()


def setup_logging(level: str = "INFO") -> None:
	"""Route loguru output to stderr at the requested level."""
	logger.remove()
	logger.add(sys.stderr, level=level)
	logger.debug(f"[Config] Logging configured at {level}")
