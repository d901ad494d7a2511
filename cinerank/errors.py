"""
Error types for CineRank.
Missing signals (no seed, no embedding) are not errors; only caller mistakes and store failures are.
"""


class CineRankError(Exception):
	"""Base exception for all CineRank errors."""


class InvalidRequestError(CineRankError):
	"""The caller supplied an unusable request (e.g. no genre to discover)."""


class RecordStoreError(CineRankError):
	"""The record store or embedding provider failed; the original exception is chained as __cause__."""
