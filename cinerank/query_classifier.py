"""
Query classification module.
Decides which candidate generators run for a free-text query, in which order, and with which parameters.
"""

import re  # connector stripping and superlative detection
from dataclasses import dataclass, field  # plan step container
from typing import Any, Callable, Dict, List, Tuple  # type annotations

from loguru import logger  # console logging

from .models import QueryContext  # immutable query input


DEFAULT_QUERY = 'top action'

# Generator names shared with the engine
SEMANTIC = 'semantic'
QUALITY = 'quality'
LEXICAL = 'lexical'
GENRE = 'genre'
LIVE_QUERY = 'live_query'


@dataclass
class PlanStep:
	"""
	One generator invocation.
	fallback steps only run when no earlier step produced a candidate.
	"""
	generator: str
	params: Dict[str, Any] = field(default_factory=dict)
	fallback: bool = False


@dataclass
class Rule:
	"""Declarative routing rule: when predicate holds, run generator with params(context)."""
	generator: str
	predicate: Callable[[QueryContext], bool]
	params: Callable[[QueryContext], Dict[str, Any]] = lambda ctx: {}
	fallback: bool = False


class QueryClassifier:
	"""
	Maps a raw query onto an ordered generator plan.
	Rules are evaluated independently and more than one may apply; their order is the fusion order.
	"""

	# Keyword -> canonical genre name, matched by substring against the lowercased query
	GENRE_KEYWORDS = {
		'action': 'Action',
		'anime': 'Animation',
		'adventure': 'Adventure',
		'scifi': 'Science Fiction',
		'sci-fi': 'Science Fiction',
		'sciencefiction': 'Science Fiction',
		'thriller': 'Thriller',
		'crime': 'Crime',
		'drama': 'Drama',
		'romance': 'Romance',
		'comedy': 'Comedy',
		'horror': 'Horror',
		'fantasy': 'Fantasy',
		'mystery': 'Mystery',
		'animation': 'Animation',
		'family': 'Family',
		'war': 'War',
		'western': 'Western',
		'history': 'History',
		'music': 'Music',
	}

	RE_SUPERLATIVE = re.compile(r"best|top|popular|trending|high rated|must watch", re.I)
	RE_CONNECTORS = re.compile(
		r"\b(?:movies?\s+(?:like|similar\s+to|recommend)|similar\s+(?:like|to)|recommend|me|some)\b",
		re.I,
	)

	SEED_MIN_LENGTH = 8
	GENRE_MIN_LENGTH = 5
	SHORT_QUERY_LENGTH = 3
	SHORT_QUERY_WINDOW = 50
	DEFAULT_WINDOW = 20

	def __init__(self, live_query_embedding: bool = False):
		self.live_query_embedding = live_query_embedding
		self.rules: List[Rule] = [
			Rule(SEMANTIC, lambda ctx: ctx.length >= self.SEED_MIN_LENGTH),
			Rule(QUALITY, self.is_superlative),
			Rule(LEXICAL, lambda ctx: True, self._lexical_params, fallback=True),
			Rule(GENRE, lambda ctx: ctx.length >= self.GENRE_MIN_LENGTH and bool(ctx.genres), lambda ctx: {'genres': ctx.genres}),
		]
		if live_query_embedding:
			self.rules.append(Rule(LIVE_QUERY, lambda ctx: ctx.length >= self.SHORT_QUERY_LENGTH))

	def build_context(self, query: str) -> QueryContext:
		"""Normalize the raw query; an empty query becomes the default discovery query."""
		if not query:
			query = DEFAULT_QUERY
			logger.debug(f"[Classifier] Empty query replaced with '{DEFAULT_QUERY}'")
		return QueryContext(
			raw_query=query,
			lowered=query.lower(),
			length=len(query),
			genres=tuple(self.extract_genres(query)),
		)

	def plan(self, context: QueryContext) -> List[PlanStep]:
		"""Evaluate every rule against the context and return the steps that apply, in order."""
		steps = [
			PlanStep(rule.generator, rule.params(context), rule.fallback)
			for rule in self.rules
			if rule.predicate(context)
		]
		logger.debug(f"[Classifier] '{context.raw_query}' (len={context.length}) -> {describe(steps)}")
		return steps

	def is_superlative(self, context: QueryContext) -> bool:
		return bool(self.RE_SUPERLATIVE.search(context.raw_query))

	def _lexical_params(self, context: QueryContext) -> Dict[str, Any]:
		window = self.SHORT_QUERY_WINDOW if context.length < self.SHORT_QUERY_LENGTH else self.DEFAULT_WINDOW
		return {'window': window}

	@classmethod
	def extract_genres(cls, query: str) -> List[str]:
		"""Canonical genres whose keyword or canonical name occurs in the query."""
		lowered = query.lower()
		found: List[str] = []
		for key, value in cls.GENRE_KEYWORDS.items():
			if (key in lowered or value.lower() in lowered) and value not in found:
				found.append(value)
		return found

	@classmethod
	def extract_base_title(cls, query: str) -> str:
		"""Strip connector phrases ("movies like", "similar to", ...) and lowercase what is left."""
		stripped = cls.RE_CONNECTORS.sub(' ', query)
		return ' '.join(stripped.split()).lower()


def describe(steps: List[PlanStep]) -> List[Tuple[str, Dict[str, Any]]]:
	"""Compact (generator, params) view of a plan, handy for logs and assertions."""
	return [(s.generator, s.params) for s in steps]
