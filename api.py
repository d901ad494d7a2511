"""
FastAPI server exposing the movie discovery API.
Endpoints:
- GET /health: basic health check
- GET /movies/search?q=...: ranked free-text search (at most 54 results)
- GET /movies/genre/popular?genre=action,thriller: diversified genre discovery (at most 30)
- GET /movies/trending?limit=10: popularity-tiered trending feed
- GET /movies/moviesLikeThis/{movie_id}?page=1&limit=12: paginated similar movies

Startup loads the catalog from CINERANK_DATA_PATH into the in-memory record store.
"""

# Import standard libraries for timing
import time  # measure startup and request latencies
from typing import Any, Dict, List, Optional  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, Query, Request  # FastAPI primitives
from fastapi.middleware.cors import CORSMiddleware  # origin allow-list
from fastapi.responses import JSONResponse  # structured error bodies
from pydantic import BaseModel, ConfigDict  # response schema definitions

# Import our internal modules for configuration, data loading and search
from cinerank.config import Settings, get_settings, setup_logging  # runtime settings
from cinerank.data_loader import DataLoader  # loads catalog records
from cinerank.errors import InvalidRequestError, RecordStoreError  # error taxonomy
from cinerank.record_store import InMemoryRecordStore  # catalog access
from cinerank.search_engine import MovieSearchEngine  # core engine

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger


# Pydantic model that describes the shape of a single movie in responses (no embedding field)
class MovieOut(BaseModel):
	model_config = ConfigDict(extra='ignore')

	id: int  # unique id
	title: str  # human-readable title
	rating: Optional[float] = None  # average vote
	votes: Optional[int] = None  # vote count
	popularity: Optional[float] = None  # popularity score
	revenue: Optional[int] = None
	budget: Optional[int] = None
	runtime: Optional[int] = None
	status: Optional[str] = None
	release_date: Optional[str] = None
	adult: Optional[bool] = None
	original_language: Optional[str] = None
	original_title: Optional[str] = None
	overview: Optional[str] = None
	tagline: Optional[str] = None
	homepage: Optional[str] = None
	imdb_id: Optional[str] = None
	poster_path: Optional[str] = None
	backdrop_path: Optional[str] = None
	genres: List[str] = []
	production_companies: List[str] = []
	production_countries: List[str] = []
	spoken_languages: List[str] = []
	keywords: List[str] = []


# A ranked search hit: movie fields plus fusion scores
class SearchItem(MovieOut):
	rank: float  # source-agreement signal
	score: float  # composite ranking key
	similarity: Optional[float] = None  # vector similarity when a semantic generator found it


# A similar-movie hit: movie fields plus similarity to the target
class SimilarItem(MovieOut):
	similarity_score: float


# Paginated similar-movies payload
class SimilarPageOut(BaseModel):
	page: int
	limit: int
	total: int
	data: List[SimilarItem]


def build_engine(settings: Settings) -> MovieSearchEngine:
	"""Load the catalog and wire the engine (plus the embedding provider when live queries are on)."""
	loader = DataLoader(embedding_dimension=settings.embedding_dimension)  # create loader instance
	movies = loader.load_movies_from_jsonl(settings.data_path)  # read dataset
	logger.info(f"[API] Loaded {len(movies)} movies across {len(loader.get_all_genres(movies))} genres")
	store = InMemoryRecordStore(movies, embedding_dimension=settings.embedding_dimension)

	embedder = None
	if settings.live_query_embedding:
		from cinerank.embeddings import EmbeddingGenerator  # heavy import only when needed
		embedder = EmbeddingGenerator(settings.embedding_model)
	return MovieSearchEngine(store, settings=settings, embedder=embedder)


def create_app(engine: Optional[MovieSearchEngine] = None, settings: Optional[Settings] = None) -> FastAPI:
	"""
	Build the FastAPI application.
	- engine: prebuilt engine (tests); when None the catalog is loaded at startup
	"""
	settings = settings or get_settings()
	app = FastAPI(title="CineRank API", version="1.0.0")  # web app
	app.state.engine = engine  # may be filled at startup
	app.state.startup_seconds = 0.0

	origins = settings.origins()
	if origins:
		# Requests without an Origin header (curl, server-to-server) are unaffected by CORS
		app.add_middleware(
			CORSMiddleware,
			allow_origins=origins,
			allow_credentials=True,
			allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
			allow_headers=["*"],
		)

	@app.on_event("startup")
	async def startup_event():
		"""Initialize the search engine once."""
		setup_logging(settings.log_level)
		if app.state.engine is not None:
			return
		start = time.time()  # start timer for startup latency
		logger.info("[API] Startup: loading movies and initializing engine...")  # log intent
		app.state.engine = build_engine(settings)
		app.state.startup_seconds = time.time() - start  # elapsed seconds
		logger.info(f"[API] Startup complete in {app.state.startup_seconds:.2f}s.")  # summary log

	@app.exception_handler(InvalidRequestError)
	async def invalid_request_handler(request: Request, exc: InvalidRequestError):
		logger.info(f"[API] Rejected {request.url.path}: {exc}")
		return JSONResponse(status_code=400, content={"error": str(exc)})

	@app.exception_handler(RecordStoreError)
	async def store_error_handler(request: Request, exc: RecordStoreError):
		logger.error(f"[API] Store failure on {request.url.path}: {exc} (cause: {exc.__cause__!r})")
		return JSONResponse(status_code=503, content={"error": str(exc)})

	def engine_or_fail() -> MovieSearchEngine:
		if app.state.engine is None:
			raise RecordStoreError("Search engine is not initialized")
		return app.state.engine

	# Simple health endpoint for readiness checks
	@app.get("/health")
	async def health() -> Dict[str, Any]:
		"""Return minimal health info for liveness/readiness probes."""
		return {
			"status": "ok",  # constant indicator
			"engine_ready": app.state.engine is not None,  # True if engine initialized
			"startup_seconds": round(app.state.startup_seconds, 2),  # startup latency
		}

	@app.get("/movies/search", response_model=List[SearchItem])
	def search(q: str = Query("", description="Free-text movie query")):
		"""Ranked free-text search."""
		start = time.time()  # start timer
		results = engine_or_fail().search(q)  # run search
		elapsed_ms = (time.time() - start) * 1000  # compute ms
		logger.info(f"[API] /movies/search q='{q}' served {len(results)} results in {elapsed_ms:.2f} ms")
		return [r.to_dict() for r in results]

	@app.get("/movies/genre/popular", response_model=List[MovieOut])
	def popular_by_genre(genre: Optional[str] = Query(None, description="Comma-separated genre names")):
		"""Diversified discovery feed for one or more genres."""
		genres = [g.strip().lower() for g in (genre or "").split(",") if g.strip()]
		if not genres:
			raise InvalidRequestError("genre query parameter is required")
		return [m.to_dict() for m in engine_or_fail().popular_by_genre(genres)]

	@app.get("/movies/trending", response_model=List[MovieOut])
	def trending(limit: int = Query(10, description="Number of movies to return")):
		"""Popularity-tiered trending feed."""
		return [m.to_dict() for m in engine_or_fail().trending(limit)]

	@app.get("/movies/moviesLikeThis/{movie_id}", response_model=SimilarPageOut)
	def movies_like_this(movie_id: int, page: int = 1, limit: int = 12):
		"""Movies closest to the given movie, paginated; out-of-range page/limit are clamped."""
		return engine_or_fail().movies_like_this(movie_id, page=page, limit=limit).to_dict()

	return app


# Module-level app for `uvicorn api:app`
app = create_app()
