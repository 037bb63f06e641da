"""Rate-limited HTTP client for The Movie Database (TMDB) v3 API.

This module implements the adapter pattern to handle authentication,
request building, throttling, and telemetry for the TMDB endpoints the
seeder walks.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future
from typing import Any

import requests

from catalog_seeder.client.rate_limiter import RateLimitedQueue
from catalog_seeder.client.results import FetchResult, GenreVocabulary
from catalog_seeder.config.retry_policy import build_retry_policy
from catalog_seeder.config.tmdb_settings import TmdbSettings

logger = logging.getLogger(__name__)

TMDB_BASE_URL = "https://api.themoviedb.org/3"


class TmdbClient:
    """Client for the TMDB endpoints needed to seed the catalog.

    Every public fetch goes through a shared RateLimitedQueue and resolves
    to a FetchResult; transport and HTTP failures are logged, never raised.

    Attributes:
        session (requests.Session): Persistent session for HTTP requests.
        base_url (str): The root URL for the TMDB service.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = TMDB_BASE_URL,
        *,
        queue: RateLimitedQueue | None = None,
        requests_per_second: int = 40,
        timeout: float = 10.0,
        max_attempts: int = 1,
        language: str | None = None,
    ):
        """Initializes the TmdbClient with a v3 API key.

        Args:
            api_key: The TMDB v3 api_key query parameter.
            base_url: The base URL for the API.
            queue: Shared rate-limited queue. Created from requests_per_second if omitted.
            requests_per_second: Ceiling used when the queue is created here.
            timeout: Per-request timeout in seconds.
            max_attempts: Attempts per request for transient errors (1 = no retry).
            language: Optional `language` query parameter sent with every request.
        """

        self.session = requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._default_params: dict[str, Any] = {"api_key": api_key}
        if language:
            self._default_params["language"] = language

        self._owns_queue = queue is None
        self._queue = queue or RateLimitedQueue(
            max_per_interval=requests_per_second, interval=1.0
        )

        self.fetch_data = build_retry_policy(max_attempts)(self._fetch_once)

        logger.info(
            "TmdbClient initialized with base_url=%s max_attempts=%d",
            self.base_url,
            max_attempts,
        )

    @classmethod
    def from_settings(cls, settings: TmdbSettings) -> TmdbClient:
        queue = RateLimitedQueue(
            max_per_interval=settings.requests_per_second,
            interval=1.0,
            max_workers=settings.max_workers,
        )
        client = cls(
            api_key=settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            queue=queue,
            timeout=settings.timeout_seconds,
            max_attempts=settings.max_attempts,
            language=settings.tmdb_language,
        )
        client._owns_queue = True
        return client

    def __enter__(self) -> TmdbClient:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_queue:
            self._queue.shutdown()
        self.session.close()

    @property
    def pending(self) -> int:
        """Queued plus in-flight requests, for progress reporting."""
        return self._queue.pending

    # -------------------------------------------------------------------------
    # Raw transport
    # -------------------------------------------------------------------------

    def _fetch_once(self, endpoint: str, query_params: dict | None = None) -> dict:
        """Fetches and parses JSON data from a specific TMDB endpoint.

        Wrapped by the retry policy in __init__ (exposed as `fetch_data`).
        Every attempt takes its own rate-limit slot, retries included.

        Args:
            endpoint: The API path (e.g., '/movie/popular').
            query_params: Dictionary of URL parameters for the request.

        Returns:
            dict: The parsed JSON response from the server.

        Raises:
            requests.exceptions.RequestException: If the request fails
                after all retry attempts are exhausted.
        """

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        params = dict(self._default_params)
        if query_params:
            params.update(query_params)

        self._queue.acquire()
        start_ts = time.perf_counter()

        try:
            logger.debug(
                "TMDB_REQUEST_START endpoint=%s params=%s", endpoint, query_params
            )
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()

            duration = (time.perf_counter() - start_ts) * 1000
            logger.info(
                "TMDB_REQUEST_SUCCESS endpoint=%s status=%s latency_ms=%.2f",
                endpoint,
                response.status_code,
                duration,
            )

            return response.json()

        except requests.exceptions.RequestException as e:
            duration = (time.perf_counter() - start_ts) * 1000
            logger.error(
                "TMDB_REQUEST_FAILED endpoint=%s latency_ms=%.2f error=%s",
                endpoint,
                duration,
                str(e),
            )

            raise

    def _guarded(self, endpoint: str, query_params: dict | None) -> FetchResult:
        """Runs one fetch inside a queue worker and folds failures into a FetchResult."""
        try:
            payload = self.fetch_data(endpoint, query_params)
        except requests.exceptions.RequestException as e:
            return FetchResult.failure(f"{type(e).__name__}: {e}")

        if not isinstance(payload, dict):
            return FetchResult.failure(
                f"unexpected payload type {type(payload).__name__}"
            )
        return FetchResult.success(payload)

    def submit(self, endpoint: str, query_params: dict | None = None) -> Future[FetchResult]:
        """Queue a GET through the rate limiter without waiting for it."""
        return self._queue.dispatch(self._guarded, endpoint, query_params)

    def _get(self, endpoint: str, query_params: dict | None = None) -> FetchResult:
        return self.submit(endpoint, query_params).result()

    # -------------------------------------------------------------------------
    # Catalog operations
    # -------------------------------------------------------------------------

    def fetch_popular_movies(self, page: int) -> FetchResult:
        """One page of /movie/popular: {page, results, total_pages, total_results}."""
        return self._get("/movie/popular", {"page": page})

    def fetch_popular_shows(self, page: int) -> FetchResult:
        """One page of /tv/popular."""
        return self._get("/tv/popular", {"page": page})

    def fetch_movie_details(self, movie_id: int) -> FetchResult:
        """Movie detail with credits; companies and collection are part of the base payload."""
        result = self._get(f"/movie/{movie_id}", {"append_to_response": "credits"})
        if not result.ok:
            logger.error("TMDB_MOVIE_DETAIL_FAILED tmdb_id=%s reason=%s", movie_id, result.error)
        return result

    def fetch_show_details(self, show_id: int) -> FetchResult:
        """Show detail with credits; companies, networks and season summaries come in the base payload."""
        result = self._get(f"/tv/{show_id}", {"append_to_response": "credits"})
        if not result.ok:
            logger.error("TMDB_SHOW_DETAIL_FAILED tmdb_id=%s reason=%s", show_id, result.error)
        return result

    def fetch_season_details(self, show_id: int, season_number: int) -> FetchResult:
        """Season detail including its episodes and season-level credits."""
        result = self._get(
            f"/tv/{show_id}/season/{season_number}", {"append_to_response": "credits"}
        )
        if not result.ok:
            logger.error(
                "TMDB_SEASON_DETAIL_FAILED tmdb_id=%s season=%s reason=%s",
                show_id,
                season_number,
                result.error,
            )
        return result

    def fetch_genres(self) -> GenreVocabulary:
        """Movie and TV genre vocabularies, requested concurrently through the queue."""
        movie_future = self.submit("/genre/movie/list")
        tv_future = self.submit("/genre/tv/list")

        movies, tv = movie_future.result(), tv_future.result()
        errors = tuple(r.error for r in (movies, tv) if not r.ok)
        if errors:
            logger.error("TMDB_GENRES_FAILED errors=%s", errors)

        return GenreVocabulary(
            movies=(movies.payload.get("genres") or []) if movies.ok else [],
            tv=(tv.payload.get("genres") or []) if tv.ok else [],
            errors=errors,
        )
