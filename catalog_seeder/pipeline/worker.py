"""
TMDB catalog seed worker.

Purpose
- Walk the popular movie and popular show listings.
- Fetch one detail payload per listed title (plus up to N season payloads per show).
- Hand each payload to the NormalizationEngine, which accumulates the
  seventeen output tables in memory.

Hard invariants
- Strictly sequential loop: wait for one detail fetch, normalize it, move on.
  The identity registry is therefore never read and written concurrently.
- A failed detail fetch skips that title and everything nested under it.
  A failed season fetch skips only that season.
- Nothing raised by a single title's fetch aborts the run.

Operational behavior
- Genres are loaded first (movie + TV vocabularies fetched concurrently).
- Titles already normalized in this run (popular lists can repeat an id
  across pages) are skipped without another detail fetch.
- Progress lines include the client's pending request count.

Non-responsibilities
- No persistence. The caller decides where the OutputTables go.
- No retries beyond what the client's retry policy does.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from catalog_seeder.client.pagination import walk_pages
from catalog_seeder.client.results import FetchResult, GenreVocabulary
from catalog_seeder.normalize.engine import (
    DEFAULT_SEASONS_PER_SHOW,
    NormalizationEngine,
    select_seasons,
)
from catalog_seeder.normalize.output import OutputTables

logger = logging.getLogger(__name__)

# TMDB list endpoints return 20 results per page.
PAGE_SIZE = 20


class CatalogSource(Protocol):
    """
    The fetch surface the worker needs (TmdbClient satisfies it).
    """

    @property
    def pending(self) -> int: ...

    def fetch_genres(self) -> GenreVocabulary: ...

    def fetch_popular_movies(self, page: int) -> FetchResult: ...

    def fetch_popular_shows(self, page: int) -> FetchResult: ...

    def fetch_movie_details(self, movie_id: int) -> FetchResult: ...

    def fetch_show_details(self, show_id: int) -> FetchResult: ...

    def fetch_season_details(self, show_id: int, season_number: int) -> FetchResult: ...


@dataclass(frozen=True)
class SeedOptions:
    """
    Run options for the seed worker.

    max_movies / max_shows:
        Upper bound on titles processed. Pages requested = ceil(max / page_size).
    seasons_per_show:
        Numbered seasons fetched per show (season 0 / specials excluded).
    progress_every:
        Emit a progress log line every N processed titles.
    """

    max_movies: int = 500
    max_shows: int = 500
    seasons_per_show: int = DEFAULT_SEASONS_PER_SHOW
    page_size: int = PAGE_SIZE
    progress_every: int = 10


@dataclass
class SeedReport:
    """
    Outcome counters for one run.
    """

    movies_processed: int = 0
    movies_skipped: int = 0
    shows_processed: int = 0
    shows_skipped: int = 0
    seasons_skipped: int = 0
    genre_errors: tuple[str, ...] = ()
    duration_s: float = 0.0
    counts: dict[str, int] = field(default_factory=dict)


class CatalogSeedWorker:
    """
    One ingestion run against one catalog source.

    The worker is intentionally simple. It is not a scheduler; all
    concurrency lives behind the client's rate-limited queue.
    """

    def __init__(
        self,
        *,
        client: CatalogSource,
        engine: NormalizationEngine | None = None,
    ) -> None:
        """
        Args:
            client: Rate-limited TMDB client (or any CatalogSource).
            engine: Normalization engine owning the registry and output tables.
                A fresh one is created if omitted.
        """
        self._client = client
        self.engine = engine or NormalizationEngine()
        self.report = SeedReport()

    @property
    def output(self) -> OutputTables:
        return self.engine.output

    def run(self, options: SeedOptions | None = None) -> OutputTables:
        """
        Execute genres -> movies -> shows and return the accumulated tables.
        """
        opt = options or SeedOptions()
        self.engine.seasons_per_show = opt.seasons_per_show

        logger.info(
            "SEED_RUN_START max_movies=%d max_shows=%d seasons_per_show=%d",
            opt.max_movies,
            opt.max_shows,
            opt.seasons_per_show,
        )
        t0 = time.perf_counter()

        self.seed_genres()
        self.seed_movies(opt)
        self.seed_shows(opt)

        self.report.duration_s = time.perf_counter() - t0
        self.report.counts = self.output.counts()
        logger.info(
            "SEED_RUN_DONE movies=%d movies_skipped=%d shows=%d shows_skipped=%d seasons_skipped=%d duration_s=%.1f",
            self.report.movies_processed,
            self.report.movies_skipped,
            self.report.shows_processed,
            self.report.shows_skipped,
            self.report.seasons_skipped,
            self.report.duration_s,
        )
        self.output.log_summary()
        return self.output

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def seed_genres(self) -> int:
        vocabulary = self._client.fetch_genres()
        self.report.genre_errors = vocabulary.errors
        return self.engine.load_genres(vocabulary.movies, vocabulary.tv)

    def seed_movies(self, opt: SeedOptions) -> int:
        stubs = self._list_stubs(self._client.fetch_popular_movies, opt.max_movies, opt, "movies")
        total = _unique_titles(stubs)
        logger.info("SEED_MOVIES_DETAIL_START titles=%d", total)

        for stub in stubs:
            movie_id = stub.get("id")
            if movie_id is None or self.engine.has_media("movie", movie_id):
                continue

            result = self._client.fetch_movie_details(movie_id)
            if not result.ok:
                self.report.movies_skipped += 1
                logger.warning("SEED_MOVIE_SKIPPED tmdb_id=%s reason=%s", movie_id, result.error)
                continue

            self.engine.transform_movie(stub, result.payload)
            self.report.movies_processed += 1
            self._progress("movies", self.report.movies_processed, total, opt)

        logger.info(
            "SEED_MOVIES_DONE processed=%d skipped=%d",
            self.report.movies_processed,
            self.report.movies_skipped,
        )
        return self.report.movies_processed

    def seed_shows(self, opt: SeedOptions) -> int:
        stubs = self._list_stubs(self._client.fetch_popular_shows, opt.max_shows, opt, "tv_shows")
        total = _unique_titles(stubs)
        logger.info("SEED_SHOWS_DETAIL_START titles=%d", total)

        for stub in stubs:
            show_id = stub.get("id")
            if show_id is None or self.engine.has_media("tv", show_id):
                continue

            result = self._client.fetch_show_details(show_id)
            if not result.ok:
                self.report.shows_skipped += 1
                logger.warning("SEED_SHOW_SKIPPED tmdb_id=%s reason=%s", show_id, result.error)
                continue

            seasons = self._fetch_seasons(show_id, result.payload, opt.seasons_per_show)
            self.engine.transform_show(stub, result.payload, seasons)
            self.report.shows_processed += 1
            self._progress("tv_shows", self.report.shows_processed, total, opt)

        logger.info(
            "SEED_SHOWS_DONE processed=%d skipped=%d seasons_skipped=%d",
            self.report.shows_processed,
            self.report.shows_skipped,
            self.report.seasons_skipped,
        )
        return self.report.shows_processed

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _list_stubs(self, fetch_page, limit: int, opt: SeedOptions, label: str) -> list[dict[str, Any]]:
        if limit <= 0:
            return []
        max_pages = math.ceil(limit / opt.page_size)
        stubs = walk_pages(fetch_page, max_pages, label=label)
        return stubs[:limit]

    def _fetch_seasons(self, show_id: int, details: dict[str, Any], limit: int) -> list[dict[str, Any]]:
        seasons = []
        for summary in select_seasons(details, limit):
            number = summary["season_number"]
            result = self._client.fetch_season_details(show_id, number)
            if not result.ok:
                self.report.seasons_skipped += 1
                logger.warning(
                    "SEED_SEASON_SKIPPED tmdb_id=%s season=%s reason=%s",
                    show_id,
                    number,
                    result.error,
                )
                continue
            seasons.append(result.payload)
        return seasons

    def _progress(self, label: str, done: int, total: int, opt: SeedOptions) -> None:
        if opt.progress_every > 0 and done % opt.progress_every == 0:
            logger.info(
                "SEED_PROGRESS label=%s processed=%d/%d pending_requests=%d",
                label,
                done,
                total,
                self._client.pending,
            )


def _unique_titles(stubs: list[dict[str, Any]]) -> int:
    """Distinct ids in a listing (popular lists can repeat a title across pages)."""
    return len({stub["id"] for stub in stubs if stub.get("id") is not None})
