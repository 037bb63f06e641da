"""
Normalization engine: flattens TMDB detail payloads into the seventeen
output tables.

Each call handles one movie or one show synchronously. Referenced entities
(person, genre, company, collection, season, episode) are always resolved
before the link row that points at them is appended, so no row ever holds a
forward reference.

State (IdentityRegistry + OutputTables) belongs to the engine instance.
Independent engines never share ids or rows.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from catalog_seeder.normalize import builders
from catalog_seeder.normalize.output import OutputTables
from catalog_seeder.normalize.registry import IdentityRegistry

logger = logging.getLogger(__name__)

TITLE_CAST_LIMIT = 20
TITLE_CREW_LIMIT = 30
EPISODE_CAST_LIMIT = 10
EPISODE_CREW_LIMIT = 15
DEFAULT_SEASONS_PER_SHOW = 3

Raw = dict[str, Any]


def select_seasons(details: Raw, limit: int = DEFAULT_SEASONS_PER_SHOW) -> list[Raw]:
    """
    The first `limit` numbered seasons of a show payload. Season 0 (specials)
    and entries without a number are excluded.
    """
    numbered = [
        s
        for s in (details.get("seasons") or [])
        if isinstance(s.get("season_number"), int) and s["season_number"] > 0
    ]
    return numbered[:limit]


def episode_credits(episode: Raw) -> tuple[list[Raw], list[Raw]]:
    """
    Per-episode (cast, crew).

    An appended `credits` object wins. Otherwise the season payload's inline
    `guest_stars` / `crew` lists are used. Absent and empty both give [].
    """
    credits = episode.get("credits") or {}
    cast = credits["cast"] if "cast" in credits else episode.get("guest_stars")
    crew = credits["crew"] if "crew" in credits else episode.get("crew")
    return cast or [], crew or []


class NormalizationEngine:
    """
    Flattens one detail payload at a time into OutputTables.

    Usage:
        engine = NormalizationEngine()
        engine.load_genres(vocab.movies, vocab.tv)
        engine.transform_movie(stub, details)
        engine.output.snapshot()
    """

    def __init__(
        self,
        registry: IdentityRegistry | None = None,
        output: OutputTables | None = None,
        *,
        seasons_per_show: int = DEFAULT_SEASONS_PER_SHOW,
    ) -> None:
        self.registry = registry or IdentityRegistry()
        self.output = output or OutputTables()
        self.seasons_per_show = seasons_per_show

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def load_genres(self, *vocabularies: Iterable[Raw]) -> int:
        """
        Register genre vocabularies (movie list, TV list, ...). Ids shared by
        several vocabularies produce a single Genre row.

        Returns:
            Number of new Genre rows.
        """
        created = 0
        for vocabulary in vocabularies:
            for raw in vocabulary:
                if raw.get("id") is None:
                    continue
                row, _ = builders.build_genre(raw, self.registry)
                if row is not None:
                    self.output.append(row)
                    created += 1

        logger.info("SEED_GENRES_LOADED new=%d total=%d", created, len(self.registry.genres))
        return created

    def has_media(self, media_type: str, tmdb_id: int) -> bool:
        return (media_type, tmdb_id) in self.registry.media

    def transform_movie(self, stub: Raw, details: Raw) -> int:
        """
        Flatten one movie.

        Returns:
            The movie's media_id. A movie seen earlier in the run is a no-op
            that returns its existing id.
        """
        row, media_id = builders.build_media_item(stub, details, "movie", self.registry)
        if row is None:
            logger.debug("SEED_MEDIA_DUPLICATE media_type=movie media_id=%d", media_id)
            return media_id
        self.output.append(row)

        collection_id = None
        collection = details.get("belongs_to_collection")
        if collection and collection.get("id") is not None:
            collection_row, collection_id = builders.build_collection(collection, self.registry)
            if collection_row is not None:
                self.output.append(collection_row)

        self.output.append(builders.build_movie(media_id, stub, details, collection_id))

        self._attach_genres(media_id, stub, details)
        self._attach_companies(media_id, details.get("production_companies"), "production")
        self._attach_title_credits(media_id, details.get("credits") or {})

        return media_id

    def transform_show(self, stub: Raw, details: Raw, seasons: Iterable[Raw] = ()) -> int:
        """
        Flatten one show plus the season payloads that were fetched for it.

        Only seasons numbered > 0 are used, at most `seasons_per_show` of them.
        A season whose fetch failed is simply absent from `seasons`.

        Returns:
            The show's media_id (existing id if the show was seen before).
        """
        row, media_id = builders.build_media_item(stub, details, "tv", self.registry)
        if row is None:
            logger.debug("SEED_MEDIA_DUPLICATE media_type=tv media_id=%d", media_id)
            return media_id
        self.output.append(row)

        self.output.append(builders.build_tv_show(media_id, stub, details))

        self._attach_genres(media_id, stub, details)
        self._attach_companies(media_id, details.get("production_companies"), "production")
        self._attach_companies(media_id, details.get("networks"), "network")
        self._attach_title_credits(media_id, details.get("credits") or {})

        show_tmdb_id = row.tmdb_id
        numbered = [
            s for s in seasons
            if s and isinstance(s.get("season_number"), int) and s["season_number"] > 0
        ]
        for season in numbered[: self.seasons_per_show]:
            self._attach_season(show_tmdb_id, media_id, season)

        return media_id

    # -------------------------------------------------------------------------
    # Flattening steps
    # -------------------------------------------------------------------------

    def _attach_genres(self, media_id: int, stub: Raw, details: Raw) -> None:
        linked: set[int] = set()
        detail_genres = details.get("genres") or []
        if detail_genres:
            for raw in detail_genres:
                if raw.get("id") is None:
                    continue
                row, genre_id = builders.build_genre(raw, self.registry)
                if row is not None:
                    self.output.append(row)
                self._link_genre(media_id, genre_id, linked)
            return

        # Stub ids carry no names: only link genres already in the vocabulary.
        for tmdb_genre_id in stub.get("genre_ids") or []:
            genre_id = self.registry.genres.get(tmdb_genre_id)
            if genre_id is None:
                logger.debug("SEED_GENRE_UNKNOWN tmdb_genre_id=%s media_id=%d", tmdb_genre_id, media_id)
                continue
            self._link_genre(media_id, genre_id, linked)

    def _link_genre(self, media_id: int, genre_id: int, linked: set[int]) -> None:
        if genre_id in linked:
            return
        linked.add(genre_id)
        self.output.append(builders.build_media_genre(media_id, genre_id))

    def _attach_companies(self, media_id: int, companies: list[Raw] | None, role: str) -> None:
        linked: set[int] = set()
        for raw in companies or []:
            if raw.get("id") is None:
                continue
            row, company_id = builders.build_company(raw, self.registry)
            if row is not None:
                self.output.append(row)
            if company_id in linked:
                continue
            linked.add(company_id)
            self.output.append(builders.build_media_company(media_id, company_id, role))

    def _resolve_person(self, raw: Raw) -> int | None:
        if raw.get("id") is None:
            logger.debug("SEED_CREDIT_WITHOUT_ID name=%s", raw.get("name"))
            return None
        row, person_id = builders.build_person(raw, self.registry)
        if row is not None:
            self.output.append(row)
        return person_id

    def _as_actor(self, person_id: int) -> None:
        actor = builders.build_actor(person_id, self.registry)
        if actor is not None:
            self.output.append(actor)

    def _as_crew_member(self, raw: Raw, person_id: int) -> None:
        member = builders.build_crew_member(raw, person_id, self.registry)
        if member is not None:
            self.output.append(member)

    def _attach_title_credits(self, media_id: int, credits: Raw) -> None:
        for index, raw in enumerate((credits.get("cast") or [])[:TITLE_CAST_LIMIT]):
            person_id = self._resolve_person(raw)
            if person_id is None:
                continue
            self._as_actor(person_id)
            self.output.append(
                builders.build_title_casting(raw, index, media_id, person_id, self.registry)
            )

        for raw in (credits.get("crew") or [])[:TITLE_CREW_LIMIT]:
            person_id = self._resolve_person(raw)
            if person_id is None:
                continue
            self._as_crew_member(raw, person_id)
            self.output.append(
                builders.build_title_crew_assignment(raw, media_id, person_id, self.registry)
            )

    def _attach_season(self, show_tmdb_id: int, tv_media_id: int, season: Raw) -> None:
        season_number = season["season_number"]
        row, season_id = builders.build_season(season, show_tmdb_id, tv_media_id, self.registry)
        if row is None:
            logger.debug(
                "SEED_SEASON_DUPLICATE show_tmdb_id=%s season=%s", show_tmdb_id, season_number
            )
            return
        self.output.append(row)

        for episode in season.get("episodes") or []:
            if not isinstance(episode.get("episode_number"), int):
                logger.debug(
                    "SEED_EPISODE_WITHOUT_NUMBER show_tmdb_id=%s season=%s",
                    show_tmdb_id,
                    season_number,
                )
                continue

            episode_row, episode_id = builders.build_episode(
                episode, show_tmdb_id, season_number, season_id, self.registry
            )
            if episode_row is None:
                continue
            self.output.append(episode_row)
            self._attach_episode_credits(episode_id, episode)

    def _attach_episode_credits(self, episode_id: int, episode: Raw) -> None:
        cast, crew = episode_credits(episode)

        for index, raw in enumerate(cast[:EPISODE_CAST_LIMIT]):
            person_id = self._resolve_person(raw)
            if person_id is None:
                continue
            self._as_actor(person_id)
            self.output.append(
                builders.build_episode_casting(raw, index, episode_id, person_id, self.registry)
            )

        for raw in crew[:EPISODE_CREW_LIMIT]:
            person_id = self._resolve_person(raw)
            if person_id is None:
                continue
            self._as_crew_member(raw, person_id)
            self.output.append(
                builders.build_episode_crew_assignment(raw, episode_id, person_id, self.registry)
            )
