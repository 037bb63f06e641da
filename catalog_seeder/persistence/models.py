"""
Normalized catalog row schemas.

One pydantic model per output table. These are the rows the normalization
engine emits and the rows written to / read back from the JSON table files.

Design notes:
- Surrogate ids (`*_id`) are assigned per run by the IdentityRegistry.
- `tmdb_id` carries the upstream identifier where the entity has one.
- Every optional source field has an explicit default, so a row is always
  schema-complete even when the source omitted the field.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict


MediaType = Literal["movie", "tv"]
CompanyRole = Literal["production", "network"]


class CatalogRow(BaseModel):
    """
    Base for every normalized row: strict field set, immutable once built.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


# -----------------------------------------------------------------------------
# Independent entities
# -----------------------------------------------------------------------------


class Genre(CatalogRow):
    """
    Dedup key: tmdb_id (shared across movie and TV vocabularies)
    """

    genre_id: int
    tmdb_id: int
    name: str = ""


class Collection(CatalogRow):
    """
    Dedup key: tmdb_id
    """

    collection_id: int
    tmdb_id: int
    name: str = ""
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None


class Company(CatalogRow):
    """
    Production companies and networks share this table.
    The role lives on MediaCompany.
    """

    company_id: int
    tmdb_id: int
    name: str = ""
    origin_country: str = ""
    logo_path: str | None = None


class Person(CatalogRow):
    """
    Dedup key: tmdb_id. One row per person regardless of roles.

    gender follows TMDB's encoding (0 unknown, 1 female, 2 male, 3 non-binary);
    None when the source did not say.
    """

    person_id: int
    tmdb_id: int
    name: str = ""
    gender: int | None = None
    biography: str = ""
    birth_date: date | None = None
    death_date: date | None = None
    place_of_birth: str = ""
    profile_path: str | None = None


# -----------------------------------------------------------------------------
# Media and subtypes
# -----------------------------------------------------------------------------


class MediaItem(CatalogRow):
    """
    Dedup key: (media_type, tmdb_id). Movie and TV ids come from separate
    upstream id spaces.
    """

    media_id: int
    tmdb_id: int
    media_type: MediaType
    title: str = ""
    original_title: str = ""
    overview: str = ""
    original_language: str = ""
    status: str = ""
    popularity: float = 0.0
    vote_average: float = 0.0
    vote_count: int = 0
    poster_path: str | None = None
    backdrop_path: str | None = None
    homepage_url: str | None = None


class Movie(CatalogRow):
    media_id: int
    release_date: date | None = None
    budget: int = 0
    revenue: int = 0
    adult_flag: bool = False
    runtime_minutes: int | None = None
    collection_id: int | None = None


class TVShow(CatalogRow):
    media_id: int
    first_air_date: date | None = None
    last_air_date: date | None = None
    in_production: bool = False
    number_of_seasons: int = 0
    number_of_episodes: int = 0
    show_type: str = ""


class Season(CatalogRow):
    """
    Dedup key: (show tmdb_id, season_number)
    """

    season_id: int
    tv_media_id: int
    season_number: int
    name: str = ""
    air_date: date | None = None
    episode_count: int = 0
    poster_path: str | None = None


class Episode(CatalogRow):
    """
    Dedup key: (show tmdb_id, season_number, episode_number)
    """

    episode_id: int
    season_id: int
    episode_number: int
    name: str = ""
    air_date: date | None = None
    runtime_minutes: int | None = None
    overview: str = ""
    still_path: str | None = None


class Actor(CatalogRow):
    person_id: int
    acting_debut_year: int | None = None


class CrewMember(CatalogRow):
    """
    primary_department is the department of the person's first crew appearance.
    """

    person_id: int
    primary_department: str = ""


# -----------------------------------------------------------------------------
# Link / casting / assignment rows
# -----------------------------------------------------------------------------


class MediaGenre(CatalogRow):
    media_id: int
    genre_id: int


class MediaCompany(CatalogRow):
    media_id: int
    company_id: int
    role: CompanyRole


class TitleCasting(CatalogRow):
    casting_id: int
    media_id: int
    person_id: int
    character_name: str = ""
    cast_order: int = 0


class EpisodeCasting(CatalogRow):
    casting_id: int
    episode_id: int
    person_id: int
    character_name: str = ""
    cast_order: int = 0


class TitleCrewAssignment(CatalogRow):
    crew_assignment_id: int
    media_id: int
    person_id: int
    department: str = ""
    job_title: str = ""


class EpisodeCrewAssignment(CatalogRow):
    crew_assignment_id: int
    episode_id: int
    person_id: int
    department: str = ""
    job_title: str = ""


# Bulk-load order: independent entities, media, subtypes, then link rows.
TABLE_MODELS: dict[str, type[CatalogRow]] = {
    "Genre": Genre,
    "Collection": Collection,
    "Company": Company,
    "Person": Person,
    "MediaItem": MediaItem,
    "Movie": Movie,
    "TVShow": TVShow,
    "Season": Season,
    "Episode": Episode,
    "Actor": Actor,
    "CrewMember": CrewMember,
    "MediaGenre": MediaGenre,
    "MediaCompany": MediaCompany,
    "TitleCasting": TitleCasting,
    "EpisodeCasting": EpisodeCasting,
    "TitleCrewAssignment": TitleCrewAssignment,
    "EpisodeCrewAssignment": EpisodeCrewAssignment,
}

TABLE_NAMES: tuple[str, ...] = tuple(TABLE_MODELS)
