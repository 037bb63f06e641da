# Deterministic row builders: one raw TMDB fragment -> one normalized row.
# Keyed entities go through the IdentityRegistry and return (row, id), where
# row is None when the key was already registered (first write wins).
# No HTTP. No output bookkeeping. Pure mapping plus id assignment.

from __future__ import annotations

from datetime import date
from typing import Any

from catalog_seeder.normalize.registry import IdentityRegistry
from catalog_seeder.persistence.models import (
    Actor,
    CompanyRole,
    Collection,
    Company,
    CrewMember,
    Episode,
    EpisodeCasting,
    EpisodeCrewAssignment,
    Genre,
    MediaCompany,
    MediaGenre,
    MediaItem,
    MediaType,
    Movie,
    Person,
    Season,
    TitleCasting,
    TitleCrewAssignment,
    TVShow,
)

Raw = dict[str, Any]


# -----------------------------------------------------------------------------
# Field coercion (default substitution lives here)
# -----------------------------------------------------------------------------


def _pick(key: str, *sources: Raw) -> Any:
    """First value for `key` that is neither None nor an empty string."""
    for source in sources:
        value = source.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _int(value: Any, default: int | None = 0) -> int | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def _date(value: Any) -> date | None:
    """
    TMDB sends "YYYY-MM-DD", "" or null. Anything unparseable becomes None.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _country(raw: Raw) -> str:
    # Companies carry origin_country as a string, networks sometimes as a list.
    value = raw.get("origin_country")
    if isinstance(value, list):
        return _text(value[0]) if value else ""
    return _text(value)


def cast_order(raw: Raw, index: int) -> int:
    """Source-provided order, falling back to the position in the credits list."""
    order = raw.get("order")
    return order if isinstance(order, int) and not isinstance(order, bool) else index


# -----------------------------------------------------------------------------
# Keyed entities
# -----------------------------------------------------------------------------


def build_genre(raw: Raw, registry: IdentityRegistry) -> tuple[Genre | None, int]:
    genre_id, created = registry.genres.resolve(raw["id"])
    if not created:
        return None, genre_id
    return Genre(genre_id=genre_id, tmdb_id=raw["id"], name=_text(raw.get("name"))), genre_id


def build_collection(raw: Raw, registry: IdentityRegistry) -> tuple[Collection | None, int]:
    """
    Maps `belongs_to_collection` of a movie detail payload.
    """
    collection_id, created = registry.collections.resolve(raw["id"])
    if not created:
        return None, collection_id

    return (
        Collection(
            collection_id=collection_id,
            tmdb_id=raw["id"],
            name=_text(raw.get("name")),
            overview=_text(raw.get("overview")),
            poster_path=raw.get("poster_path") or None,
            backdrop_path=raw.get("backdrop_path") or None,
        ),
        collection_id,
    )


def build_company(raw: Raw, registry: IdentityRegistry) -> tuple[Company | None, int]:
    """
    Maps an entry of `production_companies` or `networks`.
    """
    company_id, created = registry.companies.resolve(raw["id"])
    if not created:
        return None, company_id

    return (
        Company(
            company_id=company_id,
            tmdb_id=raw["id"],
            name=_text(raw.get("name")),
            origin_country=_country(raw),
            logo_path=raw.get("logo_path") or None,
        ),
        company_id,
    )


def build_person(raw: Raw, registry: IdentityRegistry) -> tuple[Person | None, int]:
    """
    Maps a cast or crew credit entry.

    Credit entries only carry name, gender and profile image; the biography
    fields are filled when a full person payload is passed instead.
    """
    person_id, created = registry.persons.resolve(raw["id"])
    if not created:
        return None, person_id

    return (
        Person(
            person_id=person_id,
            tmdb_id=raw["id"],
            name=_text(raw.get("name")),
            gender=_int(raw.get("gender"), default=None),
            biography=_text(raw.get("biography")),
            birth_date=_date(raw.get("birthday")),
            death_date=_date(raw.get("deathday")),
            place_of_birth=_text(raw.get("place_of_birth")),
            profile_path=raw.get("profile_path") or None,
        ),
        person_id,
    )


def build_media_item(
    stub: Raw, details: Raw, media_type: MediaType, registry: IdentityRegistry
) -> tuple[MediaItem | None, int]:
    """
    Maps the shared MediaItem part of a movie or show.

    Detail fields win; the list stub fills gaps. Movies use title/original_title,
    shows use name/original_name.
    """
    tmdb_id = _pick("id", details, stub)
    media_id, created = registry.media.resolve((media_type, tmdb_id))
    if not created:
        return None, media_id

    title_key, original_key = ("title", "original_title") if media_type == "movie" else ("name", "original_name")
    title = _text(_pick(title_key, details, stub))

    return (
        MediaItem(
            media_id=media_id,
            tmdb_id=tmdb_id,
            media_type=media_type,
            title=title,
            original_title=_text(_pick(original_key, details, stub)) or title,
            overview=_text(_pick("overview", details, stub)),
            original_language=_text(_pick("original_language", details, stub)),
            status=_text(details.get("status")),
            popularity=_float(_pick("popularity", details, stub)),
            vote_average=_float(_pick("vote_average", details, stub)),
            vote_count=_int(_pick("vote_count", details, stub)),
            poster_path=_pick("poster_path", details, stub),
            backdrop_path=_pick("backdrop_path", details, stub),
            homepage_url=details.get("homepage") or None,
        ),
        media_id,
    )


def build_season(
    raw: Raw, show_tmdb_id: int, tv_media_id: int, registry: IdentityRegistry
) -> tuple[Season | None, int]:
    number = raw["season_number"]
    season_id, created = registry.seasons.resolve((show_tmdb_id, number))
    if not created:
        return None, season_id

    episodes = raw.get("episodes")
    episode_count = len(episodes) if episodes is not None else _int(raw.get("episode_count"))

    return (
        Season(
            season_id=season_id,
            tv_media_id=tv_media_id,
            season_number=number,
            name=_text(raw.get("name")) or f"Season {number}",
            air_date=_date(raw.get("air_date")),
            episode_count=episode_count,
            poster_path=raw.get("poster_path") or None,
        ),
        season_id,
    )


def build_episode(
    raw: Raw,
    show_tmdb_id: int,
    season_number: int,
    season_id: int,
    registry: IdentityRegistry,
) -> tuple[Episode | None, int]:
    number = raw["episode_number"]
    episode_id, created = registry.episodes.resolve((show_tmdb_id, season_number, number))
    if not created:
        return None, episode_id

    return (
        Episode(
            episode_id=episode_id,
            season_id=season_id,
            episode_number=number,
            name=_text(raw.get("name")) or f"Episode {number}",
            air_date=_date(raw.get("air_date")),
            runtime_minutes=_int(raw.get("runtime"), default=None),
            overview=_text(raw.get("overview")),
            still_path=raw.get("still_path") or None,
        ),
        episode_id,
    )


# -----------------------------------------------------------------------------
# Subtype rows
# -----------------------------------------------------------------------------


def build_movie(media_id: int, stub: Raw, details: Raw, collection_id: int | None) -> Movie:
    return Movie(
        media_id=media_id,
        release_date=_date(_pick("release_date", details, stub)),
        budget=_int(details.get("budget")),
        revenue=_int(details.get("revenue")),
        adult_flag=bool(_pick("adult", details, stub) or False),
        runtime_minutes=_int(details.get("runtime"), default=None),
        collection_id=collection_id,
    )


def build_tv_show(media_id: int, stub: Raw, details: Raw) -> TVShow:
    return TVShow(
        media_id=media_id,
        first_air_date=_date(_pick("first_air_date", details, stub)),
        last_air_date=_date(details.get("last_air_date")),
        in_production=bool(details.get("in_production") or False),
        number_of_seasons=_int(details.get("number_of_seasons")),
        number_of_episodes=_int(details.get("number_of_episodes")),
        show_type=_text(details.get("type")),
    )


def build_actor(person_id: int, registry: IdentityRegistry) -> Actor | None:
    """Actor row on a person's first cast appearance, None afterwards."""
    if person_id in registry.actors:
        return None
    registry.actors.add(person_id)
    return Actor(person_id=person_id)


def build_crew_member(raw: Raw, person_id: int, registry: IdentityRegistry) -> CrewMember | None:
    """CrewMember row on a person's first crew appearance, None afterwards."""
    if person_id in registry.crew_members:
        return None
    registry.crew_members.add(person_id)
    return CrewMember(person_id=person_id, primary_department=_text(raw.get("department")))


# -----------------------------------------------------------------------------
# Casting / assignment rows
# -----------------------------------------------------------------------------


def build_title_casting(
    raw: Raw, index: int, media_id: int, person_id: int, registry: IdentityRegistry
) -> TitleCasting:
    return TitleCasting(
        casting_id=registry.title_castings.next(),
        media_id=media_id,
        person_id=person_id,
        character_name=_text(raw.get("character")),
        cast_order=cast_order(raw, index),
    )


def build_episode_casting(
    raw: Raw, index: int, episode_id: int, person_id: int, registry: IdentityRegistry
) -> EpisodeCasting:
    return EpisodeCasting(
        casting_id=registry.episode_castings.next(),
        episode_id=episode_id,
        person_id=person_id,
        character_name=_text(raw.get("character")),
        cast_order=cast_order(raw, index),
    )


def build_title_crew_assignment(
    raw: Raw, media_id: int, person_id: int, registry: IdentityRegistry
) -> TitleCrewAssignment:
    return TitleCrewAssignment(
        crew_assignment_id=registry.title_crew_assignments.next(),
        media_id=media_id,
        person_id=person_id,
        department=_text(raw.get("department")),
        job_title=_text(raw.get("job")),
    )


def build_episode_crew_assignment(
    raw: Raw, episode_id: int, person_id: int, registry: IdentityRegistry
) -> EpisodeCrewAssignment:
    return EpisodeCrewAssignment(
        crew_assignment_id=registry.episode_crew_assignments.next(),
        episode_id=episode_id,
        person_id=person_id,
        department=_text(raw.get("department")),
        job_title=_text(raw.get("job")),
    )


def build_media_genre(media_id: int, genre_id: int) -> MediaGenre:
    return MediaGenre(media_id=media_id, genre_id=genre_id)


def build_media_company(media_id: int, company_id: int, role: CompanyRole) -> MediaCompany:
    return MediaCompany(media_id=media_id, company_id=company_id, role=role)
