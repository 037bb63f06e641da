from datetime import date

import pytest
from pydantic import ValidationError

from catalog_seeder.normalize import builders
from catalog_seeder.normalize.registry import IdentityRegistry
from catalog_seeder.persistence.models import Genre


# --- FIXTURES ---
@pytest.fixture
def registry():
    return IdentityRegistry()


# --- 1. POSITIVE TESTING (The Contract) ---
def test_media_item_prefers_details_over_stub(registry):
    stub = {"id": 5, "title": "Stub Title", "overview": "stub overview", "popularity": 3.5}
    details = {"id": 5, "title": "Detail Title", "overview": "", "status": "Released"}

    row, media_id = builders.build_media_item(stub, details, "movie", registry)

    assert media_id == 1
    assert row.title == "Detail Title"
    # Empty detail text falls back to the stub
    assert row.overview == "stub overview"
    assert row.popularity == 3.5
    assert row.original_title == "Detail Title"


def test_show_uses_name_fields(registry):
    row, _ = builders.build_media_item(
        {"id": 9}, {"id": 9, "name": "Dark", "original_name": "Dark (DE)"}, "tv", registry
    )

    assert row.media_type == "tv"
    assert row.title == "Dark"
    assert row.original_title == "Dark (DE)"


def test_company_country_accepts_list_or_string(registry):
    company, _ = builders.build_company({"id": 1, "name": "A24", "origin_country": "US"}, registry)
    network, _ = builders.build_company({"id": 2, "name": "BBC", "origin_country": ["GB"]}, registry)

    assert company.origin_country == "US"
    assert network.origin_country == "GB"


# --- 2. NEGATIVE TESTING (The Fragility) ---
def test_missing_fields_get_explicit_defaults(registry):
    # Logic: A sparse payload still yields a schema-complete row.
    row, _ = builders.build_media_item({"id": 3}, {"id": 3}, "movie", registry)

    assert row.overview == ""
    assert row.title == ""
    assert row.vote_count == 0
    assert row.popularity == 0.0
    assert row.poster_path is None
    assert row.homepage_url is None


@pytest.mark.parametrize("raw", ["", None, "2021-13-45", "not a date", 20210101])
def test_unparseable_dates_become_none(registry, raw):
    movie = builders.build_movie(1, {}, {"release_date": raw}, None)

    assert movie.release_date is None


def test_valid_date_is_parsed(registry):
    movie = builders.build_movie(1, {}, {"release_date": "2010-07-16", "runtime": 148}, None)

    assert movie.release_date == date(2010, 7, 16)
    assert movie.runtime_minutes == 148
    assert movie.budget == 0


def test_rows_reject_unknown_fields():
    with pytest.raises(ValidationError):
        Genre(genre_id=1, tmdb_id=28, name="Action", colour="red")


# --- 3. CONSTRAINTS (The Limits) ---
def test_keyed_builders_return_none_on_repeat(registry):
    # Logic: First write wins; a repeat yields no row but the same id.
    first, first_id = builders.build_person({"id": 77, "name": "Ana"}, registry)
    second, second_id = builders.build_person({"id": 77, "name": "Ana B."}, registry)

    assert first.name == "Ana"
    assert second is None
    assert first_id == second_id


def test_subtype_rows_only_once_per_person(registry):
    assert builders.build_actor(1, registry) is not None
    assert builders.build_actor(1, registry) is None

    member = builders.build_crew_member({"department": "Writing"}, 1, registry)
    assert member.primary_department == "Writing"
    assert builders.build_crew_member({"department": "Directing"}, 1, registry) is None


# --- 4. THE BRANCHES (Fallbacks) ---
@pytest.mark.parametrize(
    "raw, index, expected",
    [({"order": 4}, 0, 4), ({}, 3, 3), ({"order": None}, 6, 6), ({"order": "1"}, 2, 2)],
)
def test_cast_order_falls_back_to_position(raw, index, expected):
    assert builders.cast_order(raw, index) == expected


def test_season_and_episode_names_fall_back(registry):
    season, season_id = builders.build_season({"season_number": 2, "name": ""}, 100, 1, registry)
    episode, _ = builders.build_episode({"episode_number": 5}, 100, 2, season_id, registry)

    assert season.name == "Season 2"
    assert season.episode_count == 0
    assert episode.name == "Episode 5"
    assert episode.runtime_minutes is None


def test_season_episode_count_prefers_episode_list(registry):
    season, _ = builders.build_season(
        {"season_number": 1, "episode_count": 10, "episodes": [{}, {}, {}]}, 100, 1, registry
    )

    assert season.episode_count == 3


def test_person_gender_none_when_absent(registry):
    person, _ = builders.build_person({"id": 1, "name": "X"}, registry)
    other, _ = builders.build_person({"id": 2, "name": "Y", "gender": 0}, registry)

    assert person.gender is None
    assert other.gender == 0
