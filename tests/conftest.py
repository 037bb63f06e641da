import pytest

from catalog_seeder.normalize.engine import NormalizationEngine


# --- PAYLOAD BUILDERS ---
# Logic: Minimal TMDB-shaped payloads. Only the fields a test cares about are set.


def cast_entry(person_id, name="Someone", character="Self", order=None, **extra):
    entry = {"id": person_id, "name": name, "character": character, "gender": 2}
    if order is not None:
        entry["order"] = order
    entry.update(extra)
    return entry


def crew_entry(person_id, name="Crew", department="Directing", job="Director"):
    return {"id": person_id, "name": name, "department": department, "job": job}


def movie_stub(movie_id, title=None, genre_ids=None):
    return {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "genre_ids": genre_ids or [],
        "popularity": 10.5,
    }


def movie_details(movie_id, *, genres=None, cast=None, crew=None, companies=None, collection=None, **extra):
    details = {
        "id": movie_id,
        "title": f"Movie {movie_id}",
        "original_title": f"Original {movie_id}",
        "overview": "An overview.",
        "release_date": "2021-05-01",
        "runtime": 101,
        "budget": 1000,
        "revenue": 5000,
        "status": "Released",
        "genres": genres or [],
        "production_companies": companies or [],
        "belongs_to_collection": collection,
        "credits": {"cast": cast or [], "crew": crew or []},
    }
    details.update(extra)
    return details


def show_stub(show_id, genre_ids=None):
    return {"id": show_id, "name": f"Show {show_id}", "genre_ids": genre_ids or []}


def show_details(show_id, *, season_numbers=(1, 2, 3), genres=None, cast=None, crew=None,
                 companies=None, networks=None, **extra):
    details = {
        "id": show_id,
        "name": f"Show {show_id}",
        "original_name": f"Original Show {show_id}",
        "first_air_date": "2019-09-01",
        "in_production": True,
        "number_of_seasons": len(season_numbers),
        "number_of_episodes": 10 * len(season_numbers),
        "type": "Scripted",
        "genres": genres or [],
        "production_companies": companies or [],
        "networks": networks or [],
        "seasons": [{"season_number": n, "name": f"Season {n}"} for n in season_numbers],
        "credits": {"cast": cast or [], "crew": crew or []},
    }
    details.update(extra)
    return details


def episode_payload(number, *, guest_stars=None, crew=None, credits=None):
    episode = {
        "episode_number": number,
        "name": f"Episode {number}",
        "air_date": "2019-09-0%d" % min(number, 9),
        "runtime": 45,
    }
    if guest_stars is not None:
        episode["guest_stars"] = guest_stars
    if crew is not None:
        episode["crew"] = crew
    if credits is not None:
        episode["credits"] = credits
    return episode


def season_payload(number, episodes=None):
    return {
        "season_number": number,
        "name": f"Season {number}",
        "air_date": "2019-09-01",
        "episodes": episodes if episodes is not None else [episode_payload(1), episode_payload(2)],
    }


# --- FIXTURES ---


@pytest.fixture
def engine():
    return NormalizationEngine()


@pytest.fixture
def payloads():
    """Exposes the builders above to test modules as one namespace."""

    class _Payloads:
        cast = staticmethod(cast_entry)
        crew = staticmethod(crew_entry)
        movie_stub = staticmethod(movie_stub)
        movie_details = staticmethod(movie_details)
        show_stub = staticmethod(show_stub)
        show_details = staticmethod(show_details)
        episode = staticmethod(episode_payload)
        season = staticmethod(season_payload)

    return _Payloads
