from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from catalog_seeder.client.client import TmdbClient
from catalog_seeder.client.rate_limiter import RateLimitedQueue
from catalog_seeder.client.results import FetchResult

BASE = "https://api.test.com/3"


# --- FIXTURES ---
# Logic: Avoids repeating setup code in every test.
@pytest.fixture
def client():
    with TmdbClient(api_key="test_key", base_url=BASE, requests_per_second=100) as c:
        yield c


@pytest.fixture
def retrying_client():
    with TmdbClient(
        api_key="test_key", base_url=BASE, requests_per_second=100, max_attempts=3
    ) as c:
        yield c


def _query(call):
    return parse_qs(urlparse(call.request.url).query)


# --- 1. POSITIVE TESTING (The Contract) ---
@responses.activate
def test_fetch_data_success(client):
    # Logic: Prove the raw transport parses JSON and authenticates with the api_key query param.
    mock_json = {"page": 1, "results": [{"id": 1}], "total_pages": 3}
    responses.add(responses.GET, f"{BASE}/movie/popular", json=mock_json, status=200)

    result = client.fetch_data("/movie/popular", {"page": 1})

    assert result == mock_json
    query = _query(responses.calls[0])
    assert query["api_key"] == ["test_key"]
    assert query["page"] == ["1"]


@responses.activate
def test_fetch_popular_movies_returns_fetch_result(client):
    # Logic: Public operations resolve to a successful FetchResult carrying the payload.
    responses.add(
        responses.GET,
        f"{BASE}/movie/popular",
        json={"page": 2, "results": [{"id": 7}], "total_pages": 5},
    )

    result = client.fetch_popular_movies(2)

    assert result.ok
    assert result.payload["results"] == [{"id": 7}]
    assert _query(responses.calls[0])["page"] == ["2"]


@responses.activate
def test_detail_fetches_append_credits(client):
    # Logic: Movie, show and season details all ask TMDB to append credits.
    responses.add(responses.GET, f"{BASE}/movie/11", json={"id": 11})
    responses.add(responses.GET, f"{BASE}/tv/22", json={"id": 22})
    responses.add(responses.GET, f"{BASE}/tv/22/season/1", json={"season_number": 1})

    assert client.fetch_movie_details(11).ok
    assert client.fetch_show_details(22).ok
    assert client.fetch_season_details(22, 1).ok

    assert len(responses.calls) == 3
    for call in responses.calls:
        assert _query(call)["append_to_response"] == ["credits"]


@responses.activate
def test_language_param_is_sent_when_configured():
    # Logic: A configured language travels with every request.
    responses.add(responses.GET, f"{BASE}/tv/popular", json={"results": []})

    with TmdbClient(api_key="k", base_url=BASE, language="de-DE") as c:
        c.fetch_popular_shows(1)

    assert _query(responses.calls[0])["language"] == ["de-DE"]


@responses.activate
def test_fetch_genres_merges_both_vocabularies(client):
    # Logic: Movie and TV genre lists are both requested and returned side by side.
    responses.add(
        responses.GET,
        f"{BASE}/genre/movie/list",
        json={"genres": [{"id": 28, "name": "Action"}, {"id": 18, "name": "Drama"}]},
    )
    responses.add(
        responses.GET,
        f"{BASE}/genre/tv/list",
        json={"genres": [{"id": 18, "name": "Drama"}, {"id": 10765, "name": "Sci-Fi & Fantasy"}]},
    )

    vocabulary = client.fetch_genres()

    assert [g["id"] for g in vocabulary.movies] == [28, 18]
    assert [g["id"] for g in vocabulary.tv] == [18, 10765]
    assert vocabulary.errors == ()
    assert client.pending == 0


# --- 2. NEGATIVE TESTING (The Fragility) ---
@responses.activate
def test_fetch_data_unauthorized(retrying_client):
    # Logic: Prove that 401 errors (which shouldn't be retried) fail immediately.
    responses.add(responses.GET, f"{BASE}/movie/popular", status=401)

    with pytest.raises(requests.exceptions.HTTPError):
        retrying_client.fetch_data("/movie/popular", {})

    # Assert it only tried once (no retry logic triggered for 401)
    assert len(responses.calls) == 1


@responses.activate
def test_not_found_resolves_to_failure_without_raising(client):
    # Logic: A 404 on a detail fetch is reported, never raised.
    responses.add(responses.GET, f"{BASE}/movie/999", status=404)

    result = client.fetch_movie_details(999)

    assert isinstance(result, FetchResult)
    assert not result.ok
    assert result.payload is None
    assert "HTTPError" in result.error


@responses.activate
def test_connection_error_resolves_to_failure(client):
    # Logic: Transport errors are folded into the result like HTTP errors.
    responses.add(
        responses.GET,
        f"{BASE}/tv/5/season/2",
        body=requests.exceptions.ConnectionError("connection reset"),
    )

    result = client.fetch_season_details(5, 2)

    assert not result.ok
    assert "ConnectionError" in result.error


@responses.activate
def test_non_object_payload_is_a_failure(client):
    # Logic: TMDB always answers with a JSON object; anything else is unusable.
    responses.add(responses.GET, f"{BASE}/movie/popular", json=[1, 2, 3])

    result = client.fetch_popular_movies(1)

    assert not result.ok
    assert "list" in result.error


@responses.activate
def test_fetch_genres_keeps_partial_vocabulary(client):
    # Logic: One failing vocabulary leaves the other usable and records the reason.
    responses.add(responses.GET, f"{BASE}/genre/movie/list", json={"genres": [{"id": 28, "name": "Action"}]})
    responses.add(responses.GET, f"{BASE}/genre/tv/list", status=500)

    vocabulary = client.fetch_genres()

    assert vocabulary.movies == [{"id": 28, "name": "Action"}]
    assert vocabulary.tv == []
    assert len(vocabulary.errors) == 1


# --- 3. CONSTRAINTS (The Limits) ---
@responses.activate
def test_fetch_data_empty_response(client):
    # Logic: Prove the client handles valid but empty payloads without crashing.
    responses.add(responses.GET, f"{BASE}/movie/1", json={}, status=200)

    result = client.fetch_movie_details(1)

    assert result.ok
    assert result.payload == {}


@responses.activate
def test_default_policy_does_not_retry(client):
    # Logic: With the default single attempt a 429 is reported straight away.
    responses.add(responses.GET, f"{BASE}/movie/popular", status=429)

    result = client.fetch_popular_movies(1)

    assert not result.ok
    assert len(responses.calls) == 1


# --- 4. THE BRANCHES (The Implicit Loop) ---
@responses.activate
def test_fetch_data_retry_until_success(retrying_client):
    # Logic: Force the execution path through the decorator's retry loop.
    url = f"{BASE}/movie/popular"

    # Branch Path: Failure -> Failure -> Success
    responses.add(responses.GET, url, status=429)
    responses.add(responses.GET, url, status=429)
    responses.add(responses.GET, url, json={"results": []}, status=200)

    result = retrying_client.fetch_popular_movies(1)

    assert result.ok
    assert result.payload == {"results": []}
    assert len(responses.calls) == 3


@responses.activate
def test_fetch_data_max_retries_exhausted(retrying_client):
    # Logic: Prove the "Stop" branch of the decorator works, and that the
    # exhausted retry still ends as a failure result rather than an exception.
    url = f"{BASE}/tv/popular"

    # Simulate infinite failures
    responses.add(responses.GET, url, status=500)

    result = retrying_client.fetch_popular_shows(1)

    assert not result.ok
    assert len(responses.calls) == 3


@responses.activate
def test_retries_take_their_own_rate_limit_slot():
    # Logic: With one slot per long window, a retry must wait for the next
    # window instead of reusing the slot of the first attempt.
    clock = {"now": 0.0}

    def advance(seconds):
        clock["now"] += seconds

    sent_at = []

    def respond(request):
        sent_at.append(clock["now"])
        if len(sent_at) == 1:
            return (503, {}, "")
        return (200, {}, '{"id": 1}')

    responses.add_callback(responses.GET, f"{BASE}/movie/1", callback=respond)

    queue = RateLimitedQueue(
        max_per_interval=1, interval=1000.0, clock=lambda: clock["now"], sleep=advance
    )
    with queue, TmdbClient(api_key="k", base_url=BASE, queue=queue, max_attempts=2) as c:
        result = c.fetch_movie_details(1)

    assert result.ok
    # One HTTP call per admitted window
    assert sent_at == [0.0, 1000.0]
