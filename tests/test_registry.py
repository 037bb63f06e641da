from catalog_seeder.normalize.registry import IdentityMap, IdentityRegistry, SurrogateSequence


# --- 1. POSITIVE TESTING (The Contract) ---
def test_ids_are_assigned_in_first_seen_order():
    ids = IdentityMap()

    assert ids.resolve(500) == (1, True)
    assert ids.resolve(42) == (2, True)
    assert ids.resolve(7) == (3, True)


def test_repeat_key_returns_existing_id():
    # Logic: A key seen before resolves to the same id and is flagged as not created.
    ids = IdentityMap()
    ids.resolve(28)
    ids.resolve(18)

    assert ids.resolve(28) == (1, False)
    assert len(ids) == 2
    assert 18 in ids
    assert ids.get(99) is None


def test_sequence_is_monotonic():
    seq = SurrogateSequence()

    assert [seq.next() for _ in range(4)] == [1, 2, 3, 4]
    assert seq.last == 4


# --- 3. CONSTRAINTS (The Limits) ---
def test_entity_types_have_independent_id_spaces():
    # Logic: Every entity type counts from 1 on its own.
    registry = IdentityRegistry()

    assert registry.persons.resolve(10)[0] == 1
    assert registry.genres.resolve(10)[0] == 1
    assert registry.companies.resolve(10)[0] == 1


def test_media_key_separates_movie_and_tv_id_spaces():
    # Logic: TMDB movie 1399 and TV 1399 are different titles.
    registry = IdentityRegistry()

    movie_id, _ = registry.media.resolve(("movie", 1399))
    show_id, created = registry.media.resolve(("tv", 1399))

    assert created
    assert movie_id != show_id


def test_season_keys_are_composite_per_show():
    # Logic: Season 1 of show A and season 1 of show B are distinct seasons.
    registry = IdentityRegistry()

    a, _ = registry.seasons.resolve((100, 1))
    b, created = registry.seasons.resolve((200, 1))

    assert created
    assert a != b
    assert registry.seasons.resolve((100, 1)) == (a, False)


def test_registries_do_not_share_state():
    first, second = IdentityRegistry(), IdentityRegistry()
    first.persons.resolve(1)
    first.persons.resolve(2)

    assert second.persons.resolve(2) == (1, True)
