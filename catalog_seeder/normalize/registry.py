"""
Per-run identity registry.

Maps upstream keys (TMDB ids, or composite keys for seasons and episodes)
to surrogate ids. Ids are assigned 1, 2, 3, ... per entity type in order of
first encounter and are never reassigned within a run.

The registry is plain instance state owned by one NormalizationEngine.
It is not thread-safe; the pipeline only touches it from the loop thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)

MediaKey = tuple[str, int]
SeasonKey = tuple[int, int]
EpisodeKey = tuple[int, int, int]


class SurrogateSequence:
    """Monotonic id source for rows that have no dedup key (castings, assignments)."""

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def last(self) -> int:
        return self._next - 1


class IdentityMap(Generic[K]):
    """
    Key -> surrogate id for one entity type.
    """

    def __init__(self) -> None:
        self._ids: dict[K, int] = {}
        self._sequence = SurrogateSequence()

    def __contains__(self, key: object) -> bool:
        return key in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def get(self, key: K) -> int | None:
        return self._ids.get(key)

    def resolve(self, key: K) -> tuple[int, bool]:
        """
        Return (surrogate_id, created).

        created is True only on the first encounter of `key`; later calls
        return the same id with created=False.
        """
        existing = self._ids.get(key)
        if existing is not None:
            return existing, False

        surrogate = self._sequence.next()
        self._ids[key] = surrogate
        return surrogate, True


@dataclass
class IdentityRegistry:
    genres: IdentityMap[int] = field(default_factory=IdentityMap)
    collections: IdentityMap[int] = field(default_factory=IdentityMap)
    companies: IdentityMap[int] = field(default_factory=IdentityMap)
    persons: IdentityMap[int] = field(default_factory=IdentityMap)
    media: IdentityMap[MediaKey] = field(default_factory=IdentityMap)
    seasons: IdentityMap[SeasonKey] = field(default_factory=IdentityMap)
    episodes: IdentityMap[EpisodeKey] = field(default_factory=IdentityMap)

    # Person ids that already have their Actor / CrewMember subtype row
    actors: set[int] = field(default_factory=set)
    crew_members: set[int] = field(default_factory=set)

    title_castings: SurrogateSequence = field(default_factory=SurrogateSequence)
    episode_castings: SurrogateSequence = field(default_factory=SurrogateSequence)
    title_crew_assignments: SurrogateSequence = field(default_factory=SurrogateSequence)
    episode_crew_assignments: SurrogateSequence = field(default_factory=SurrogateSequence)
