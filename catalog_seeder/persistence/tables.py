"""
SQLAlchemy ORM models for the normalized media catalog.

This module provides SQLAlchemy 2.0 typed declarative models that mirror the
corresponding Pydantic row models in `models.py`. Table names match the
output table names so a snapshot can be loaded table-by-table.

Storage notes:
- Surrogate ids are assigned by the seeder, never by the database
  (`autoincrement=False`), so the foreign keys in a snapshot stay valid.
- Insert-skip keys are the primary keys (single or composite).
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """
    Declarative base class for all catalog tables.
    """


# -----------------------------------------------------------------------------
# Independent entities
# -----------------------------------------------------------------------------


class GenreTable(Base):
    __tablename__ = "Genre"

    genre_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    tmdb_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")


class CollectionTable(Base):
    __tablename__ = "Collection"

    collection_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    tmdb_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    overview: Mapped[str] = mapped_column(Text, nullable=False, default="")
    poster_path: Mapped[str | None] = mapped_column(String, nullable=True)
    backdrop_path: Mapped[str | None] = mapped_column(String, nullable=True)


class CompanyTable(Base):
    """
    Production companies and networks. The role is stored on MediaCompany.
    """

    __tablename__ = "Company"

    company_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    tmdb_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    origin_country: Mapped[str] = mapped_column(String, nullable=False, default="")
    logo_path: Mapped[str | None] = mapped_column(String, nullable=True)


class PersonTable(Base):
    __tablename__ = "Person"

    person_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    tmdb_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    gender: Mapped[int | None] = mapped_column(Integer, nullable=True)
    biography: Mapped[str] = mapped_column(Text, nullable=False, default="")
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    death_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    place_of_birth: Mapped[str] = mapped_column(String, nullable=False, default="")
    profile_path: Mapped[str | None] = mapped_column(String, nullable=True)


# -----------------------------------------------------------------------------
# Media and subtypes
# -----------------------------------------------------------------------------


class MediaItemTable(Base):
    """
    Shared base of movies and shows.

    Unique key:
    - (`media_type`, `tmdb_id`): movie and TV ids are separate upstream id spaces.
    """

    __tablename__ = "MediaItem"

    media_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    tmdb_id: Mapped[int] = mapped_column(Integer, nullable=False)
    media_type: Mapped[str] = mapped_column(String(8), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False, default="")
    original_title: Mapped[str] = mapped_column(String, nullable=False, default="")
    overview: Mapped[str] = mapped_column(Text, nullable=False, default="")
    original_language: Mapped[str] = mapped_column(String, nullable=False, default="")
    status: Mapped[str] = mapped_column(String, nullable=False, default="")
    popularity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    vote_average: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    vote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    poster_path: Mapped[str | None] = mapped_column(String, nullable=True)
    backdrop_path: Mapped[str | None] = mapped_column(String, nullable=True)
    homepage_url: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("media_type", "tmdb_id", name="uq_media_item_type_tmdb"),
    )


class MovieTable(Base):
    __tablename__ = "Movie"

    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("MediaItem.media_id", ondelete="CASCADE"), primary_key=True
    )
    release_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    budget: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    revenue: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    adult_flag: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    runtime_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    collection_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("Collection.collection_id"), nullable=True
    )


class TVShowTable(Base):
    __tablename__ = "TVShow"

    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("MediaItem.media_id", ondelete="CASCADE"), primary_key=True
    )
    first_air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    in_production: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    number_of_seasons: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    number_of_episodes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    show_type: Mapped[str] = mapped_column(String, nullable=False, default="")


class SeasonTable(Base):
    __tablename__ = "Season"

    season_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    tv_media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("TVShow.media_id", ondelete="CASCADE"), nullable=False
    )
    season_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    episode_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    poster_path: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("tv_media_id", "season_number", name="uq_season_show_number"),
    )


class EpisodeTable(Base):
    __tablename__ = "Episode"

    episode_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    season_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Season.season_id", ondelete="CASCADE"), nullable=False
    )
    episode_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    runtime_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    overview: Mapped[str] = mapped_column(Text, nullable=False, default="")
    still_path: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("season_id", "episode_number", name="uq_episode_season_number"),
    )


class ActorTable(Base):
    __tablename__ = "Actor"

    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Person.person_id", ondelete="CASCADE"), primary_key=True
    )
    acting_debut_year: Mapped[int | None] = mapped_column(Integer, nullable=True)


class CrewMemberTable(Base):
    __tablename__ = "CrewMember"

    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Person.person_id", ondelete="CASCADE"), primary_key=True
    )
    primary_department: Mapped[str] = mapped_column(String, nullable=False, default="")


# -----------------------------------------------------------------------------
# Link / casting / assignment tables
# -----------------------------------------------------------------------------


class MediaGenreTable(Base):
    __tablename__ = "MediaGenre"

    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("MediaItem.media_id", ondelete="CASCADE"), primary_key=True
    )
    genre_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Genre.genre_id", ondelete="CASCADE"), primary_key=True
    )


class MediaCompanyTable(Base):
    """
    Composite primary key (insert-skip key):
    - (`media_id`, `company_id`, `role`)
    """

    __tablename__ = "MediaCompany"

    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("MediaItem.media_id", ondelete="CASCADE"), primary_key=True
    )
    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Company.company_id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str] = mapped_column(String(16), primary_key=True)


class TitleCastingTable(Base):
    __tablename__ = "TitleCasting"

    casting_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("MediaItem.media_id", ondelete="CASCADE"), nullable=False
    )
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Actor.person_id", ondelete="CASCADE"), nullable=False
    )
    character_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    cast_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("ix_title_casting_media", "media_id"),)


class EpisodeCastingTable(Base):
    __tablename__ = "EpisodeCasting"

    casting_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    episode_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Episode.episode_id", ondelete="CASCADE"), nullable=False
    )
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Actor.person_id", ondelete="CASCADE"), nullable=False
    )
    character_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    cast_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("ix_episode_casting_episode", "episode_id"),)


class TitleCrewAssignmentTable(Base):
    __tablename__ = "TitleCrewAssignment"

    crew_assignment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    media_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("MediaItem.media_id", ondelete="CASCADE"), nullable=False
    )
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("CrewMember.person_id", ondelete="CASCADE"), nullable=False
    )
    department: Mapped[str] = mapped_column(String, nullable=False, default="")
    job_title: Mapped[str] = mapped_column(String, nullable=False, default="")

    __table_args__ = (Index("ix_title_crew_media", "media_id"),)


class EpisodeCrewAssignmentTable(Base):
    __tablename__ = "EpisodeCrewAssignment"

    crew_assignment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    episode_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("Episode.episode_id", ondelete="CASCADE"), nullable=False
    )
    person_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("CrewMember.person_id", ondelete="CASCADE"), nullable=False
    )
    department: Mapped[str] = mapped_column(String, nullable=False, default="")
    job_title: Mapped[str] = mapped_column(String, nullable=False, default="")

    __table_args__ = (Index("ix_episode_crew_episode", "episode_id"),)
