"""
Catalog tables store (persistence only).

This module bulk-loads a normalized snapshot (seventeen tables) into the
relational store, table by table in dependency order:
- independent entities (Genre, Collection, Company, Person)
- MediaItem, then its subtypes (Movie, TVShow, Season, Episode, Actor, CrewMember)
- link / casting / assignment tables

Design constraints:
- Insert, skip on unique-key conflict. Existing rows are never updated.
- Rows are re-validated through the pydantic row models before insert, so a
  snapshot read back from JSON gets native types (dates) again.

Non-responsibilities:
- No HTTP calls.
- No normalization. That lives in catalog_seeder.normalize.

Monitoring:
- Emits structured logs for DB inserts:
  - CATALOG_DB_INSERT_START
  - CATALOG_DB_INSERT_SUCCESS
  - CATALOG_DB_INSERT_FAILED
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import Table, func, select
from sqlalchemy.orm import Session

from catalog_seeder.persistence.models import TABLE_MODELS, TABLE_NAMES
from catalog_seeder.persistence.tables import Base

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadCounts:
    """
    Per-table counts of rows submitted for insert.

    Note:
        These are input rows processed, not DB-reported inserted rows.
        (rowcount for ON CONFLICT DO NOTHING varies by dialect and driver.)
    """

    rows: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.rows.values())


class CatalogTablesStore:
    """
    Repository for loading normalized catalog tables.

    Intended use:
        with db.get_session() as session:
            with session.begin():
                counts = CatalogTablesStore(session).insert_all(snapshot)
    """

    def __init__(self, session: Session, *, chunk_size: int = 500) -> None:
        """
        Args:
            session: SQLAlchemy Session bound to the catalog database.
            chunk_size: Max rows per insert statement to avoid parameter limits.
        """
        self._session = session
        self._chunk_size = chunk_size

    def insert_all(self, tables: Mapping[str, Sequence[Mapping[str, Any]]]) -> LoadCounts:
        """
        Insert every table of a snapshot in dependency order.

        Tables missing from `tables` are skipped; unknown table names are rejected.
        """
        unknown = set(tables) - set(TABLE_NAMES)
        if unknown:
            raise ValueError(f"Unknown catalog tables: {sorted(unknown)}")

        counts: dict[str, int] = {}
        for name in TABLE_NAMES:
            if name in tables:
                counts[name] = self.insert_table(name, tables[name])
        return LoadCounts(rows=counts)

    def insert_table(self, name: str, rows: Sequence[Mapping[str, Any]]) -> int:
        """
        Insert rows into one table, skipping rows whose keys already exist.
        """
        model = TABLE_MODELS[name]
        native_rows = [model.model_validate(r).model_dump() for r in rows]
        return self._bulk_insert_skip(table=Base.metadata.tables[name], rows=native_rows)

    def count_rows(self) -> dict[str, int]:
        """
        Current row count per catalog table (operator verification after a load).
        """
        return {
            name: self._session.execute(
                select(func.count()).select_from(Base.metadata.tables[name])
            ).scalar_one()
            for name in TABLE_NAMES
        }

    # -------------------------------------------------------------------------
    # Insert implementation (with monitoring logs)
    # -------------------------------------------------------------------------

    def _insert_fn(self):
        """
        Return a dialect-specific insert() that supports on_conflict_do_nothing().
        """
        dialect = self._session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as ins

            return ins
        if dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as ins

            return ins
        raise NotImplementedError(
            f"Insert-skip is only implemented for PostgreSQL and SQLite. dialect={dialect}"
        )

    def _bulk_insert_skip(self, *, table: Table, rows: list[dict[str, Any]]) -> int:
        """
        Bulk insert rows into `table` with ON CONFLICT DO NOTHING.

        Monitoring:
            Emits structured logs with table name, row count, chunk count, dialect,
            and total DB latency.
        """
        if not rows:
            logger.info("CATALOG_DB_INSERT_SKIPPED table=%s reason=no_rows", table.name)
            return 0

        insert = self._insert_fn()
        dialect = self._session.get_bind().dialect.name

        chunks = list(_chunks(rows, self._chunk_size))
        chunk_count = len(chunks)

        logger.debug(
            "CATALOG_DB_INSERT_START table=%s rows=%d chunks=%d chunk_size=%d dialect=%s",
            table.name,
            len(rows),
            chunk_count,
            self._chunk_size,
            dialect,
        )

        start = time.perf_counter()
        try:
            total = 0
            for chunk in chunks:
                stmt = insert(table).values(chunk).on_conflict_do_nothing()
                self._session.execute(stmt)
                total += len(chunk)

            latency_ms = (time.perf_counter() - start) * 1000.0
            logger.info(
                "CATALOG_DB_INSERT_SUCCESS table=%s rows=%d chunks=%d latency_ms=%.2f dialect=%s",
                table.name,
                total,
                chunk_count,
                latency_ms,
                dialect,
            )
            return total

        except Exception:
            latency_ms = (time.perf_counter() - start) * 1000.0
            logger.exception(
                "CATALOG_DB_INSERT_FAILED table=%s rows=%d chunks=%d latency_ms=%.2f dialect=%s",
                table.name,
                len(rows),
                chunk_count,
                latency_ms,
                dialect,
            )
            raise


def _chunks(items: list[dict[str, Any]], size: int) -> Iterable[list[dict[str, Any]]]:
    """
    Yield list chunks of at most `size` items.
    """
    for i in range(0, len(items), size):
        yield items[i : i + size]
