"""
In-memory output tables for one ingestion run.

Holds the seventeen growing row lists in bulk-load order. Rows are only ever
appended; nothing is updated or removed during a run.
"""

from __future__ import annotations

import logging
from typing import Any

from catalog_seeder.persistence.models import TABLE_MODELS, TABLE_NAMES, CatalogRow

logger = logging.getLogger(__name__)


class OutputTables:
    """
    The seventeen output collections, keyed by table name.
    """

    def __init__(self) -> None:
        self._rows: dict[str, list[CatalogRow]] = {name: [] for name in TABLE_NAMES}

    def append(self, row: CatalogRow) -> None:
        table = type(row).__name__
        if TABLE_MODELS.get(table) is not type(row):
            raise TypeError(f"{table} is not an output table row")
        self._rows[table].append(row)

    def __getitem__(self, table: str) -> list[CatalogRow]:
        """Live view of one table (do not mutate)."""
        return self._rows[table]

    def counts(self) -> dict[str, int]:
        return {name: len(rows) for name, rows in self._rows.items()}

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """
        JSON-ready copy of every table for hand-off (dates as ISO strings).
        """
        return {
            name: [row.model_dump(mode="json") for row in rows]
            for name, rows in self._rows.items()
        }

    def summary(self) -> str:
        width = max(len(name) for name in TABLE_NAMES)
        lines = ["Transformation statistics:"]
        lines.extend(
            f"  {name:<{width}}  {count}" for name, count in self.counts().items()
        )
        return "\n".join(lines)

    def log_summary(self) -> None:
        logger.info("SEED_OUTPUT_COUNTS %s", " ".join(f"{k}={v}" for k, v in self.counts().items()))
