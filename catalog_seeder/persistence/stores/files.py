"""
JSON table files: one `<Table>.json` per output table.

File body is `{"<Table>": [row, ...]}` so each file is self-describing when
handed to a bulk loader on its own.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from catalog_seeder.persistence.models import TABLE_MODELS, TABLE_NAMES

logger = logging.getLogger(__name__)


def write_tables(
    tables: Mapping[str, Sequence[Mapping[str, Any]]], directory: str | Path
) -> list[Path]:
    """
    Write every table of a snapshot into `directory` (created if missing).

    Returns:
        The written paths, in table order.
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name in TABLE_NAMES:
        if name not in tables:
            continue
        path = out_dir / f"{name}.json"
        rows = list(tables[name])
        path.write_text(json.dumps({name: rows}, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("TABLE_FILE_WRITTEN table=%s rows=%d path=%s", name, len(rows), path)
        written.append(path)

    return written


def read_tables(directory: str | Path) -> dict[str, list[dict[str, Any]]]:
    """
    Read every `<Table>.json` present in `directory`.

    Rows are validated against the row models and returned in JSON form.
    Missing table files are skipped with a warning.

    Raises:
        FileNotFoundError: If `directory` does not exist.
        pydantic.ValidationError: If a row does not match its table schema.
    """
    in_dir = Path(directory)
    if not in_dir.is_dir():
        raise FileNotFoundError(f"Table directory not found: {in_dir}")

    tables: dict[str, list[dict[str, Any]]] = {}
    for name in TABLE_NAMES:
        path = in_dir / f"{name}.json"
        if not path.exists():
            logger.warning("TABLE_FILE_MISSING table=%s path=%s", name, path)
            continue

        body = json.loads(path.read_text(encoding="utf-8"))
        model = TABLE_MODELS[name]
        tables[name] = [
            model.model_validate(row).model_dump(mode="json") for row in body.get(name) or []
        ]
        logger.info("TABLE_FILE_READ table=%s rows=%d path=%s", name, len(tables[name]), path)

    return tables
