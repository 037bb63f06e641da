"""
catalog-seeder CLI entry point.

Commands:
- fetch: walk TMDB and write one JSON file per normalized table
- load:  bulk-load the JSON tables into PostgreSQL (insert, skip on conflict)
- seed:  fetch, then load
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError

from catalog_seeder.client.client import TmdbClient
from catalog_seeder.config.postgres_settings import PostgresSettings
from catalog_seeder.config.tmdb_settings import TmdbSettings
from catalog_seeder.normalize.engine import NormalizationEngine
from catalog_seeder.persistence.engine import DatabaseManager
from catalog_seeder.persistence.stores.catalog import CatalogTablesStore, LoadCounts
from catalog_seeder.persistence.stores.files import read_tables, write_tables
from catalog_seeder.pipeline.worker import CatalogSeedWorker, SeedOptions

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="catalog-seeder",
    help="Fetch TMDB metadata and normalize it into relational seed tables.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR"),
    ] = "INFO",
) -> None:
    """catalog-seeder - TMDB to normalized tables."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s | %(message)s",
    )


def _load_tmdb_settings() -> TmdbSettings:
    try:
        return TmdbSettings()
    except ValidationError as e:
        typer.echo(f"Invalid TMDB configuration (is TMDB_API_KEY set?):\n{e}", err=True)
        raise typer.Exit(code=1)


def _run_fetch(settings: TmdbSettings, output_dir: Path, max_movies: int, max_shows: int) -> None:
    options = SeedOptions(
        max_movies=max_movies,
        max_shows=max_shows,
        seasons_per_show=settings.seasons_per_show,
    )
    with TmdbClient.from_settings(settings) as client:
        worker = CatalogSeedWorker(
            client=client,
            engine=NormalizationEngine(seasons_per_show=settings.seasons_per_show),
        )
        output = worker.run(options)

    typer.echo(output.summary())
    write_tables(output.snapshot(), output_dir)
    typer.echo(f"Output saved to: {output_dir}")


def _run_load(input_dir: Path, create_tables: bool, chunk_size: int) -> LoadCounts:
    try:
        db = DatabaseManager.from_settings(PostgresSettings())
    except ValidationError as e:
        typer.echo(f"Invalid database configuration:\n{e}", err=True)
        raise typer.Exit(code=1)

    tables = read_tables(input_dir)
    if create_tables:
        db.create_tables()

    with db.get_session() as session:
        with session.begin():
            store = CatalogTablesStore(session, chunk_size=chunk_size)
            counts = store.insert_all(tables)
        totals = store.count_rows()

    for name, count in totals.items():
        typer.echo(f"  - {name}: {count}")
    return counts


@app.command()
def fetch(
    output_dir: Annotated[
        Optional[Path], typer.Option("--output-dir", "-o", help="Directory for <Table>.json files")
    ] = None,
    max_movies: Annotated[Optional[int], typer.Option("--max-movies", min=0)] = None,
    max_shows: Annotated[Optional[int], typer.Option("--max-shows", min=0)] = None,
) -> None:
    """Fetch from TMDB and write one JSON file per table."""
    settings = _load_tmdb_settings()
    _run_fetch(
        settings,
        output_dir or Path(settings.output_dir),
        settings.max_movies if max_movies is None else max_movies,
        settings.max_tv_shows if max_shows is None else max_shows,
    )


@app.command()
def load(
    input_dir: Annotated[
        Path, typer.Option("--input-dir", "-i", help="Directory holding <Table>.json files")
    ] = Path("output"),
    create_tables: Annotated[
        bool, typer.Option("--create-tables", help="Create missing catalog tables first")
    ] = False,
    chunk_size: Annotated[int, typer.Option("--chunk-size", min=1)] = 500,
) -> None:
    """Bulk-load JSON tables into PostgreSQL (insert, skip on conflict)."""
    if not input_dir.is_dir():
        typer.echo(f"Input directory not found: {input_dir}. Run fetch first.", err=True)
        raise typer.Exit(code=1)
    counts = _run_load(input_dir, create_tables, chunk_size)
    typer.echo(f"Submitted {counts.total} rows across {len(counts.rows)} tables")


@app.command()
def seed(
    output_dir: Annotated[Optional[Path], typer.Option("--output-dir", "-o")] = None,
    create_tables: Annotated[bool, typer.Option("--create-tables")] = False,
) -> None:
    """Fetch from TMDB, write the JSON tables, then load them."""
    settings = _load_tmdb_settings()
    target = output_dir or Path(settings.output_dir)
    _run_fetch(settings, target, settings.max_movies, settings.max_tv_shows)
    counts = _run_load(target, create_tables, 500)
    typer.echo(f"Submitted {counts.total} rows across {len(counts.rows)} tables")


if __name__ == "__main__":
    app()
