import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from catalog_seeder.config.postgres_settings import PostgresSettings
from catalog_seeder.persistence.tables import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Owns the engine and session factory for the catalog database.

    Any SQLAlchemy URL works; the loader's insert-skip statements support
    PostgreSQL (production) and SQLite (tests, local dry runs).
    """

    def __init__(self, url: str, **engine_kwargs):

        self.engine = create_engine(url, **engine_kwargs)
        self.session_factory = sessionmaker(bind=self.engine)
        logger.info("CATALOG_DB_ENGINE_READY dialect=%s", self.engine.dialect.name)

    @classmethod
    def from_settings(cls, config: PostgresSettings) -> "DatabaseManager":
        return cls(config.url, pool_pre_ping=True)

    def create_tables(self) -> None:
        """Create any missing catalog tables. Existing tables are left alone."""
        Base.metadata.create_all(self.engine)
        logger.info("CATALOG_DB_TABLES_ENSURED tables=%d", len(Base.metadata.tables))

    @contextmanager
    def get_session(self):

        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
