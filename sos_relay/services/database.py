"""SQLAlchemy engine and session factory for the reports table."""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Engine owner. Create on startup, close on shutdown."""

    def __init__(self, url: str) -> None:
        kwargs: dict = {}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every session gets an empty database
                kwargs["poolclass"] = StaticPool
        self._engine = create_engine(url, **kwargs)
        self._sessionmaker = sessionmaker(bind=self._engine, expire_on_commit=False)
        logger.info("Database engine initialized for %s", self._engine.url.render_as_string(hide_password=True))

    @property
    def engine(self):
        return self._engine

    def create_all(self) -> None:
        """Create missing tables."""
        from sos_relay.services import report_store  # noqa: F401  registers the table

        Base.metadata.create_all(self._engine)

    def verify_connection(self) -> bool:
        """Run a simple query to verify the connection. Returns True if OK."""
        try:
            with self._engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.exception("Database connection verify failed: %s", e)
            return False

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session in its own transaction: commit on success, rollback on error."""
        session = self._sessionmaker()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Database engine disposed")
