"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.pricehub.runtime.config.config_data import DatabaseConfig
from src.pricehub.runtime.context import get_config


class DbSessionService:
    def __init__(self, database_url: str | None = None):
        """Initialize the shared database engine and session factory.

        Args:
            database_url: Explicit URL, overriding ``database.url`` from config.
        """
        main_config = get_config()
        db_config = main_config.database
        if database_url is not None:
            db_config = db_config.model_copy(update={"url": database_url})

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )
        self._engine = create_engine(
            db_config.connection_string, **self._engine_kwargs(db_config)
        )
        self._url = db_config.url

        if db_config.is_sqlite and main_config.app.environment == "production":
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )

    @staticmethod
    def _engine_kwargs(db_config: DatabaseConfig) -> dict:
        if db_config.is_sqlite:
            kwargs: dict = {
                "echo": db_config.echo,
                "connect_args": {"check_same_thread": False},
            }
            # In-memory databases live on a single shared connection
            if ":memory:" in db_config.url or db_config.url.rstrip("/") == "sqlite:":
                kwargs["poolclass"] = StaticPool
            return kwargs

        return {
            "pool_size": db_config.pool_size,
            "max_overflow": db_config.max_overflow,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.pool_recycle,
            "pool_pre_ping": True,
            "echo": db_config.echo,
            "connect_args": {
                "application_name": "pricehub_api",
                "connect_timeout": 30,
            },
        }

    @property
    def engine(self):
        return self._engine

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    def create_all(self) -> None:
        """Create all database tables."""
        import src.pricehub.entities  # noqa: F401  registers tables on the metadata

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def drop_all(self) -> None:
        import src.pricehub.entities  # noqa: F401

        SQLModel.metadata.drop_all(self._engine)
        logger.warning("All database tables dropped.")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope: commit on success, roll back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed: {}: {}", type(e).__name__, e
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            return False

    def dispose(self) -> None:
        self._engine.dispose()
