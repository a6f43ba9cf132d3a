"""
============================================================================
KEEP-ALIVE BOT - DATABASE MANAGER
============================================================================
Async engine lifecycle, table creation and transactional sessions with
SQLAlchemy error translation.

Author: Professional Development Team
Version: 1.0.0
License: MIT
============================================================================
"""

import asyncio
from typing import Optional, AsyncGenerator, Dict, Any
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    AsyncEngine,
    async_sessionmaker
)
from sqlalchemy import event, text
from sqlalchemy.pool import NullPool
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

from config.settings import DatabaseSettings
from database.models import Base
from exceptions import (
    DatabaseConnectionError,
    DatabaseDuplicateError,
    DatabaseException,
    DatabaseQueryError
)
from utils.logger import get_logger


logger = get_logger(__name__)

# SQLSTATE for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Whether an IntegrityError comes from a unique constraint.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports it in the
    message ("UNIQUE constraint failed: ...").
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    return "unique constraint" in str(orig).lower()


# ============================================================================
# DATABASE MANAGER CLASS
# ============================================================================

class DatabaseManager:
    """
    Owns the async engine and session factory.

    Sessions commit on success, roll back on failure and translate
    SQLAlchemy errors into the application's database exceptions.
    The manager is safe to share between concurrent tasks: every
    session() call gets its own AsyncSession.
    """

    def __init__(self, db_settings: DatabaseSettings):
        """
        Initialize database manager.

        Args:
            db_settings: Database section of the application settings
        """
        self.settings = db_settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._is_initialized = False
        self._lock = asyncio.Lock()

        self.database_url = db_settings.async_url

        logger.info(f"DatabaseManager initialized with URL: {self._mask_password(self.database_url)}")

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @staticmethod
    def _mask_password(url: str) -> str:
        """
        Mask password in database URL for logging.

        Args:
            url: Database URL

        Returns:
            Masked URL
        """
        if "://" not in url:
            return url

        protocol, rest = url.split("://", 1)
        if "@" not in rest:
            return url

        credentials, host_part = rest.split("@", 1)
        if ":" in credentials:
            user, _ = credentials.split(":", 1)
            return f"{protocol}://{user}:****@{host_part}"

        return url

    def _get_engine_kwargs(self) -> Dict[str, Any]:
        """
        Engine options for the configured backend.

        SQLite gets NullPool so every session opens its own aiosqlite
        connection; other backends use the async driver's default pool.
        """
        kwargs: Dict[str, Any] = {"echo": self.settings.echo}

        if self.settings.is_sqlite:
            kwargs["poolclass"] = NullPool
        else:
            kwargs["pool_size"] = self.settings.pool_size
            kwargs["max_overflow"] = self.settings.max_overflow
            kwargs["pool_timeout"] = self.settings.pool_timeout
            kwargs["pool_recycle"] = self.settings.pool_recycle
            kwargs["pool_pre_ping"] = True

        return kwargs

    async def initialize(self) -> None:
        """
        Create the engine and session factory, then create missing tables.

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        async with self._lock:
            if self._is_initialized:
                logger.warning("Database already initialized")
                return

            try:
                self.engine = create_async_engine(
                    self.database_url,
                    **self._get_engine_kwargs()
                )

                self._register_event_listeners()

                self.session_factory = async_sessionmaker(
                    self.engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autoflush=False
                )

                await self.create_tables()

                self._is_initialized = True
                logger.info("Database initialized successfully")

            except (SQLAlchemyError, OSError) as e:
                logger.error(f"Failed to initialize database: {e}")
                if self.engine:
                    await self.engine.dispose()
                    self.engine = None
                raise DatabaseConnectionError(
                    message=f"Failed to initialize database: {e}",
                    url=self._mask_password(self.database_url),
                    cause=e
                )

    def _register_event_listeners(self) -> None:
        """Register SQLAlchemy event listeners for connection tracing."""

        @event.listens_for(self.engine.sync_engine, "connect")
        def receive_connect(dbapi_conn, connection_record):
            logger.debug("New database connection established")

    async def create_tables(self) -> None:
        """
        Create all database tables that do not exist yet.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional scope for database operations.

        Yields:
            AsyncSession instance

        Raises:
            DatabaseDuplicateError: On a unique constraint violation
            DatabaseQueryError: On any other SQLAlchemy error

        Example:
            async with db_manager.session() as session:
                bot = await session.get(MonitoredBot, bot_id)
        """
        if not self._is_initialized:
            await self.initialize()

        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            if not is_unique_violation(e):
                logger.error(f"Integrity error: {e.orig}")
                raise DatabaseQueryError(
                    message=f"Constraint violated: {e.orig}",
                    query=str(e.statement) if e.statement else None,
                    cause=e
                )
            logger.warning(f"Integrity error: {e.orig}")
            raise DatabaseDuplicateError(
                message="Unique constraint violated",
                query=str(e.statement) if e.statement else None,
                cause=e
            )
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Session error: {e}")
            raise DatabaseQueryError(
                message=f"Database operation failed: {e}",
                query=str(getattr(e, "statement", "") or "") or None,
                cause=e
            )
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def check_connection(self) -> bool:
        """
        Check if database connection is alive.

        Returns:
            True if connection is alive, False otherwise
        """
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except DatabaseException as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    async def close(self) -> None:
        """
        Close database connections and cleanup resources.
        """
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            logger.info("Database connections closed")
        self.session_factory = None
        self._is_initialized = False
