"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the database session management and engine configuration
for SQLAlchemy with async support.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from academia.core.config import get_settings
from academia.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models should inherit from this class to get proper ORM mapping
    and metadata management.
    """

    pass


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory.
    An already-built engine may be passed in, which is how tests point the
    application at an in-memory database.
    """

    def __init__(self, engine: AsyncEngine | None = None) -> None:
        """Initialize the database manager.

        Args:
            engine: Optional pre-built engine. Created from settings if omitted.
        """
        self.settings = get_settings()
        self._engine = engine
        self._session_factory = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Returns:
            AsyncEngine: SQLAlchemy async engine instance.
        """
        if self._engine is None:
            is_sqlite = self.settings.database_url.startswith("sqlite")
            pool_options = (
                {}
                if is_sqlite
                else {
                    "pool_size": self.settings.db_pool_size,
                    "max_overflow": self.settings.db_max_overflow,
                    "pool_timeout": self.settings.db_pool_timeout,
                    "pool_recycle": self.settings.db_pool_recycle,
                }
            )
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.db_echo,
                connect_args={"check_same_thread": False} if is_sqlite else {},
                **pool_options,
            )
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory.

        Returns:
            async_sessionmaker: SQLAlchemy async session factory.
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all database tables.

        Should be called on application startup for development.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This will delete all data. Only use in testing!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Database tables dropped")

    async def disconnect(self) -> None:
        """Close the database engine and all connections.

        Should be called on application shutdown.
        """
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(UserModel))
                users = result.scalars().all()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def check_connection(self) -> bool:
        """Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.debug("Database connection check successful")
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance.

    Returns:
        DatabaseManager: Global database manager instance.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def set_db_manager(manager: DatabaseManager | None) -> DatabaseManager | None:
    """Replace the global database manager and return the previous one."""
    global _db_manager
    previous = _db_manager
    _db_manager = manager
    return previous


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to get database session.

    Yields:
        AsyncSession: SQLAlchemy async session.

    Example:
        @router.get("/schools")
        async def list_schools(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    db = get_db_manager()
    async with db.session() as session:
        yield session


async def init_database() -> None:
    """Initialize the database.

    Creates tables in development, seeds the permission catalog and default
    roles, and creates the super admin configured through the environment.
    """
    # Import all models to ensure they are registered with Base.metadata
    from academia.infrastructure.persistence import models  # noqa: F401

    db = get_db_manager()
    settings = get_settings()

    if settings.database_url.startswith("sqlite") and ":memory:" not in settings.database_url:
        db_path = settings.database_url.split(":///")[-1]
        db_dir = Path(db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Database directory created", path=str(db_dir))

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    if settings.is_development or settings.is_testing:
        logger.info("Creating database tables", environment=settings.environment)
        await db.create_tables()
    else:
        logger.info("Production mode: skipping table creation")

    async with db.session() as session:
        await seed_permission_catalog(session)
        await seed_default_roles(session)
        await session.commit()

    await _create_superadmin_from_env(db)


async def seed_permission_catalog(session: AsyncSession) -> int:
    """Insert missing default catalog permissions.

    Args:
        session: Database session. The caller commits.

    Returns:
        Number of permissions inserted.
    """
    from academia.domain.services.permission_catalog import default_catalog
    from academia.infrastructure.persistence.models import PermissionModel

    result = await session.execute(select(PermissionModel.name))
    existing = set(result.scalars().all())

    inserted = 0
    for name, resource, action in default_catalog():
        if name in existing:
            continue
        session.add(PermissionModel(name=name, resource=resource, action=action))
        inserted += 1

    await session.flush()
    if inserted:
        logger.info("Seeded permission catalog", inserted=inserted)
    return inserted


async def seed_default_roles(session: AsyncSession) -> None:
    """Insert default roles that don't exist yet, bundling catalog permissions.

    Args:
        session: Database session. The caller commits.
    """
    from academia.domain.services.permission_catalog import DEFAULT_ROLES
    from academia.infrastructure.persistence.models import RoleModel
    from academia.infrastructure.persistence.repositories import (
        PermissionRepository,
        RoleRepository,
    )

    role_repo = RoleRepository(session)
    permission_repo = PermissionRepository(session)

    for name, (description, permission_names) in DEFAULT_ROLES.items():
        if await role_repo.get_by_name(name) is not None:
            continue
        permissions = await permission_repo.get_by_names(permission_names)
        await role_repo.create(
            RoleModel(name=name, description=description, permissions=permissions)
        )
        logger.info("Seeded default role", role_name=name, permissions=len(permissions))


async def _create_superadmin_from_env(db: DatabaseManager) -> None:
    """Create a super admin from environment variables if configured.

    Args:
        db: Database manager instance.
    """
    from academia.domain.services.superadmin_service import (
        SuperadminCreationError,
        SuperadminService,
    )

    settings = get_settings()

    if not settings.superadmin_email or not settings.superadmin_password:
        logger.debug("Super admin environment variables not configured, skipping")
        return

    async with db.session() as session:
        if await SuperadminService.has_superadmin(session):
            logger.info(
                "Super admin already exists, skipping environment-based creation",
                email=settings.superadmin_email,
            )
            return

    try:
        async with db.session() as session:
            user_id = await SuperadminService.create_superadmin(
                email=settings.superadmin_email,
                password=settings.superadmin_password,
                session=session,
            )
        logger.info(
            "Super admin created from environment variables",
            user_id=user_id,
            email=settings.superadmin_email,
        )
    except SuperadminCreationError as e:
        logger.error(
            "Failed to create super admin from environment variables",
            error=str(e),
            email=settings.superadmin_email,
        )


async def close_database() -> None:
    """Close the database connection.

    This function should be called on application shutdown.
    """
    db = get_db_manager()
    await db.disconnect()
