import argparse
import asyncio
from collections.abc import AsyncGenerator

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app import models  # noqa: F401
from app.config import settings
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db")

# --- Application DB ---
if not settings.app_database_url:
    raise ValueError(
        "DAILY_TASKS_DATABASE_URL environment variable not set for Application DB"
    )

if settings.app_database_url.startswith("postgresql://"):
    settings.app_database_url = settings.app_database_url.replace(
        "postgresql://", "postgresql+asyncpg://", 1
    )
elif not settings.app_database_url.startswith(
    ("postgresql+asyncpg://", "sqlite+aiosqlite://")
):
    raise ValueError(
        f"Unsupported settings.app_database_url prefix: {settings.app_database_url}"
    )

logger.debug(f"Application DB URL: {settings.app_database_url}")

if settings.is_sqlite:
    # aiosqlite connections are bound to the loop that opened them
    app_engine = create_async_engine(
        settings.app_database_url,
        poolclass=NullPool,
        echo=False,
        connect_args={"timeout": 30},
    )
else:
    app_engine = create_async_engine(
        settings.app_database_url,
        pool_pre_ping=True,
        pool_size=20,
        max_overflow=30,
        pool_timeout=60,
        pool_recycle=300,
        echo=False,
        connect_args={"timeout": 30},
    )

AppAsyncSessionLocal = async_sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=app_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def _set_search_path(conn_or_session) -> None:
    if settings.schema_name:
        await conn_or_session.execute(
            text(f"SET search_path TO {settings.schema_name}, public")
        )


# --- Dependency for FastAPI (Application DB) ---
async def get_app_db() -> AsyncGenerator[AsyncSession, None]:
    async with AppAsyncSessionLocal() as session:
        await _set_search_path(session)
        yield session


# --- Function to create tables (for Application DB) ---
async def init_db():
    if not Base.metadata.tables:
        logger.warning(
            "Base.metadata.tables is EMPTY! No tables will be created for Application DB."
        )
    else:
        logger.debug(
            f"Tables registered in Base.metadata: {list(Base.metadata.tables.keys())}"
        )

    async with app_engine.begin() as conn:
        if settings.schema_name:
            await conn.execute(
                text(f"CREATE SCHEMA IF NOT EXISTS {settings.schema_name}")
            )
            await _set_search_path(conn)
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema initialized.")


async def check_db_connection() -> bool:
    """Run a trivial query to confirm the application database is reachable."""
    try:
        async with app_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connectivity check failed: {e}", exc_info=True)
        return False


async def close_db():
    """Closes database connections."""
    logger.info("Closing database connections.")
    await app_engine.dispose()
    logger.info("Database connections closed.")


async def list_tables() -> list[str]:
    """Lists all tables of the application schema."""
    async with app_engine.connect() as conn:
        table_names = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names(
                schema=settings.schema_name
            )
        )

    logger.debug(f"Tables in application database: {table_names}")
    return table_names


# --- Function to reset database (for Application DB) ---
async def reset_db():
    logger.warning(
        "Attempting to reset the Application database. THIS IS A DESTRUCTIVE OPERATION."
    )
    async with app_engine.begin() as conn:
        if settings.schema_name:
            await conn.execute(
                text(f"DROP SCHEMA IF EXISTS {settings.schema_name} CASCADE")
            )
            logger.info(f"Schema '{settings.schema_name}' dropped.")
        else:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("All application tables dropped.")

    await init_db()
    logger.info("Application database has been reset and re-initialized.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Daily Tasks Application Database Utility"
    )
    parser.add_argument(
        "action",
        choices=["init", "reset", "list-tables"],
        help="'init' to create missing tables, "
        "'reset' to drop and recreate all tables, "
        "'list-tables' to show the tables of the application database.",
    )
    args = parser.parse_args()

    if args.action == "init":
        asyncio.run(init_db())
    elif args.action == "reset":
        confirm = input(
            "WARNING: This will delete all data in the Application DB. Are you sure? (yes/no): "
        )
        if confirm.lower() == "yes":
            asyncio.run(reset_db())
        else:
            logger.info("Application Database reset cancelled by user.")
    elif args.action == "list-tables":
        for table_name in asyncio.run(list_tables()):
            print(table_name)
