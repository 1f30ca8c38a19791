import os
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost") # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5433")
DB_NAME = os.getenv("POSTGRES_DB", "logistics")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

Base = declarative_base()


def build_engine(url: str = DATABASE_URL) -> AsyncEngine:
    # Only called when the database backend is selected, so asyncpg stays optional in memory mode
    return create_async_engine(url, echo=os.getenv("SQL_ECHO", "false").lower() == "true")


def build_session_factory(engine: AsyncEngine):
    return async_sessionmaker(engine, expire_on_commit=False)
