"""Database engine and schema setup."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase

from pantryplan.config import settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def create_db_engine(database_url: str | None = None, echo: bool | None = None) -> Engine:
    """Create a synchronous engine; the pantry core never runs on an event loop."""
    return create_engine(
        database_url or settings.database_url,
        echo=settings.sql_echo if echo is None else echo,
    )


def init_db(bind: Engine) -> None:
    """Create all tables for the current schema."""
    Base.metadata.create_all(bind)
