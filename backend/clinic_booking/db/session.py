"""
Engine and session factory.

The engine is built lazily from ``DATABASE_URL`` so tests can point the
process at an in-memory database before anything touches the store. A change
of ``DATABASE_URL`` between calls disposes the old engine.
"""

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./clinic.db"


class Base(DeclarativeBase):
    pass


_state = {"url": None, "engine": None, "sessionmaker": None}


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _engine_options(url: URL) -> dict:
    if url.drivername.startswith("postgresql"):
        return {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
            "connect_args": {"application_name": "clinic_booking"},
        }
    if url.drivername.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
        return options
    return {}


def get_engine():
    database_url = get_database_url()
    if _state["engine"] is not None and _state["url"] == database_url:
        return _state["engine"]

    if _state["engine"] is not None:
        _state["engine"].dispose()

    url = make_url(database_url)
    engine = create_engine(database_url, **_engine_options(url))
    _state.update(url=database_url, engine=engine, sessionmaker=None)
    logger.debug(
        "Engine created",
        extra={"context": {"dialect": engine.dialect.name, "database": url.database}},
    )
    return engine


def get_sessionmaker():
    engine = get_engine()
    if _state["sessionmaker"] is None:
        _state["sessionmaker"] = sessionmaker(bind=engine, autoflush=False)
    return _state["sessionmaker"]


def SessionLocal():
    """New Session bound to the current engine; callers close it."""
    return get_sessionmaker()()


def _metadata():
    # Importing the models registers them on Base.metadata
    from clinic_booking.db import base  # noqa: F401

    return Base.metadata


def create_tables():
    _metadata().create_all(bind=get_engine())


def drop_tables():
    _metadata().drop_all(bind=get_engine())
