"""
Engine and session factory for the marketplace database.

SQLite for local dev and tests, Postgres in production. Every caller gets its
own session from get_session() and is responsible for closing it.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from creatorlink.config import DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW


class Base(DeclarativeBase):
    pass


def normalize_url(raw):
    """Hosted Postgres hands out postgres:// URLs; SQLAlchemy 2.x only accepts postgresql://."""
    return raw.replace('postgres://', 'postgresql://', 1)


def build_engine(db_url):
    if db_url.startswith('sqlite'):
        return create_engine(db_url, connect_args={'check_same_thread': False})
    return create_engine(
        db_url, pool_pre_ping=True, pool_size=DB_POOL_SIZE, max_overflow=DB_MAX_OVERFLOW,
    )


url = normalize_url(DATABASE_URL)
engine = build_engine(url)
SessionLocal = sessionmaker(bind=engine)


def get_session():
    """Return a new session bound to the module engine."""
    return SessionLocal()
