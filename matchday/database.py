"""Database engine and session factory.

Provides the SQLAlchemy engine, session factory and repository wiring for
callers that persist the match aggregate in a relational store.
"""

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from matchday.adapters.sqlalchemy_repository import (
    SQLAlchemyMatchRepository,
    SQLAlchemyPlayerRepository,
    SQLAlchemyTeamRepository,
)
from matchday.config import Config, settings as default_settings
from matchday.models import Base

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Optional[Config] = None) -> Engine:
    """Create an engine configured for the database in settings."""
    settings = settings or default_settings
    db_uri = settings.DATABASE_URL

    # Configure engine based on database type
    if settings.is_postgresql:
        # PostgreSQL specific configuration
        engine = create_engine(
            db_uri,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            pool_recycle=3600,
            echo=settings.DEBUG,
        )
    elif db_uri in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise each checkout sees an empty database
        engine = create_engine(
            db_uri,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # SQLite configuration (fallback)
        engine = create_engine(
            db_uri,
            connect_args={"check_same_thread": False},
        )

    logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=engine)


def get_db_session(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Get database session with automatic cleanup.

    Yields:
        SQLAlchemy database session
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def get_repositories(db: Session) -> dict:
    """Build the repository adapters bound to one session."""
    return {
        'players': SQLAlchemyPlayerRepository(db),
        'teams': SQLAlchemyTeamRepository(db),
        'matches': SQLAlchemyMatchRepository(db),
    }
