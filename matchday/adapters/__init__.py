"""Adapters Layer - Infrastructure adapters for the use case ports.

This layer contains adapters that implement the repository and publisher
interfaces using in-memory structures or SQLAlchemy.
"""

from .memory_repository import *
from .publishers import *
from .sqlalchemy_repository import *

__all__ = [
    # In-memory Repositories
    "InMemoryPlayerRepository",
    "InMemoryTeamRepository",
    "InMemoryMatchRepository",

    # SQLAlchemy Repositories
    "SQLAlchemyPlayerRepository",
    "SQLAlchemyTeamRepository",
    "SQLAlchemyMatchRepository",

    # Publishers
    "LoggingEventPublisher",
    "RecordingEventPublisher",
]
