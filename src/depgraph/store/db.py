from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

LOCAL_REPOSITORY_ENV = "DEPGRAPH_LOCAL_REPOSITORY"
DEFAULT_LOCAL_REPOSITORY = Path.home() / ".m2" / "repository"
INDEX_FILENAME = "depgraph.db"


def default_local_repository() -> Path:
    """Local repository directory from the environment, else ~/.m2/repository."""
    value = os.getenv(LOCAL_REPOSITORY_ENV)
    if value:
        return Path(value).expanduser()
    return DEFAULT_LOCAL_REPOSITORY


def get_engine(directory: Optional[Path | str] = None) -> Engine:
    """Create an engine for the index of the given local repository directory."""
    resolved = Path(directory) if directory else default_local_repository()
    resolved.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite+pysqlite:///{resolved / INDEX_FILENAME}", future=True, echo=False
    )


def create_db(engine: Optional[Engine] = None) -> Engine:
    """Make sure the resolved-artifact index exists in the repository database."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    return engine


def get_session(engine: Optional[Engine] = None) -> Session:
    """Open an ORM session on a local repository index.

    Falls back to the index of the default local repository.
    """
    factory = sessionmaker(bind=engine or get_engine(), autoflush=False, future=True)
    return factory()
