from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from depgraph.graph.types import Artifact

from .db import create_db, get_engine, get_session
from .models import ResolvedArtifact

logger = logging.getLogger(__name__)


class LocalRepositoryManager:
    """Maps artifacts to files under a local repository and indexes them.

    Without a caller-supplied session the index database is only created on
    first use, so a manager that never records or looks anything up leaves
    the directory untouched.
    """

    def __init__(self, directory: Path | str, session: Optional[Session] = None):
        self.directory = Path(directory).absolute()
        self._session = session
        self._engine: Optional[Engine] = None

    @property
    def session(self) -> Session:
        if self._session is None:
            self._engine = create_db(get_engine(self.directory))
            self._session = get_session(self._engine)
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def path_for(self, artifact: Artifact) -> Path:
        filename = f"{artifact.artifact_id}-{artifact.version}"
        if artifact.classifier:
            filename += f"-{artifact.classifier}"
        filename += f".{artifact.extension}"
        return (
            self.directory.joinpath(*artifact.group_id.split("."))
            / artifact.artifact_id
            / artifact.version
            / filename
        )

    def record(self, artifact: Artifact, repository_id: Optional[str] = None) -> ResolvedArtifact:
        existing = self.find(artifact)
        if existing:
            existing.repository_id = repository_id
            return self._commit_and_refresh(existing)
        row = ResolvedArtifact(
            coordinates=str(artifact),
            group_id=artifact.group_id,
            artifact_id=artifact.artifact_id,
            version=artifact.version,
            path=str(self.path_for(artifact)),
            repository_id=repository_id,
        )
        self.session.add(row)
        logger.debug("Recorded %s from %s", artifact, repository_id)
        return self._commit_and_refresh(row)

    def find(self, artifact: Artifact) -> Optional[ResolvedArtifact]:
        return self.session.scalar(
            select(ResolvedArtifact).where(ResolvedArtifact.coordinates == str(artifact))
        )

    def list_artifacts(self) -> Iterable[ResolvedArtifact]:
        return self.session.scalars(select(ResolvedArtifact)).all()

    def close(self) -> None:
        """Release the index database if this manager opened it."""
        if self._engine is None:
            return
        if self._session is not None:
            self._session.close()
            self._session = None
        self._engine.dispose()
        self._engine = None

    def _commit_and_refresh(self, obj):
        try:
            self.session.commit()
            self.session.refresh(obj)
            return obj
        except Exception:
            self.session.rollback()
            raise
