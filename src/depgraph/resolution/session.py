from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from depgraph.store.db import default_local_repository
from depgraph.store.repo import LocalRepositoryManager


@dataclass(frozen=True, slots=True)
class SessionPolicy:
    """How the resolution service mediates and filters the collected tree.

    ``excluded_transitive_scopes`` and ``exclude_transitive_optional`` only
    apply below the direct dependencies of the request.
    """

    conflict_resolution: Optional[str]
    dependency_manager: Optional[str]
    excluded_transitive_scopes: tuple[str, ...]
    exclude_transitive_optional: bool

    @property
    def mediates_versions(self) -> bool:
        return self.conflict_resolution is not None


class TraversalMode(Enum):
    # Maven's own view: nearest version wins, transitive provided and
    # optional dependencies are dropped.
    MEDIATED = SessionPolicy(
        conflict_resolution="nearest",
        dependency_manager="classic",
        excluded_transitive_scopes=("test", "provided"),
        exclude_transitive_optional=True,
    )
    # Every version of every node, no scope narrowing beyond test.
    FULL = SessionPolicy(
        conflict_resolution=None,
        dependency_manager=None,
        excluded_transitive_scopes=("test",),
        exclude_transitive_optional=False,
    )

    @property
    def policy(self) -> SessionPolicy:
        return self.value


@dataclass(slots=True)
class RepositorySession:
    mode: TraversalMode
    local_repository_manager: LocalRepositoryManager

    @property
    def policy(self) -> SessionPolicy:
        return self.mode.policy

    def close(self) -> None:
        self.local_repository_manager.close()

    def __enter__(self) -> RepositorySession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def new_session(
    mode: TraversalMode, local_repository: Optional[Path | str] = None
) -> RepositorySession:
    """Create a session for ``mode`` bound to a local repository directory.

    Without ``local_repository`` the process default location is used.
    """
    directory = Path(local_repository) if local_repository else default_local_repository()
    return RepositorySession(
        mode=mode, local_repository_manager=LocalRepositoryManager(directory)
    )
