from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol

from depgraph.errors import DepgraphError
from depgraph.graph.types import Artifact, Dependency, DependencyNode
from depgraph.repository.registry import RemoteRepository

if TYPE_CHECKING:
    from .session import RepositorySession


@dataclass(slots=True)
class CollectRequest:
    """Either a single root dependency or a list of sibling dependencies."""

    root: Optional[Dependency] = None
    dependencies: list[Dependency] = field(default_factory=list)
    repositories: list[RemoteRepository] = field(default_factory=list)

    @property
    def declarations(self) -> list[Dependency]:
        if self.root is not None:
            return [self.root]
        return list(self.dependencies)


@dataclass(slots=True)
class DependencyRequest:
    collect_request: CollectRequest


@dataclass(frozen=True, slots=True)
class ArtifactRequest:
    artifact: Artifact
    repositories: tuple[RemoteRepository, ...] = ()


@dataclass(slots=True)
class ArtifactResult:
    """Outcome of materializing one artifact; ``artifact`` is None on failure."""

    request: ArtifactRequest
    artifact: Optional[Artifact] = None
    repository_id: Optional[str] = None
    exceptions: list[Exception] = field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.artifact is not None


@dataclass(slots=True)
class DependencyResult:
    root: Optional[DependencyNode]
    artifact_results: list[ArtifactResult] = field(default_factory=list)
    collect_exceptions: list[Exception] = field(default_factory=list)


class DependencyResolutionError(DepgraphError):
    """Resolution failed for part of the tree; ``result`` holds what was built."""

    def __init__(self, result: DependencyResult, message: Optional[str] = None):
        unresolved = [str(r.request.artifact) for r in result.artifact_results if not r.is_resolved]
        super().__init__(message or f"Could not resolve dependencies: {', '.join(unresolved)}")
        self.result = result


class RepositorySystem(Protocol):
    """Resolution engine that collects and materializes a dependency tree.

    Implementations apply the mediation and filtering policy carried by the
    session and raise DependencyResolutionError, with a best-effort partial
    result attached, when some artifacts cannot be resolved.
    """

    def resolve_dependencies(
        self, session: RepositorySession, request: DependencyRequest
    ) -> DependencyResult: ...
