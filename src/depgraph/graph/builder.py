from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from depgraph.repository.registry import RepositoryRegistry
from depgraph.resolution.normalizer import (
    build_collect_request,
    nodes_for_artifacts,
    nodes_for_dependency,
)
from depgraph.resolution.session import TraversalMode, new_session
from depgraph.resolution.types import (
    DependencyRequest,
    DependencyResolutionError,
    DependencyResult,
    RepositorySystem,
)

from .dependency_graph import DependencyGraph
from .types import Artifact, Dependency, DependencyNode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolutionOutcome:
    """Result of one resolution call; ``error`` is set when it was partial."""

    result: DependencyResult
    error: Optional[DependencyResolutionError] = None

    @property
    def is_partial(self) -> bool:
        return self.error is not None


class DependencyGraphBuilder:
    """Builds dependency graphs for Maven artifacts.

    A Maven dependency graph is what ``mvn dependency:tree`` prints: at most
    one node per group and artifact ID, scopes narrowed transitively, and
    no provided-scope or optional dependencies of transitive dependencies.

    A full dependency graph resolves each node's dependencies recursively
    and keeps the same artifact in several nodes, conflicting versions
    included. Provided and optional dependencies are treated like any other.

    Resolution problems (missing artifacts, unreachable repositories) never
    raise from the build methods; the returned graph is partial and lists
    them in ``problems``.
    """

    def __init__(self, system: RepositorySystem, repository_urls: Optional[Iterable[str]] = None):
        self.system = system
        self.repositories = RepositoryRegistry(repository_urls)
        self._local_repository: Optional[Path] = None

    def _set_local_repository(self, local_repository: Path | str) -> None:
        """Use a private local repository directory (tests only)."""
        self._local_repository = Path(local_repository)

    def build_full_dependency_graph(self, artifacts: Sequence[Artifact]) -> DependencyGraph:
        """Full compile-time graph including duplicates, conflicting versions,
        provided and optional dependencies."""
        return self._build_dependency_graph(nodes_for_artifacts(artifacts), TraversalMode.FULL)

    def build_maven_dependency_graph(self, dependency: Dependency) -> DependencyGraph:
        """Graph as Maven sees it; the first version seen wins conflicts."""
        return self._build_dependency_graph(
            nodes_for_dependency(dependency), TraversalMode.MEDIATED
        )

    def _build_dependency_graph(
        self, nodes: Sequence[DependencyNode], mode: TraversalMode
    ) -> DependencyGraph:
        outcome = self._resolve_compile_time_dependencies(nodes, mode)
        graph = DependencyGraph.from_root(outcome.result.root)
        if outcome.is_partial:
            for artifact_result in outcome.result.artifact_results:
                if artifact_result.is_resolved:
                    continue
                requested = artifact_result.request.artifact
                reason = str(artifact_result.exceptions[0]) if artifact_result.exceptions else None
                logger.warning("Unresolvable artifact %s: %s", requested, reason)
                graph.add_unresolvable_artifact_problem(requested, reason)
        logger.info(
            "Built %s graph with %d nodes and %d problems",
            mode.name.lower(),
            len(graph),
            len(graph.problems),
        )
        return graph

    def _resolve_compile_time_dependencies(
        self, nodes: Sequence[DependencyNode], mode: TraversalMode
    ) -> ResolutionOutcome:
        collect_request = build_collect_request(nodes, self.repositories)
        request = DependencyRequest(collect_request=collect_request)

        with new_session(mode, self._local_repository) as session:
            # Collects the tree and downloads every artifact in it.
            try:
                result = self.system.resolve_dependencies(session, request)
            except DependencyResolutionError as exc:
                return ResolutionOutcome(result=exc.result, error=exc)
        return ResolutionOutcome(result=result)
