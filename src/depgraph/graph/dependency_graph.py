from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterator, Optional

from .types import Artifact, Dependency, DependencyNode, UnresolvableArtifactProblem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DependencyPath:
    """Dependencies walked from the graph root down to one node."""

    root: Optional[Artifact]
    dependencies: tuple[Dependency, ...] = ()

    def append(self, dependency: Dependency) -> DependencyPath:
        return DependencyPath(self.root, self.dependencies + (dependency,))

    @property
    def leaf(self) -> Optional[Artifact]:
        if self.dependencies:
            return self.dependencies[-1].artifact
        return self.root

    def contains(self, artifact: Artifact) -> bool:
        if self.root == artifact:
            return True
        return any(dep.artifact == artifact for dep in self.dependencies)

    def __len__(self) -> int:
        return len(self.dependencies)

    def __str__(self) -> str:
        hops = [f"{dep.artifact} ({dep.scope}, optional={str(dep.optional).lower()})"
                for dep in self.dependencies]
        if self.root is not None:
            hops.insert(0, str(self.root))
        return " / ".join(hops)


class DependencyGraph:
    """Tree of resolved dependencies plus the problems met while resolving it.

    Built level by level from the root node returned by the resolution
    service. Every non-root node is reachable through exactly one entry of
    ``paths``; the same artifact may appear on several paths in a full graph.
    """

    def __init__(self, root: Optional[DependencyNode]):
        self.root = root
        self.paths: list[DependencyPath] = []
        self._edges: list[tuple[Optional[Artifact], Artifact]] = []
        self._problems: list[UnresolvableArtifactProblem] = []

    @classmethod
    def from_root(cls, root: Optional[DependencyNode]) -> DependencyGraph:
        graph = cls(root)
        if root is None:
            return graph

        queue: deque[tuple[DependencyNode, DependencyPath]] = deque()
        queue.append((root, DependencyPath(root.artifact)))
        while queue:
            node, path = queue.popleft()
            for child in node.children:
                dependency = child.dependency
                if dependency is None:
                    if child.artifact is None:
                        continue
                    dependency = Dependency(child.artifact)
                if path.contains(dependency.artifact):
                    logger.debug("Skipping cycle at %s via %s", dependency.artifact, path)
                    continue
                child_path = path.append(dependency)
                graph.paths.append(child_path)
                graph._edges.append((node.artifact, dependency.artifact))
                queue.append((child, child_path))
        return graph

    @property
    def edges(self) -> list[tuple[Optional[Artifact], Artifact]]:
        return list(self._edges)

    def artifacts(self) -> list[Artifact]:
        """Artifacts of every non-root node in level order."""
        return [path.dependencies[-1].artifact for path in self.paths]

    def versions(self, group_id: str, artifact_id: str) -> list[str]:
        seen: list[str] = []
        for artifact in self.artifacts():
            if artifact.key == (group_id, artifact_id) and artifact.version not in seen:
                seen.append(artifact.version)
        return seen

    def __iter__(self) -> Iterator[DependencyPath]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    # Problems
    def add_unresolvable_artifact_problem(
        self, artifact: Artifact, reason: Optional[str] = None
    ) -> UnresolvableArtifactProblem:
        problem = UnresolvableArtifactProblem(artifact=artifact, reason=reason)
        self._problems.append(problem)
        return problem

    @property
    def problems(self) -> list[UnresolvableArtifactProblem]:
        return list(self._problems)

    @property
    def is_complete(self) -> bool:
        return not self._problems
