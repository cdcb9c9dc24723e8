from __future__ import annotations

from collections import deque
from typing import Optional

import pytest

from depgraph.graph.builder import DependencyGraphBuilder
from depgraph.graph.types import Artifact, Dependency, DependencyNode
from depgraph.resolution.session import RepositorySession
from depgraph.resolution.types import (
    ArtifactRequest,
    ArtifactResult,
    DependencyRequest,
    DependencyResolutionError,
    DependencyResult,
)


class ArtifactNotFoundError(Exception):
    pass


class InMemoryRepositorySystem:
    """Resolution service double backed by a catalog of published artifacts.

    ``catalog`` maps each published artifact to the dependencies its POM
    declares. Artifacts missing from the catalog fail to resolve. Honors the
    session policy: nearest-wins mediation, transitive scope and optional
    filtering, and exclusions.
    """

    def __init__(self, catalog: Optional[dict[Artifact, list[Dependency]]] = None):
        self.catalog: dict[Artifact, list[Dependency]] = dict(catalog or {})
        self.calls: list[tuple[RepositorySession, DependencyRequest]] = []

    def publish(self, coordinates: str, *dependencies: Dependency) -> Artifact:
        artifact = Artifact.parse(coordinates)
        self.catalog[artifact] = list(dependencies)
        return artifact

    def resolve_dependencies(
        self, session: RepositorySession, request: DependencyRequest
    ) -> DependencyResult:
        self.calls.append((session, request))
        collect = request.collect_request
        policy = session.policy

        if collect.root is not None:
            root = DependencyNode.of(collect.root)
            top_level: list[Dependency] = list(self.catalog.get(collect.root.artifact, []))
        else:
            root = DependencyNode(artifact=None)
            top_level = list(collect.dependencies)

        selected: set[tuple[str, str]] = set()
        if root.artifact is not None:
            selected.add(root.artifact.key)

        # (parent node, candidate dependencies, depth of candidates, exclusions, ancestors)
        queue: deque = deque()
        queue.append((root, top_level, 1, frozenset(root.dependency.exclusions
                                                     if root.dependency else ()),
                      (root.artifact,)))
        while queue:
            parent, candidates, depth, exclusions, ancestors = queue.popleft()
            for dependency in candidates:
                artifact = dependency.artifact
                if any(exclusion.matches(artifact) for exclusion in exclusions):
                    continue
                if depth > 1:
                    if dependency.scope in policy.excluded_transitive_scopes:
                        continue
                    if dependency.optional and policy.exclude_transitive_optional:
                        continue
                if policy.mediates_versions:
                    if artifact.key in selected:
                        continue
                    selected.add(artifact.key)
                elif artifact in ancestors:
                    continue
                child = DependencyNode.of(dependency)
                parent.children.append(child)
                queue.append(
                    (
                        child,
                        self.catalog.get(artifact, []),
                        depth + 1,
                        exclusions | dependency.exclusions,
                        ancestors + (artifact,),
                    )
                )

        result = DependencyResult(root=root)
        repositories = tuple(collect.repositories)
        for node in _walk(root):
            if node.artifact is None:
                continue
            artifact_request = ArtifactRequest(node.artifact, repositories)
            if node.artifact in self.catalog:
                repository_id = repositories[0].id if repositories else None
                session.local_repository_manager.record(node.artifact, repository_id)
                result.artifact_results.append(
                    ArtifactResult(artifact_request, node.artifact, repository_id)
                )
            else:
                error = ArtifactNotFoundError(
                    f"Could not find artifact {node.artifact} in "
                    f"{', '.join(r.id for r in repositories)}"
                )
                result.artifact_results.append(
                    ArtifactResult(artifact_request, exceptions=[error])
                )

        if any(not r.is_resolved for r in result.artifact_results):
            raise DependencyResolutionError(result)
        return result


def _walk(root: DependencyNode):
    queue = deque([root])
    while queue:
        node = queue.popleft()
        yield node
        queue.extend(node.children)


def dep(coordinates: str, scope: str = "compile", optional: bool = False, exclusions=()):
    return Dependency(
        Artifact.parse(coordinates),
        scope=scope,
        optional=optional,
        exclusions=frozenset(exclusions),
    )


@pytest.fixture
def system():
    return InMemoryRepositorySystem()


@pytest.fixture
def builder(system, tmp_path):
    builder = DependencyGraphBuilder(system)
    builder._set_local_repository(tmp_path / "m2")
    return builder
