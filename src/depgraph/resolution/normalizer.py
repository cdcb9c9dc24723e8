from __future__ import annotations

import logging
from typing import Iterable, Sequence

from depgraph.graph.types import COMPILE_SCOPE, Artifact, Dependency, DependencyNode
from depgraph.repository.registry import RemoteRepository

from .types import CollectRequest

logger = logging.getLogger(__name__)


def nodes_for_artifacts(artifacts: Iterable[Artifact]) -> list[DependencyNode]:
    return [DependencyNode(artifact=artifact) for artifact in artifacts]


def nodes_for_dependency(dependency: Dependency) -> list[DependencyNode]:
    return [DependencyNode.of(dependency)]


def compile_dependencies(nodes: Sequence[DependencyNode]) -> list[Dependency]:
    """Turn request nodes into compile-scope declarations.

    A node that already carries a dependency keeps its exclusions and
    optional flag; a bare artifact gets a fresh declaration.
    """
    dependencies: list[Dependency] = []
    for node in nodes:
        if node.dependency is None:
            if node.artifact is None:
                raise ValueError("Request node has neither a dependency nor an artifact")
            dependencies.append(Dependency(node.artifact, COMPILE_SCOPE))
        else:
            dependencies.append(node.dependency.with_scope(COMPILE_SCOPE))
    return dependencies


def build_collect_request(
    nodes: Sequence[DependencyNode], repositories: Iterable[RemoteRepository]
) -> CollectRequest:
    dependencies = compile_dependencies(nodes)
    request = CollectRequest(repositories=list(repositories))
    if len(dependencies) == 1:
        # A true root keeps its optional and provided dependencies in the result.
        request.root = dependencies[0]
    else:
        request.dependencies = dependencies
    logger.debug(
        "Collect request: root=%s siblings=%d repositories=%d",
        request.root.artifact if request.root else None,
        len(request.dependencies),
        len(request.repositories),
    )
    return request
