from .errors import DepgraphError, InvalidRepositoryError
from .graph.builder import DependencyGraphBuilder
from .graph.dependency_graph import DependencyGraph, DependencyPath
from .graph.types import (
    Artifact,
    Dependency,
    DependencyNode,
    Exclusion,
    UnresolvableArtifactProblem,
)
from .repository.registry import CENTRAL_URL, RepositoryRegistry
from .resolution.session import TraversalMode
from .resolution.types import DependencyResolutionError, RepositorySystem

__all__ = [
    "DependencyGraphBuilder",
    "DependencyGraph",
    "DependencyPath",
    "Artifact",
    "Dependency",
    "DependencyNode",
    "Exclusion",
    "UnresolvableArtifactProblem",
    "RepositoryRegistry",
    "CENTRAL_URL",
    "TraversalMode",
    "RepositorySystem",
    "DependencyResolutionError",
    "DepgraphError",
    "InvalidRepositoryError",
]
