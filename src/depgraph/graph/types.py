from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

COMPILE_SCOPE = "compile"


@dataclass(frozen=True, slots=True)
class Artifact:
    group_id: str
    artifact_id: str
    version: str
    extension: str = "jar"
    classifier: str = ""

    @classmethod
    def parse(cls, coordinates: str) -> Artifact:
        """Parse ``group:artifact[:extension[:classifier]]:version``."""
        parts = coordinates.split(":")
        if len(parts) < 3 or len(parts) > 5 or not all(parts):
            raise ValueError(f"Bad artifact coordinates {coordinates!r}")
        group_id, artifact_id = parts[0], parts[1]
        version = parts[-1]
        extension = parts[2] if len(parts) >= 4 else "jar"
        classifier = parts[3] if len(parts) == 5 else ""
        return cls(group_id, artifact_id, version, extension, classifier)

    @property
    def key(self) -> tuple[str, str]:
        return (self.group_id, self.artifact_id)

    def with_version(self, version: str) -> Artifact:
        return replace(self, version=version)

    def __str__(self) -> str:
        parts = [self.group_id, self.artifact_id, self.extension]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)


@dataclass(frozen=True, slots=True)
class Exclusion:
    group_id: str
    artifact_id: str

    def matches(self, artifact: Artifact) -> bool:
        return self.group_id in ("*", artifact.group_id) and self.artifact_id in (
            "*",
            artifact.artifact_id,
        )


@dataclass(frozen=True, slots=True)
class Dependency:
    artifact: Artifact
    scope: str = COMPILE_SCOPE
    optional: bool = False
    exclusions: frozenset[Exclusion] = frozenset()

    def with_scope(self, scope: str) -> Dependency:
        return replace(self, scope=scope)

    def excludes(self, artifact: Artifact) -> bool:
        return any(exclusion.matches(artifact) for exclusion in self.exclusions)


@dataclass(slots=True, eq=False)
class DependencyNode:
    """Node of the tree returned by the resolution service.

    The synthetic root of a request with several top-level dependencies has
    no dependency and usually no artifact.
    """

    artifact: Optional[Artifact]
    dependency: Optional[Dependency] = None
    children: list[DependencyNode] = field(default_factory=list)

    @classmethod
    def of(cls, dependency: Dependency) -> DependencyNode:
        return cls(artifact=dependency.artifact, dependency=dependency)


@dataclass(frozen=True, slots=True)
class UnresolvableArtifactProblem:
    artifact: Artifact
    reason: Optional[str] = None

    def __str__(self) -> str:
        message = f"{self.artifact} was not resolved"
        if self.reason:
            return f"{message}: {self.reason}"
        return f"{message}."
