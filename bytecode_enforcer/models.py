"""Data models for dependency walking and archive scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

Coordinate = tuple[str | None, str | None, str | None]

SCOPE_COMPILE = "compile"
SCOPE_PROVIDED = "provided"
SCOPE_TEST = "test"
SCOPE_SYSTEM = "system"


@dataclass
class DependencyNode:
    """One node of a dependency tree, as produced by a graph builder.

    ``dependency_trail`` lists node ids from the tree root down to and
    including this node.
    """

    group_id: str | None
    artifact_id: str | None
    version: str | None
    scope: str | None = None
    type: str = "jar"
    classifier: str | None = None
    optional: bool = False
    dependency_trail: list[str] = field(default_factory=list)
    children: list[DependencyNode] = field(default_factory=list)

    @property
    def coordinate(self) -> Coordinate:
        return (self.group_id, self.artifact_id, self.version)

    @property
    def artifact_id_string(self) -> str:
        """``group:artifact:type[:classifier]:version`` — the id used in trails."""
        parts = [self.group_id or "", self.artifact_id or "", self.type]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version or "")
        return ":".join(parts)

    def node_string(self) -> str:
        """Artifact id plus scope, as printed in tree output."""
        if self.scope:
            return f"{self.artifact_id_string}:{self.scope}"
        return self.artifact_id_string


@dataclass
class DeclaredDependency:
    """A ``<dependency>`` declared directly in the project's pom.xml."""

    group_id: str | None
    artifact_id: str | None
    version: str | None
    scope: str | None = None
    type: str = "jar"
    classifier: str | None = None
    system_path: str | None = None

    def matches(self, node: DependencyNode) -> bool:
        """True when group, artifact and version equal the node's (None == None)."""
        return (
            self.group_id == node.group_id
            and self.artifact_id == node.artifact_id
            and self.version == node.version
        )


@dataclass
class ResolvedArtifact:
    """Answer of an artifact resolver for one coordinate.

    Coordinates may differ from the request (case, range resolution).
    """

    group_id: str | None
    artifact_id: str | None
    version: str | None
    file: Path | None
    available_versions: list[str] = field(default_factory=list)
    resolved: bool = True


@dataclass(frozen=True)
class DependencyReference:
    """A resolved artifact to scan.

    Identity is the (group_id, artifact_id, version) triple only; ``path``,
    ``available_versions`` and ``dependency_trail`` do not take part in
    equality or hashing.
    """

    group_id: str | None
    artifact_id: str | None
    version: str | None
    path: Path = field(compare=False)
    available_versions: tuple[str, ...] = field(default=(), compare=False)
    dependency_trail: tuple[str, ...] = field(default=(), compare=False)

    @property
    def coordinate(self) -> Coordinate:
        return (self.group_id, self.artifact_id, self.version)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"
