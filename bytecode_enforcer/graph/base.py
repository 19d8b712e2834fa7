"""Capability interfaces consumed by the walker and the rule."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

from bytecode_enforcer.models import DependencyNode, ResolvedArtifact

if TYPE_CHECKING:
    from bytecode_enforcer.project import Project


@runtime_checkable
class GraphBuilder(Protocol):
    """Builds the dependency tree of a project.

    Implementations raise :class:`~bytecode_enforcer.exceptions.GraphBuildError`
    when no tree can be produced.
    """

    def build(self, project: Project) -> DependencyNode: ...


@runtime_checkable
class ArtifactResolver(Protocol):
    """Resolves a node's coordinate to a local artifact file.

    Implementations return a :class:`ResolvedArtifact` (possibly with
    ``resolved=False``) or raise
    :class:`~bytecode_enforcer.exceptions.ArtifactResolutionError`.
    """

    def resolve(
        self, node: DependencyNode, repositories: Sequence[str]
    ) -> ResolvedArtifact: ...
