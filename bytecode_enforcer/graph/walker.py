"""Dependency graph walker — prune by scope, resolve, and de-duplicate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import structlog

from bytecode_enforcer.config import RuleConfig
from bytecode_enforcer.exceptions import ArtifactResolutionError
from bytecode_enforcer.graph.base import ArtifactResolver
from bytecode_enforcer.models import (
    SCOPE_SYSTEM,
    Coordinate,
    DeclaredDependency,
    DependencyNode,
    DependencyReference,
    ResolvedArtifact,
)

log = structlog.get_logger("bytecode_enforcer.walker")


@dataclass
class WalkResult:
    """Flat, de-duplicated references plus whether any node failed to resolve."""

    references: list[DependencyReference] = field(default_factory=list)
    failed: bool = False


class DependencyWalker:
    """Walk a dependency tree into a flat set of resolvable artifacts.

    Depth-first: a node whose scope is excluded is pruned together with its
    subtree; otherwise its children are walked first and the node itself is
    resolved afterwards. References are keyed by (group, artifact, version);
    the first reference stored for a triple is kept and later ones, with
    their trails, are dropped.

    Resolution failures do not stop the walk. They are logged and reported
    through :attr:`WalkResult.failed` once every node has been visited.
    """

    def __init__(
        self,
        config: RuleConfig,
        resolver: ArtifactResolver,
        declared_dependencies: Sequence[DeclaredDependency] = (),
        project_name: str | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver
        self._declared = list(declared_dependencies)
        self._project_name = project_name

    def collect(
        self, nodes: Sequence[DependencyNode], repositories: Sequence[str]
    ) -> WalkResult:
        references: dict[Coordinate, DependencyReference] = {}
        failed = self._collect(nodes, repositories, references)
        return WalkResult(references=list(references.values()), failed=failed)

    def _collect(
        self,
        nodes: Sequence[DependencyNode],
        repositories: Sequence[str],
        references: dict[Coordinate, DependencyReference],
    ) -> bool:
        failed = False
        for node in nodes:
            if self._config.is_excluded_scope(node.scope):
                log.debug("walker.pruned", node=node.node_string())
                continue

            failed |= self._collect(node.children, repositories, references)

            if node.scope == SCOPE_SYSTEM:
                artifact = self._resolve_system(node)
                if artifact is None:
                    log.error(
                        f"Unable to resolve system scoped dependency: {node.node_string()}"
                    )
                    failed = True
                    continue
            else:
                try:
                    artifact = self._resolver.resolve(node, repositories)
                except ArtifactResolutionError as exc:
                    log.debug("walker.resolve_error", node=node.node_string(), error=str(exc))
                    log.error(
                        f"Error resolving '{node.artifact_id_string}' "
                        f"in project {self._project_name}"
                    )
                    failed = True
                    continue

            if artifact.resolved and artifact.file is not None and artifact.file.is_file():
                ref = DependencyReference(
                    group_id=artifact.group_id,
                    artifact_id=artifact.artifact_id,
                    version=artifact.version,
                    path=artifact.file,
                    available_versions=tuple(artifact.available_versions),
                    dependency_trail=tuple(node.dependency_trail),
                )
                if ref.coordinate in references:
                    log.debug("walker.duplicate", dependency=str(ref))
                else:
                    references[ref.coordinate] = ref
            else:
                log.error(
                    f"Unable to resolve '{node.artifact_id_string}' "
                    f"in project {self._project_name}"
                )
                failed = True
        return failed

    def _resolve_system(self, node: DependencyNode) -> ResolvedArtifact | None:
        """Match *node* against the project's declared system-path dependencies."""
        for declared in self._declared:
            if declared.system_path is not None and declared.matches(node):
                path = Path(declared.system_path)
                if not path.is_file():
                    return None
                return ResolvedArtifact(
                    group_id=node.group_id,
                    artifact_id=node.artifact_id,
                    version=node.version,
                    file=path,
                )
        return None
