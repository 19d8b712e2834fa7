"""Test doubles for bytecode_enforcer — in-memory trees, resolvers and jars.

Usage::

    from bytecode_enforcer.testing import FakeGraphBuilder, FakeResolver, build_jar, node

    root = node("com.example", "app", "1.0", children=[node("g", "a", "1.0")])
    resolver = FakeResolver({("g", "a", "1.0"): build_jar(path, {"A.class": class_bytes(52)})})
    BytecodeLevelRule().execute(project, FakeGraphBuilder(root), resolver)
"""

from __future__ import annotations

import struct
import zipfile
from pathlib import Path
from typing import Mapping, Sequence

from bytecode_enforcer.classfile import JAVA_CLASS_MAGIC
from bytecode_enforcer.exceptions import ArtifactResolutionError, GraphBuildError
from bytecode_enforcer.models import SCOPE_COMPILE, Coordinate, DependencyNode, ResolvedArtifact


def class_bytes(major: int, minor: int = 0, magic: int = JAVA_CLASS_MAGIC) -> bytes:
    """A class-file prefix followed by a few padding bytes."""
    return struct.pack(">IHH", magic, minor, major) + b"\x00" * 8


def build_jar(path: Path, entries: Mapping[str, bytes]) -> Path:
    """Write a jar at *path* with *entries* in insertion order.

    Names ending in ``/`` become directory entries.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as jar:
        for name, data in entries.items():
            jar.writestr(name, data)
    return path


def node(
    group_id: str | None,
    artifact_id: str | None,
    version: str | None,
    scope: str | None = SCOPE_COMPILE,
    children: Sequence[DependencyNode] = (),
    trail: Sequence[str] | None = None,
) -> DependencyNode:
    """Build a node; without *trail* the node's own id is its trail."""
    n = DependencyNode(group_id, artifact_id, version, scope=scope, children=list(children))
    n.dependency_trail = list(trail) if trail is not None else [n.artifact_id_string]
    return n


class FakeGraphBuilder:
    """Returns a fixed tree, or raises GraphBuildError when *root* is None."""

    def __init__(self, root: DependencyNode | None) -> None:
        self._root = root
        self.calls = 0

    def build(self, project) -> DependencyNode:
        self.calls += 1
        if self._root is None:
            raise GraphBuildError(project.name)
        return self._root


class FakeResolver:
    """Resolves coordinates from a fixed map of files.

    Coordinates missing from *artifacts* come back unresolved; those in
    *errors* raise :class:`ArtifactResolutionError`.
    """

    def __init__(
        self,
        artifacts: Mapping[Coordinate, Path] | None = None,
        errors: Sequence[Coordinate] = (),
    ) -> None:
        self._artifacts = dict(artifacts or {})
        self._errors = set(errors)
        self._calls: list[Coordinate] = []

    @property
    def calls(self) -> list[Coordinate]:
        """Coordinates requested, in order — useful for assertions in tests."""
        return self._calls

    def resolve(self, node: DependencyNode, repositories: Sequence[str]) -> ResolvedArtifact:
        self._calls.append(node.coordinate)
        if node.coordinate in self._errors:
            raise ArtifactResolutionError(f"cannot resolve {node.artifact_id_string}")
        path = self._artifacts.get(node.coordinate)
        return ResolvedArtifact(
            group_id=node.group_id,
            artifact_id=node.artifact_id,
            version=node.version,
            file=path,
            resolved=path is not None,
        )
