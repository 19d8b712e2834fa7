"""Dependency graph — capability interfaces, tree building, resolution and walking."""

from bytecode_enforcer.graph.base import ArtifactResolver, GraphBuilder
from bytecode_enforcer.graph.walker import DependencyWalker, WalkResult

__all__ = ["ArtifactResolver", "DependencyWalker", "GraphBuilder", "WalkResult"]
