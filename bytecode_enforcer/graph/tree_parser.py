"""Graph builder for the text output of ``mvn dependency:tree``.

Accepts the tree either as written by ``-DoutputFile`` or as copied from the
build log with ``[INFO] `` prefixes::

    [INFO] com.example:app:jar:1.0
    [INFO] +- org.slf4j:slf4j-api:jar:1.7.25:compile
    [INFO] \\- junit:junit:jar:4.12:test
    [INFO]    \\- org.hamcrest:hamcrest-core:jar:1.3:test

Only the first tree in the input is read.
"""

from __future__ import annotations

import re
from pathlib import Path

from bytecode_enforcer.exceptions import GraphBuildError
from bytecode_enforcer.models import DependencyNode
from bytecode_enforcer.project import Project

_LOG_PREFIX_RE = re.compile(r"^\[[A-Z]+\] ?")
_BRANCH_RE = re.compile(r"^(?P<indent>(?:[| ]  )*)(?:\+-|\\-) (?P<body>.+)$")
_ROOT_RE = re.compile(r"^[^\s:()]+(?::[^\s:()]+){3,4}$")
_NOTE_RE = re.compile(r"^(?P<coord>\S+)(?:\s+\((?P<note>[^)]*)\))?")

_INDENT_WIDTH = 3


def _parse_coordinate(coord: str, *, is_root: bool) -> DependencyNode:
    parts = coord.split(":")
    if is_root:
        # g:a:type:version or g:a:type:classifier:version
        if len(parts) == 4:
            group, artifact, type_, version = parts
            classifier = None
        elif len(parts) == 5:
            group, artifact, type_, classifier, version = parts
        else:
            raise ValueError(f"malformed root coordinate {coord!r}")
        scope = None
    else:
        # g:a:type:version:scope or g:a:type:classifier:version:scope
        if len(parts) == 5:
            group, artifact, type_, version, scope = parts
            classifier = None
        elif len(parts) == 6:
            group, artifact, type_, classifier, version, scope = parts
        else:
            raise ValueError(f"malformed dependency coordinate {coord!r}")
    return DependencyNode(
        group_id=group,
        artifact_id=artifact,
        version=version,
        scope=scope,
        type=type_,
        classifier=classifier,
    )


def parse_dependency_tree(text: str) -> DependencyNode:
    """Parse dependency:tree text into a :class:`DependencyNode` tree.

    Each node's ``dependency_trail`` is filled with the artifact ids from the
    root down to the node. Entries printed in parentheses (verbose mode's
    omitted duplicates/conflicts) are skipped.

    Raises:
        ValueError: no tree is found or a line is malformed.
    """
    root: DependencyNode | None = None
    stack: list[DependencyNode] = []
    in_tree = False
    skip_depth: int | None = None

    for raw in text.splitlines():
        line = _LOG_PREFIX_RE.sub("", raw.rstrip())
        if not line.strip():
            if in_tree:
                break
            continue

        branch = _BRANCH_RE.match(line)
        if branch is None:
            if in_tree:
                break  # end of the first tree
            if _ROOT_RE.match(line.strip()):
                root = _parse_coordinate(line.strip(), is_root=True)
                root.dependency_trail = [root.artifact_id_string]
                stack = [root]
            continue
        if root is None:
            raise ValueError(f"dependency line before tree root: {raw!r}")
        in_tree = True

        depth = len(branch.group("indent")) // _INDENT_WIDTH + 1
        if skip_depth is not None:
            if depth > skip_depth:
                continue
            skip_depth = None

        body = branch.group("body").strip()
        if body.startswith("("):
            skip_depth = depth
            continue
        if depth > len(stack):
            raise ValueError(f"unexpected indentation: {raw!r}")

        m = _NOTE_RE.match(body)
        if m is None:
            raise ValueError(f"malformed dependency line: {raw!r}")
        node = _parse_coordinate(m.group("coord"), is_root=False)
        node.optional = m.group("note") == "optional"

        del stack[depth:]
        parent = stack[-1]
        node.dependency_trail = parent.dependency_trail + [node.artifact_id_string]
        parent.children.append(node)
        stack.append(node)

    if root is None:
        raise ValueError("no dependency tree found")
    return root


class TreeFileGraphBuilder:
    """Build the dependency graph from a saved ``mvn dependency:tree`` file."""

    def __init__(self, tree_file: Path | str) -> None:
        self.tree_file = Path(tree_file)

    def build(self, project: Project) -> DependencyNode:
        try:
            text = self.tree_file.read_text(encoding="utf-8", errors="replace")
            return parse_dependency_tree(text)
        except (OSError, ValueError) as exc:
            raise GraphBuildError(project.name, str(exc)) from exc
