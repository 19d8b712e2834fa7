"""BytecodeLevelRule — walk the dependency graph, scan every artifact, report."""

from __future__ import annotations

from typing import Sequence

import structlog

from bytecode_enforcer.archive import ArchiveScanner
from bytecode_enforcer.config import RuleConfig
from bytecode_enforcer.exceptions import DependencyResolutionError, RuleViolationError
from bytecode_enforcer.graph.base import ArtifactResolver, GraphBuilder
from bytecode_enforcer.graph.walker import DependencyWalker
from bytecode_enforcer.models import DependencyReference
from bytecode_enforcer.project import Project

log = structlog.get_logger("bytecode_enforcer.rule")

REPORT_BANNER = "The following dependencies exceed the maximum supported JVM byte code level:"


def format_report(violations: Sequence[DependencyReference]) -> str:
    """Render the failure report: banner, then each dependency and its trail."""
    lines = [REPORT_BANNER]
    for ref in violations:
        lines.append(f"{ref.group_id}:{ref.artifact_id}:{ref.version}")
        trail = ref.dependency_trail
        if len(trail) == 1:
            lines.append(f" - project path: {trail[0]}")
        elif trail:
            lines.append(f" - project paths: {', '.join(trail)}")
    return "\n".join(lines)


class BytecodeLevelRule:
    """Fail when any dependency contains classes newer than the supported level.

    One :meth:`execute` call is a single synchronous pass: the whole graph is
    walked and resolved first, then each archive is scanned.
    """

    def __init__(self, config: RuleConfig | None = None) -> None:
        self.config = config or RuleConfig()

    def execute(
        self,
        project: Project,
        graph_builder: GraphBuilder,
        resolver: ArtifactResolver,
    ) -> None:
        """Run the rule.

        Raises:
            GraphBuildError: the dependency tree could not be built.
            DependencyResolutionError: any dependency failed to resolve; nothing is scanned.
            ArchiveReadError: an archive could not be read; aborts immediately.
            RuleViolationError: one or more dependencies exceed the level.
        """
        references = self.collect_dependencies(project, graph_builder, resolver)
        violations = self.find_violations(references)
        if violations:
            raise RuleViolationError(format_report(violations))
        log.debug(
            "rule.passed",
            project=project.name,
            dependencies=len(references),
            max_level=self.config.supported_jvm_bytecode_level,
        )

    def collect_dependencies(
        self,
        project: Project,
        graph_builder: GraphBuilder,
        resolver: ArtifactResolver,
    ) -> list[DependencyReference]:
        root = graph_builder.build(project)
        walker = DependencyWalker(
            self.config,
            resolver,
            declared_dependencies=project.dependencies,
            project_name=project.name,
        )
        result = walker.collect(root.children, project.remote_repositories)
        if result.failed:
            raise DependencyResolutionError("Unable to resolve the projects dependencies")
        log.debug("rule.collected", project=project.name, count=len(result.references))
        return result.references

    def find_violations(
        self, references: Sequence[DependencyReference]
    ) -> list[DependencyReference]:
        scanner = ArchiveScanner(self.config.supported_jvm_bytecode_level)
        return [ref for ref in references if scanner.exceeds_level(ref)]
