"""CLI entry point: bytecode-enforcer.

Subcommands:
    bytecode-enforcer check /path/to/project    # check dependencies against the level
    bytecode-enforcer levels                    # print known class-file major versions

The dependency tree is read from ``mvn dependency:tree -DoutputFile=...``
output (default: ``<project>/dependency-tree.txt``).
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from bytecode_enforcer.classfile import JAVA_9, JDK_1_1, java_release_name
from bytecode_enforcer.config import RuleConfig
from bytecode_enforcer.core.logging import setup_logging
from bytecode_enforcer.exceptions import EnforcerError, RuleViolationError
from bytecode_enforcer.graph.resolver import DEFAULT_LOCAL_REPOSITORY, MavenRepositoryResolver
from bytecode_enforcer.graph.tree_parser import TreeFileGraphBuilder
from bytecode_enforcer.project import load_project
from bytecode_enforcer.rule import BytecodeLevelRule


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Fail the build when dependencies need a newer JVM than supported."""
    load_dotenv(Path.cwd() / ".env")
    try:
        setup_logging(verbose)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("check")
@click.argument(
    "project_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--tree",
    "tree_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="dependency:tree output (default: PROJECT_DIR/dependency-tree.txt)",
)
@click.option(
    "--pom",
    "pom_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Project pom.xml (default: PROJECT_DIR/pom.xml)",
)
@click.option(
    "--local-repo",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_LOCAL_REPOSITORY,
    show_default=True,
    help="Local Maven repository",
)
@click.option("--remote", "remotes", multiple=True, help="Extra remote repository URL")
@click.option("--offline", is_flag=True, help="Only use the local repository")
@click.option("--max-level", type=int, default=None, help="Maximum class-file major version")
@click.option("--include-test-scope", is_flag=True, help="Also check test dependencies")
@click.option(
    "--include-provided-scope",
    is_flag=True,
    help="Also check provided dependencies",
)
def check(
    project_dir: Path,
    tree_file: Path | None,
    pom_file: Path | None,
    local_repo: Path,
    remotes: tuple[str, ...],
    offline: bool,
    max_level: int | None,
    include_test_scope: bool,
    include_provided_scope: bool,
) -> None:
    """Check PROJECT_DIR's dependencies against the supported bytecode level."""
    try:
        config = RuleConfig.from_env().with_overrides(
            supported_jvm_bytecode_level=max_level,
            exclude_scope_test=False if include_test_scope else None,
            exclude_scope_provided=False if include_provided_scope else None,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    tree_file = tree_file or project_dir / "dependency-tree.txt"
    pom_file = pom_file or project_dir / "pom.xml"

    rule = BytecodeLevelRule(config)
    try:
        project = load_project(pom_file)
        project.remote_repositories = list(remotes) + [
            r for r in project.remote_repositories if r not in remotes
        ]
        with MavenRepositoryResolver(local_repo, offline=offline) as resolver:
            rule.execute(project, TreeFileGraphBuilder(tree_file), resolver)
    except RuleViolationError as e:
        click.echo(e.report, err=True)
        sys.exit(1)
    except EnforcerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"All dependencies of {project.name} are within bytecode level "
        f"{config.supported_jvm_bytecode_level} ({java_release_name(config.supported_jvm_bytecode_level)})."
    )


@main.command("levels")
def levels() -> None:
    """Print known class-file major versions."""
    for major in range(JDK_1_1, JAVA_9 + 1):
        click.echo(f"  {major}  {java_release_name(major)}")
