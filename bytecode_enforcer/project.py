"""Project model read from a Maven pom.xml."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from bytecode_enforcer.exceptions import ProjectModelError
from bytecode_enforcer.graph.resolver import MAVEN_CENTRAL
from bytecode_enforcer.models import DeclaredDependency

_NS = "{http://maven.apache.org/POM/4.0.0}"

_PROP_RE = re.compile(r"\$\{([^}]+)\}")


def _resolve_props(value: str, props: dict[str, str]) -> str:
    """Replace ${property} placeholders with values from *props*."""

    def _replace(m: re.Match) -> str:
        key = m.group(1)
        return props.get(key, m.group(0))  # keep original if not found

    return _PROP_RE.sub(_replace, value)


def _text(element: ET.Element | None) -> str | None:
    if element is None:
        return None
    return element.text.strip() if element.text else None


def _ns_of(root: ET.Element) -> str:
    return _NS if root.tag.startswith(_NS) else ""


@dataclass
class Project:
    """The project whose dependencies are checked."""

    name: str | None
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    basedir: Path = field(default_factory=Path.cwd)
    dependencies: list[DeclaredDependency] = field(default_factory=list)
    remote_repositories: list[str] = field(default_factory=lambda: [MAVEN_CENTRAL])


def load_project(pom_path: Path | str) -> Project:
    """Read name, coordinates, declared dependencies and repositories from a pom.

    ``${...}`` placeholders are substituted from ``<properties>``, the
    project coordinates and ``basedir``. Maven Central is always the last
    remote repository.

    Raises:
        ProjectModelError: the file cannot be read or parsed.
    """
    pom_path = Path(pom_path)
    try:
        root = ET.fromstring(pom_path.read_bytes())
    except (OSError, ET.ParseError) as exc:
        raise ProjectModelError(f"cannot read {pom_path}: {exc}") from exc

    ns = _ns_of(root)
    basedir = pom_path.resolve().parent
    parent = root.find(f"{ns}parent")

    group_id = _text(root.find(f"{ns}groupId")) or _text(
        parent.find(f"{ns}groupId") if parent is not None else None
    )
    version = _text(root.find(f"{ns}version")) or _text(
        parent.find(f"{ns}version") if parent is not None else None
    )
    artifact_id = _text(root.find(f"{ns}artifactId"))

    props = _extract_properties(root, ns)
    props.update(
        {
            "basedir": str(basedir),
            "project.basedir": str(basedir),
        }
    )
    for key, value in (
        ("groupId", group_id),
        ("artifactId", artifact_id),
        ("version", version),
    ):
        if value is not None:
            props[f"project.{key}"] = value
            props[f"pom.{key}"] = value

    def _prop(el: ET.Element | None) -> str | None:
        value = _text(el)
        return _resolve_props(value, props) if value else value

    managed: dict[tuple[str | None, str | None], str | None] = {}
    for dep_el in root.iterfind(f"{ns}dependencyManagement/{ns}dependencies/{ns}dependency"):
        key = (_prop(dep_el.find(f"{ns}groupId")), _prop(dep_el.find(f"{ns}artifactId")))
        managed[key] = _prop(dep_el.find(f"{ns}version"))

    deps: list[DeclaredDependency] = []
    deps_el = root.find(f"{ns}dependencies")
    if deps_el is not None:
        for dep_el in deps_el.findall(f"{ns}dependency"):
            dep_group = _prop(dep_el.find(f"{ns}groupId"))
            dep_artifact = _prop(dep_el.find(f"{ns}artifactId"))
            dep_version = _prop(dep_el.find(f"{ns}version"))
            if dep_version is None:
                dep_version = managed.get((dep_group, dep_artifact))
            deps.append(
                DeclaredDependency(
                    group_id=dep_group,
                    artifact_id=dep_artifact,
                    version=dep_version,
                    scope=_prop(dep_el.find(f"{ns}scope")),
                    type=_prop(dep_el.find(f"{ns}type")) or "jar",
                    classifier=_prop(dep_el.find(f"{ns}classifier")),
                    system_path=_prop(dep_el.find(f"{ns}systemPath")),
                )
            )

    repositories: list[str] = []
    for url_el in root.iterfind(f"{ns}repositories/{ns}repository/{ns}url"):
        url = _prop(url_el)
        if url and url not in repositories:
            repositories.append(url)
    if MAVEN_CENTRAL not in repositories:
        repositories.append(MAVEN_CENTRAL)

    return Project(
        name=_prop(root.find(f"{ns}name")) or artifact_id,
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        basedir=basedir,
        dependencies=deps,
        remote_repositories=repositories,
    )


def _extract_properties(root: ET.Element, ns: str) -> dict[str, str]:
    """Extract <properties> key-value pairs from the POM root."""
    props: dict[str, str] = {}
    props_el = root.find(f"{ns}properties")
    if props_el is not None:
        for child in props_el:
            # Strip namespace from tag name
            tag = child.tag.split("}")[-1] if "}" in child.tag else child.tag
            if child.text:
                props[tag] = child.text.strip()
    return props
