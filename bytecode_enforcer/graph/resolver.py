"""Maven repository resolver — local repository lookup with remote download."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import Sequence
from xml.etree import ElementTree

import httpx
import structlog

from bytecode_enforcer.exceptions import ArtifactResolutionError
from bytecode_enforcer.models import DependencyNode, ResolvedArtifact

log = structlog.get_logger("bytecode_enforcer.resolver")

MAVEN_CENTRAL = "https://repo1.maven.org/maven2"
DEFAULT_LOCAL_REPOSITORY = Path.home() / ".m2" / "repository"

# dependency type -> (file extension, implied classifier)
_TYPE_HANDLERS: dict[str, tuple[str, str | None]] = {
    "jar": ("jar", None),
    "bundle": ("jar", None),
    "maven-plugin": ("jar", None),
    "ejb": ("jar", None),
    "ejb-client": ("jar", "client"),
    "test-jar": ("jar", "tests"),
    "java-source": ("jar", "sources"),
    "javadoc": ("jar", "javadoc"),
    "war": ("war", None),
    "ear": ("ear", None),
    "rar": ("rar", None),
    "pom": ("pom", None),
}


def artifact_path(
    group_id: str,
    artifact_id: str,
    version: str,
    type_: str = "jar",
    classifier: str | None = None,
) -> PurePosixPath:
    """Repository-relative path of an artifact in the Maven 2 layout."""
    extension, implied = _TYPE_HANDLERS.get(type_, (type_, None))
    classifier = classifier or implied
    filename = f"{artifact_id}-{version}"
    if classifier:
        filename += f"-{classifier}"
    filename += f".{extension}"
    return PurePosixPath(*group_id.split("."), artifact_id, version, filename)


class MavenRepositoryResolver:
    """Resolve coordinates against a local repository, downloading misses.

    Downloads are tried against each remote repository in order and cached
    in the local repository. With ``offline=True`` only the local repository
    is consulted.
    """

    def __init__(
        self,
        local_repository: Path | str = DEFAULT_LOCAL_REPOSITORY,
        offline: bool = False,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.local_repository = Path(local_repository)
        self.offline = offline
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    # ── lifecycle ──────────────────────────────────────────────────────────

    def __enter__(self) -> MavenRepositoryResolver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    # ── public ─────────────────────────────────────────────────────────────

    def resolve(
        self, node: DependencyNode, repositories: Sequence[str]
    ) -> ResolvedArtifact:
        if not (node.group_id and node.artifact_id and node.version):
            raise ArtifactResolutionError(
                f"incomplete coordinate '{node.artifact_id_string}'"
            )

        rel = artifact_path(
            node.group_id, node.artifact_id, node.version, node.type, node.classifier
        )
        local = self.local_repository / rel
        if not local.is_file() and not self.offline:
            self._download(rel, local, repositories)

        found = local.is_file()
        return ResolvedArtifact(
            group_id=node.group_id,
            artifact_id=node.artifact_id,
            version=node.version,
            file=local if found else None,
            available_versions=self._available_versions(node.group_id, node.artifact_id),
            resolved=found,
        )

    # ── internals ──────────────────────────────────────────────────────────

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self._client

    def _download(
        self, rel: PurePosixPath, target: Path, repositories: Sequence[str]
    ) -> bool:
        for repo in repositories:
            url = f"{repo.rstrip('/')}/{rel.as_posix()}"
            try:
                resp = self._http().get(url)
            except httpx.HTTPError as exc:
                log.debug("resolver.download_error", url=url, error=str(exc))
                continue
            if resp.status_code != 200:
                log.debug("resolver.not_found", url=url, status=resp.status_code)
                continue

            try:
                self._store(resp.content, target)
            except OSError as exc:
                raise ArtifactResolutionError(
                    f"cannot store {url} in local repository at {target}: {exc}"
                ) from exc
            log.debug("resolver.downloaded", url=url, path=str(target))
            return True
        return False

    @staticmethod
    def _store(content: bytes, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        # Partial downloads never appear under the final name.
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.replace(tmp_name, target)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _available_versions(self, group_id: str, artifact_id: str) -> list[str]:
        """Versions listed in the artifact's local ``maven-metadata*.xml`` files."""
        artifact_dir = self.local_repository.joinpath(*group_id.split("."), artifact_id)
        versions: list[str] = []
        for meta in sorted(artifact_dir.glob("maven-metadata*.xml")):
            try:
                root = ElementTree.parse(meta).getroot()
            except (ElementTree.ParseError, OSError) as exc:
                log.debug("resolver.bad_metadata", path=str(meta), error=str(exc))
                continue
            for el in root.iterfind("versioning/versions/version"):
                if el.text and el.text.strip() not in versions:
                    versions.append(el.text.strip())
        return versions
