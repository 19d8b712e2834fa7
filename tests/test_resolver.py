"""Tests for MavenRepositoryResolver — local layout plus mocked HTTP downloads."""

from __future__ import annotations

import httpx
import pytest

from bytecode_enforcer.config import RuleConfig
from bytecode_enforcer.exceptions import ArtifactResolutionError
from bytecode_enforcer.graph.resolver import MavenRepositoryResolver, artifact_path
from bytecode_enforcer.graph.walker import DependencyWalker
from bytecode_enforcer.models import DependencyNode

REMOTE = "https://repo.example.org/maven2"
MIRROR = "https://mirror.example.org/maven2/"


def _node(**kw) -> DependencyNode:
    defaults = {"group_id": "org.slf4j", "artifact_id": "slf4j-api", "version": "1.7.25"}
    defaults.update(kw)
    return DependencyNode(**defaults)


class TestArtifactPath:
    def test_jar(self):
        assert (
            artifact_path("org.slf4j", "slf4j-api", "1.7.25").as_posix()
            == "org/slf4j/slf4j-api/1.7.25/slf4j-api-1.7.25.jar"
        )

    def test_classifier(self):
        path = artifact_path("org.lwjgl", "lwjgl", "3.2.3", classifier="natives-linux")
        assert path.name == "lwjgl-3.2.3-natives-linux.jar"

    def test_test_jar_type(self):
        assert artifact_path("g", "a", "1.0", type_="test-jar").name == "a-1.0-tests.jar"

    def test_unknown_type_used_as_extension(self):
        assert artifact_path("g", "a", "1.0", type_="zip").name == "a-1.0.zip"


class TestMavenRepositoryResolver:
    def test_local_hit_without_network(self, tmp_path):
        local = tmp_path / "repo"
        jar = local / artifact_path("org.slf4j", "slf4j-api", "1.7.25")
        jar.parent.mkdir(parents=True)
        jar.write_bytes(b"PK")

        def handler(request):
            raise AssertionError("no request expected")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        result = MavenRepositoryResolver(local, client=client).resolve(_node(), [REMOTE])
        assert result.resolved is True
        assert result.file == jar
        assert (result.group_id, result.artifact_id, result.version) == (
            "org.slf4j",
            "slf4j-api",
            "1.7.25",
        )

    def test_download_falls_through_repositories(self, tmp_path):
        requested = []

        def handler(request):
            requested.append(str(request.url))
            if request.url.host == "repo.example.org":
                return httpx.Response(404)
            return httpx.Response(200, content=b"jar-bytes")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with MavenRepositoryResolver(tmp_path, client=client) as resolver:
            result = resolver.resolve(_node(), [REMOTE, MIRROR])
        assert result.resolved is True
        assert result.file.read_bytes() == b"jar-bytes"
        assert requested == [
            f"{REMOTE}/org/slf4j/slf4j-api/1.7.25/slf4j-api-1.7.25.jar",
            "https://mirror.example.org/maven2/org/slf4j/slf4j-api/1.7.25/slf4j-api-1.7.25.jar",
        ]
        assert not list(result.file.parent.glob("*.part"))

    def test_transport_error_is_not_fatal(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        result = MavenRepositoryResolver(tmp_path, client=client).resolve(_node(), [REMOTE])
        assert result.resolved is False
        assert result.file is None

    def test_offline_skips_download(self, tmp_path):
        def handler(request):
            raise AssertionError("offline resolver must not download")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        resolver = MavenRepositoryResolver(tmp_path, offline=True, client=client)
        assert resolver.resolve(_node(), [REMOTE]).resolved is False

    def test_incomplete_coordinate_raises(self, tmp_path):
        with pytest.raises(ArtifactResolutionError):
            MavenRepositoryResolver(tmp_path, offline=True).resolve(_node(version=None), [])

    def test_available_versions_from_metadata(self, tmp_path):
        artifact_dir = tmp_path / "org" / "slf4j" / "slf4j-api"
        artifact_dir.mkdir(parents=True)
        (artifact_dir / "maven-metadata-central.xml").write_text(
            "<metadata><versioning><versions>"
            "<version>1.7.24</version><version>1.7.25</version>"
            "</versions></versioning></metadata>"
        )
        (artifact_dir / "maven-metadata-local.xml").write_text(
            "<metadata><versioning><versions>"
            "<version>1.7.25</version><version>2.0.0</version>"
            "</versions></versioning></metadata>"
        )
        (artifact_dir / "maven-metadata-broken.xml").write_text("<metadata>")
        result = MavenRepositoryResolver(tmp_path, offline=True).resolve(_node(), [])
        assert result.available_versions == ["1.7.24", "1.7.25", "2.0.0"]

    def test_close_leaves_injected_client_open(self, tmp_path):
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        MavenRepositoryResolver(tmp_path, client=client).close()
        assert not client.is_closed

    def test_unwritable_local_repository_raises_resolution_error(self, tmp_path):
        local = tmp_path / "repo"
        local.write_text("not a directory")
        client = httpx.Client(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"jar"))
        )
        resolver = MavenRepositoryResolver(local, client=client)
        with pytest.raises(ArtifactResolutionError, match="cannot store"):
            resolver.resolve(_node(), [REMOTE])

    def test_storage_failure_is_collected_by_walker(self, tmp_path):
        local = tmp_path / "repo"
        local.write_text("not a directory")
        client = httpx.Client(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"jar"))
        )
        resolver = MavenRepositoryResolver(local, client=client)
        walker = DependencyWalker(RuleConfig(), resolver, project_name="app")
        result = walker.collect(
            [_node(scope="compile"), _node(artifact_id="slf4j-simple", scope="compile")],
            [REMOTE],
        )
        assert result.failed is True
        assert result.references == []
