"""Publisher 测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from aether.core.exceptions import ConflictError, ManifestNotFoundError, ValidationError
from aether.core.models import PackageManifest, RegistryEntry
from aether.core.project import ProjectStore
from aether.core.publisher import Publisher, list_files


@pytest.fixture()
def publisher(project: ProjectStore, registry) -> Publisher:
    return Publisher(project, registry)


class TestManifest:
    def test_create_from_project_config(self, publisher: Publisher, project: ProjectStore) -> None:
        config = project.read_config()
        config.dependencies = {"a": "1.0.0"}
        config.description = "demo pkg"
        project.write_config(config)

        manifest = publisher.create_package_manifest("me", "u/demo")
        assert project.read_package_manifest() == manifest
        assert manifest.name == "demo"
        assert manifest.main == "src/index.js"
        assert manifest.dependencies == {"a": "1.0.0"}

    def test_load_missing(self, publisher: Publisher) -> None:
        with pytest.raises(ManifestNotFoundError):
            publisher.load_manifest()

    def test_load_requires_name_and_version(
        self, publisher: Publisher, project: ProjectStore,
    ) -> None:
        project.write_package_manifest(PackageManifest(name="demo"))
        with pytest.raises(ValidationError) as exc_info:
            publisher.load_manifest()
        assert exc_info.value.details == ["version"]

    @pytest.mark.parametrize("name", ["..", "a/b"])
    def test_load_rejects_unsafe_name(
        self, publisher: Publisher, project: ProjectStore, name: str,
    ) -> None:
        project.write_package_manifest(PackageManifest(name=name, version="1.0.0"))
        with pytest.raises(ValidationError):
            publisher.load_manifest()


class TestPublish:
    def test_publish_adds_entry(self, publisher: Publisher, registry) -> None:
        manifest = PackageManifest(name="demo", version="1.0.0", repository="u/demo", author="me")
        entry = publisher.publish(manifest)
        assert registry.get_package("demo") == entry
        assert entry.author == "me"

    def test_missing_repository_stored_as_empty(self, publisher: Publisher, registry) -> None:
        publisher.publish(PackageManifest(name="demo", version="1.0.0"))
        assert registry.get_package("demo").repository == ""

    def test_same_version_conflicts(self, publisher: Publisher, registry) -> None:
        registry.add_package(RegistryEntry(name="demo", version="1.0.0", repository="u/old"))
        manifest = PackageManifest(name="demo", version="1.0.0", repository="u/new")
        with pytest.raises(ConflictError):
            publisher.publish(manifest)
        assert registry.get_package("demo").repository == "u/old"

        publisher.publish(manifest, overwrite=True)
        assert registry.get_package("demo").repository == "u/new"
        assert len(registry.get_packages()) == 1

    def test_new_version_replaces(self, publisher: Publisher, registry) -> None:
        registry.add_package(RegistryEntry(name="demo", version="1.0.0", repository="u/demo"))
        publisher.publish(PackageManifest(name="demo", version="1.1.0", repository="u/demo"))
        assert [e.version for e in registry.get_packages()] == ["1.1.0"]

    def test_set_repository_persists(self, publisher: Publisher, project: ProjectStore) -> None:
        manifest = PackageManifest(name="demo", version="1.0.0")
        project.write_package_manifest(manifest)
        publisher.set_repository(manifest, "u/demo")
        assert project.read_package_manifest().repository == "u/demo"


def test_list_files_skips_ignored(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "index.js").write_text("x")
    (tmp_path / "README.md").write_text("x")
    for ignored in ("aether_modules/a", ".git", "node_modules/x", "src/node_modules"):
        (tmp_path / ignored).mkdir(parents=True)
        (tmp_path / ignored / "f").write_text("x")

    assert list_files(tmp_path) == ["README.md", "src/index.js"]


def test_publish_rejects_dot_name(publisher: Publisher, registry) -> None:
    with pytest.raises(ValidationError):
        publisher.publish(PackageManifest(name=".", version="1.0.0", repository="u/x"))
    assert registry.get_packages() == []
