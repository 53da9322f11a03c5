"""共享 fixture — 假 clone 提供者 + 临时注册表/项目

FakeCloner 用内存中的 {url: {相对路径: 内容}} 模拟远端仓库，
不访问网络、不依赖 git。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from aether.core.config import Config
from aether.core.exceptions import CloneError
from aether.core.fetcher import SourceFetcher, normalize_repo_url
from aether.core.installer import DependencyInstaller
from aether.core.models import ProjectManifest
from aether.core.project import PACKAGE_CONFIG_FILENAME, ProjectStore
from aether.core.registry import RegistryStore
from aether.services.container import ServiceContainer
from aether.utils.logger import reset_logging


class FakeCloner:
    """内存仓库 clone 提供者，记录每次 clone 的 url"""

    def __init__(self) -> None:
        self.repos: dict[str, dict[str, str]] = {}
        self.calls: list[str] = []

    def add_repo(
        self,
        reference: str,
        manifest: dict[str, Any] | None,
        files: dict[str, str] | None = None,
    ) -> str:
        url = normalize_repo_url(reference)
        tree = dict(files or {})
        if manifest is not None:
            tree[PACKAGE_CONFIG_FILENAME] = json.dumps(manifest)
        self.repos[url] = tree
        return url

    def clone(self, url: str, target: Path) -> None:
        self.calls.append(url)
        if url not in self.repos:
            raise CloneError(url, 128, "repository not found")
        for rel, content in self.repos[url].items():
            path = target / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    return Config(
        home_dir=str(tmp_path / "home"),
        temp_dir=str(tmp_path / "staging"),
        fix_ownership=False,
    )


@pytest.fixture()
def cloner() -> FakeCloner:
    return FakeCloner()


@pytest.fixture()
def registry(config: Config) -> RegistryStore:
    return RegistryStore(config.registry_path, config.temp_dir)


@pytest.fixture()
def fetcher(cloner: FakeCloner, config: Config) -> SourceFetcher:
    return SourceFetcher(cloner, config.temp_dir)


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def project(project_dir: Path) -> ProjectStore:
    store = ProjectStore(project_dir)
    store.write_config(ProjectManifest(name="demo", version="0.1.0"))
    return store


@pytest.fixture()
def installer(
    project: ProjectStore, registry: RegistryStore, fetcher: SourceFetcher,
) -> DependencyInstaller:
    return DependencyInstaller(project, registry, fetcher)


@pytest.fixture()
def container(config: Config, project_dir: Path, cloner: FakeCloner) -> ServiceContainer:
    return ServiceContainer(config=config, project_dir=project_dir, cloner=cloner)
