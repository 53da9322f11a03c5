"""服务容器 — 统一组装注册表、拉取器、项目存储与安装器

依赖关系图（→ 表示依赖）:
  installer → project, registry, fetcher
  publisher → project, registry
  fetcher   → cloner

注册表显式传给安装器，不使用进程级单例；同一容器内的实例共享。

用法:
    container = ServiceContainer(project_dir="/path/to/project")
    container.installer.install("lodash")
    container.global_installer.install("user/repo", save=False)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aether.core.config import Config
    from aether.core.fetcher import SourceFetcher
    from aether.core.installer import DependencyInstaller
    from aether.core.project import ProjectStore
    from aether.core.publisher import Publisher
    from aether.core.registry import RegistryStore
    from aether.utils.git import CloneProvider

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        config: Config | None = None,
        project_dir: str | Path = ".",
        cloner: CloneProvider | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from aether.core.config import get_config
            config = get_config()
        self._config = config
        self.project_dir = Path(project_dir)
        if cloner is not None:
            self._instances["cloner"] = cloner

    @property
    def config(self) -> Config:
        return self._config

    @property
    def registry(self) -> RegistryStore:
        if "registry" not in self._instances:
            from aether.core.registry import RegistryStore
            self._instances["registry"] = RegistryStore(
                registry_file=self._config.registry_path,
                temp_dir=self._config.temp_dir,
                fix_ownership=self._config.fix_ownership,
            )
        return self._instances["registry"]  # type: ignore[return-value]

    @property
    def cloner(self) -> CloneProvider:
        if "cloner" not in self._instances:
            from aether.utils.git import GitCloner
            self._instances["cloner"] = GitCloner(
                shallow=self._config.shallow_clone,
                timeout=self._config.clone_timeout,
            )
        return self._instances["cloner"]  # type: ignore[return-value]

    @property
    def fetcher(self) -> SourceFetcher:
        if "fetcher" not in self._instances:
            from aether.core.fetcher import SourceFetcher
            self._instances["fetcher"] = SourceFetcher(
                self.cloner,
                self._config.temp_dir,
                github_host=self._config.github_host,
            )
        return self._instances["fetcher"]  # type: ignore[return-value]

    @property
    def project(self) -> ProjectStore:
        if "project" not in self._instances:
            from aether.core.project import ProjectStore
            self._instances["project"] = ProjectStore(
                self.project_dir, fix_ownership=self._config.fix_ownership,
            )
        return self._instances["project"]  # type: ignore[return-value]

    @property
    def global_project(self) -> ProjectStore:
        """全局安装根目录（<home>/global），只用其模块目录"""
        if "global_project" not in self._instances:
            from aether.core.project import ProjectStore
            self._instances["global_project"] = ProjectStore(
                self._config.global_path, fix_ownership=self._config.fix_ownership,
            )
        return self._instances["global_project"]  # type: ignore[return-value]

    @property
    def installer(self) -> DependencyInstaller:
        if "installer" not in self._instances:
            from aether.core.installer import DependencyInstaller
            self._instances["installer"] = DependencyInstaller(
                self.project, self.registry, self.fetcher,
            )
        return self._instances["installer"]  # type: ignore[return-value]

    @property
    def global_installer(self) -> DependencyInstaller:
        if "global_installer" not in self._instances:
            from aether.core.installer import DependencyInstaller
            self._instances["global_installer"] = DependencyInstaller(
                self.global_project, self.registry, self.fetcher,
            )
        return self._instances["global_installer"]  # type: ignore[return-value]

    @property
    def publisher(self) -> Publisher:
        if "publisher" not in self._instances:
            from aether.core.publisher import Publisher
            self._instances["publisher"] = Publisher(self.project, self.registry)
        return self._instances["publisher"]  # type: ignore[return-value]
