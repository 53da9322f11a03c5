"""依赖安装器

把项目声明的依赖集合变成完整的、记录了版本的、递归解析过的模块目录。

流程:
  install(specifier) 单包安装: 仓库引用直接拉取并登记到注册表；
                     注册表包名查表后拉取，查不到即失败（不回退）。
                     成功后写回项目清单，再递归安装子依赖。任何错误中止整条命令。
  install_all()      全量安装: 合并 dependencies + devDependencies（同名时后者覆盖），
                     逐个检查，版本字符串完全一致则跳过，否则只走注册表拉取。
                     单个失败只记录，不影响其余依赖。
  install_sub_dependencies()
                     读取已安装包自身的清单，对其依赖执行同样的检查/拉取，并继续递归。

模块目录是扁平的: 每个包名一个子目录，不同版本不能共存，后写入者生效。
同一次运行内已访问过的包名不会再次进入，依赖环可以终止。
"""

from __future__ import annotations

import logging
from pathlib import Path

from aether.core.exceptions import (
    AetherError,
    ManifestError,
    PackageNotFoundError,
    RegistryError,
    ValidationError,
)
from aether.core.fetcher import SourceFetcher
from aether.core.models import InstallReport, RegistryEntry
from aether.core.project import ProjectStore, installed_version, read_package_manifest
from aether.core.registry import RegistryStore
from aether.core.specifier import check_package_name, parse_specifier

logger = logging.getLogger(__name__)


class DependencyInstaller:
    """依赖安装器"""

    def __init__(
        self,
        project: ProjectStore,
        registry: RegistryStore,
        fetcher: SourceFetcher,
    ) -> None:
        self.project = project
        self.registry = registry
        self.fetcher = fetcher

    # ------------------------------------------------------------------
    # 单包安装
    # ------------------------------------------------------------------

    def install(self, specifier: str, *, dev: bool = False, save: bool = True) -> InstallReport:
        """安装单个包

        参数:
            specifier: 包名、owner/name 简写或完整仓库 URL
            dev: 写入 devDependencies 而非 dependencies
            save: 是否写回项目清单（全局安装时为 False）

        异常:
            PackageNotFoundError: 注册表中没有该包名
            FetchError: 拉取失败
            ConfigError / RegistryError: 清单或注册表读写失败
        """
        spec = parse_specifier(specifier)
        config = self.project.read_config() if save else None

        if spec.is_repository:
            logger.info("从仓库安装 %s: %s", spec.name, spec.repository)
            repository = spec.repository
        else:
            entry = self.registry.get_package(spec.name)
            if entry is None:
                raise PackageNotFoundError(spec.name)
            logger.info("从注册表安装 %s", spec.name)
            repository = entry.repository

        modules_dir = self.project.ensure_modules_dir()
        package_dir = self._package_dir(modules_dir, spec.name)
        manifest = self.fetcher.fetch(repository, package_dir)

        if spec.is_repository:
            # 直接从仓库装的包也登记一次，之后可以只用包名安装
            self.registry.add_package(RegistryEntry(
                name=spec.name,
                version=manifest.version,
                repository=repository,
                description=manifest.description,
                author=manifest.author,
            ))

        if config is not None:
            config.set_dependency(spec.name, manifest.version, dev=dev)
            self.project.write_config(config)

        logger.info("已安装 %s@%s", spec.name, manifest.version)
        report = InstallReport(installed=[f"{spec.name}@{manifest.version}"])
        self.install_sub_dependencies(
            package_dir, modules_dir, report=report, visited={spec.name},
        )
        return report

    # ------------------------------------------------------------------
    # 全量安装
    # ------------------------------------------------------------------

    def install_all(self) -> InstallReport:
        """按项目清单安装全部依赖，单个失败不中断"""
        config = self.project.read_config()
        candidates = config.all_dependencies()
        report = InstallReport()
        if not candidates:
            logger.info("没有需要安装的依赖")
            return report

        logger.info("准备安装 %d 个包...", len(candidates))
        modules_dir = self.project.ensure_modules_dir()
        visited: set[str] = set()
        for name, version in candidates.items():
            self._install_candidate(name, version, modules_dir, report, visited)

        if report.failed:
            logger.warning(
                "安装汇总: %s (%s)", report.summary(), ", ".join(report.failed),
            )
        else:
            logger.info("安装汇总: %s", report.summary())
        return report

    # ------------------------------------------------------------------
    # 子依赖递归
    # ------------------------------------------------------------------

    def install_sub_dependencies(
        self,
        package_dir: str | Path,
        modules_dir: str | Path,
        *,
        report: InstallReport | None = None,
        visited: set[str] | None = None,
    ) -> InstallReport:
        """安装 package_dir 中包清单声明的依赖到共享模块目录"""
        report = report if report is not None else InstallReport()
        visited = visited if visited is not None else set()
        package_dir = Path(package_dir)

        try:
            manifest = read_package_manifest(package_dir)
        except ManifestError as e:
            logger.error("读取子依赖清单失败 %s: %s", package_dir.name, e)
            report.failed[package_dir.name] = str(e)
            return report

        if not manifest.dependencies:
            return report

        logger.info("安装 %s 的子依赖...", manifest.name or package_dir.name)
        for name, version in manifest.dependencies.items():
            self._install_candidate(name, version, Path(modules_dir), report, visited)
        return report

    @staticmethod
    def _package_dir(modules_dir: Path, name: str) -> Path:
        """包目录必须是模块目录的直接子目录，否则抛 ValidationError"""
        check_package_name(name)
        package_dir = modules_dir / name
        if package_dir.resolve().parent != modules_dir.resolve():
            raise ValidationError(f"包目录不在 {modules_dir} 下: {name}")
        return package_dir

    def _install_candidate(
        self,
        name: str,
        version: str,
        modules_dir: Path,
        report: InstallReport,
        visited: set[str],
    ) -> None:
        """检查/拉取单个依赖并递归，失败记录到 report（注册表故障除外）"""
        if name in visited:
            logger.debug("本次运行已处理过 %s，不再进入", name)
            return
        visited.add(name)

        try:
            if "/" in name:
                raise ValidationError(f"批量安装不支持仓库引用: {name}")
            package_dir = self._package_dir(modules_dir, name)
            if installed_version(package_dir) == version:
                logger.info("%s@%s 已安装", name, version)
                report.skipped.append(name)
                return
            entry = self.registry.get_package(name)
            if entry is None:
                raise PackageNotFoundError(name)
            manifest = self.fetcher.fetch(entry.repository, package_dir)
        except RegistryError:
            raise
        except (AetherError, OSError) as e:
            logger.error("安装 %s 失败: %s", name, e)
            report.failed[name] = str(e)
            return

        logger.info("已安装 %s@%s", name, manifest.version)
        report.installed.append(f"{name}@{manifest.version}")
        self.install_sub_dependencies(
            package_dir, modules_dir, report=report, visited=visited,
        )
