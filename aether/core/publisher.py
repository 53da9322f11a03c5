"""包发布

发布只是把 package.aether.json 的元信息登记到注册表，
真正的内容由 repository 指向的仓库提供，安装时再 clone。
交互确认（创建清单、补填仓库地址、覆盖同版本）由 CLI 层负责。
"""

from __future__ import annotations

import logging
from pathlib import Path

from aether.core.exceptions import ConflictError, ValidationError
from aether.core.models import PackageManifest, RegistryEntry
from aether.core.project import MODULES_DIR, ProjectStore
from aether.core.registry import RegistryStore
from aether.core.specifier import check_package_name

logger = logging.getLogger(__name__)

DEFAULT_IGNORES = ("node_modules", MODULES_DIR, ".git")


class Publisher:
    """把当前项目发布到注册表"""

    def __init__(self, project: ProjectStore, registry: RegistryStore) -> None:
        self.project = project
        self.registry = registry

    def create_package_manifest(
        self, author: str = "", repository: str = "", main: str = "src/index.js",
    ) -> PackageManifest:
        """根据 aether.json 生成 package.aether.json"""
        config = self.project.read_config()
        manifest = PackageManifest(
            name=config.name,
            version=config.version,
            description=config.description,
            author=author,
            repository=repository,
            main=main,
            dependencies=dict(config.dependencies),
        )
        self.project.write_package_manifest(manifest)
        logger.info("已创建 package.aether.json")
        return manifest

    def load_manifest(self) -> PackageManifest:
        """读取并校验待发布的包清单（name / version 必填）"""
        manifest = self.project.read_package_manifest()
        missing = manifest.missing_fields()
        if missing:
            raise ValidationError(
                f"包清单缺少必填字段: {', '.join(missing)}", details=missing,
            )
        check_package_name(manifest.name)
        return manifest

    def set_repository(self, manifest: PackageManifest, repository: str) -> None:
        manifest.repository = repository
        self.project.write_package_manifest(manifest)

    def check_existing(
        self, manifest: PackageManifest, *, overwrite: bool = False,
    ) -> RegistryEntry | None:
        """返回注册表中的同名条目；同版本且未允许覆盖时抛 ConflictError"""
        existing = self.registry.get_package(manifest.name)
        if existing and existing.version == manifest.version and not overwrite:
            raise ConflictError(f"{manifest.name}@{manifest.version} 已存在于注册表")
        return existing

    def publish(self, manifest: PackageManifest, *, overwrite: bool = False) -> RegistryEntry:
        """登记到注册表"""
        check_package_name(manifest.name)
        existing = self.check_existing(manifest, overwrite=overwrite)
        if existing and existing.version != manifest.version:
            logger.info(
                "更新 %s: %s -> %s", manifest.name, existing.version, manifest.version,
            )
        entry = RegistryEntry.from_manifest(manifest, manifest.repository or "")
        self.registry.add_package(entry)
        logger.info("已发布 %s@%s", entry.name, entry.version)
        return entry


def list_files(root: str | Path, ignore: tuple[str, ...] = DEFAULT_IGNORES) -> list[str]:
    """递归列出待发布文件的相对路径，跳过任意层级的忽略项"""
    root = Path(root)
    result: list[str] = []

    def _walk(d: Path) -> None:
        for child in sorted(d.iterdir()):
            if child.name in ignore:
                continue
            if child.is_dir():
                _walk(child)
            else:
                result.append(child.relative_to(root).as_posix())

    _walk(root)
    return result
