"""包注册表 — 机器级共享的 JSON 文件

文件格式:
    {"packages": [{"name": ..., "version": ..., "repository": ...}, ...]}

每个包名至多一条记录，重新发布覆盖旧记录（保持原位置）。
每次读写都重新加载文件，首次访问时惰性初始化目录与文件。
任何读写/解析失败都抛 RegistryError，绝不退化为空表继续执行。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from aether.core.exceptions import RegistryError
from aether.core.models import RegistryEntry
from aether.utils.file_io import load_json, save_json
from aether.utils.fs import ensure_dir

logger = logging.getLogger(__name__)


class RegistryStore:
    """包注册表"""

    def __init__(
        self,
        registry_file: str | Path = "",
        temp_dir: str | Path = "",
        *,
        fix_ownership: bool = False,
    ) -> None:
        if not registry_file or not temp_dir:
            from aether.core.config import get_config
            cfg = get_config()
            registry_file = registry_file or cfg.registry_path
            temp_dir = temp_dir or cfg.temp_dir
        self.registry_file = Path(registry_file)
        self.temp_dir = Path(temp_dir)
        self.fix_ownership = fix_ownership

    def init(self) -> None:
        """确保注册表目录、文件与临时目录存在（可重复调用）"""
        try:
            ensure_dir(self.registry_file.parent, fix_owner=self.fix_ownership)
            if not self.registry_file.exists():
                save_json(self.registry_file, {"packages": []})
                logger.debug("已创建注册表: %s", self.registry_file)
            ensure_dir(self.temp_dir)
        except OSError as e:
            raise RegistryError(f"初始化注册表失败: {e}") from e

    def _load(self) -> dict[str, Any]:
        self.init()
        try:
            data = load_json(self.registry_file)
        except (ValueError, OSError) as e:
            raise RegistryError(f"读取注册表失败 {self.registry_file}: {e}") from e
        if not isinstance(data, dict):
            raise RegistryError(f"注册表格式错误: {self.registry_file} 顶层必须是对象")
        packages = data.setdefault("packages", [])
        if not isinstance(packages, list) or not all(isinstance(p, dict) for p in packages):
            raise RegistryError(f"注册表格式错误: {self.registry_file} packages 必须是对象列表")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        try:
            save_json(self.registry_file, data)
        except OSError as e:
            raise RegistryError(f"写入注册表失败 {self.registry_file}: {e}") from e

    def get_packages(self) -> list[RegistryEntry]:
        """返回全部条目（保持存储顺序）"""
        return [RegistryEntry.from_dict(p) for p in self._load()["packages"]]

    def get_package(self, name: str) -> RegistryEntry | None:
        """按名称精确查找，重复时返回第一条"""
        for entry in self.get_packages():
            if entry.name == name:
                return entry
        return None

    def add_package(self, entry: RegistryEntry) -> None:
        """新增或原位替换同名条目"""
        data = self._load()
        packages: list[dict[str, Any]] = data["packages"]
        for i, p in enumerate(packages):
            if p.get("name") == entry.name:
                packages[i] = entry.to_dict()
                logger.debug("注册表更新: %s@%s", entry.name, entry.version)
                break
        else:
            packages.append(entry.to_dict())
            logger.debug("注册表新增: %s@%s", entry.name, entry.version)
        self._save(data)

    def remove_package(self, name: str) -> None:
        """删除所有同名条目，不存在时不做任何事"""
        data = self._load()
        kept = [p for p in data["packages"] if p.get("name") != name]
        if len(kept) == len(data["packages"]):
            return
        data["packages"] = kept
        self._save(data)
        logger.debug("注册表移除: %s", name)
