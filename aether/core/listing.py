"""列表查询 — 已安装依赖 / 注册表全部包"""

from __future__ import annotations

from aether.core.models import ProjectManifest, RegistryEntry


def installed_packages(config: ProjectManifest) -> list[dict[str, str]]:
    """项目声明的依赖，dependencies 在前，devDependencies 在后"""
    rows = [
        {"name": n, "version": v, "type": "dependency"}
        for n, v in config.dependencies.items()
    ]
    rows += [
        {"name": n, "version": v, "type": "devDependency"}
        for n, v in (config.dev_dependencies or {}).items()
    ]
    return rows


def group_registry(entries: list[RegistryEntry]) -> dict[str, list[RegistryEntry]]:
    """按包名分组（组内保持存储顺序，组名排序），组内最后一条视为最新"""
    groups: dict[str, list[RegistryEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.name, []).append(entry)
    return {name: groups[name] for name in sorted(groups)}
