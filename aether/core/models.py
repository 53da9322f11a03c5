"""核心数据模型

项目清单、包清单、注册表条目与安装报告集中定义。
磁盘上的 JSON 键名保持 camelCase（devDependencies），Python 侧使用 snake_case。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from aether.core.exceptions import ManifestError


def _str_map(value: Any, field_name: str) -> dict[str, str]:
    """校验并复制 name -> version 映射"""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(f"{field_name} 必须是对象 (实际类型: {type(value).__name__})")
    bad = [str(k) for k, v in value.items() if not isinstance(v, str)]
    if bad:
        raise ManifestError(f"{field_name} 中的版本必须是字符串: {', '.join(bad)}")
    return {str(k): v for k, v in value.items()}


# =========================================================================
# 项目清单 aether.json
# =========================================================================


@dataclass
class ProjectManifest:
    """项目清单：名称、版本与声明的依赖"""

    name: str = ""
    version: str = "0.1.0"
    description: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)  # 未识别字段原样保留

    _KNOWN = ("name", "version", "description", "dependencies", "devDependencies")

    @classmethod
    def from_dict(cls, data: Any) -> ProjectManifest:
        if not isinstance(data, dict):
            raise ManifestError("项目清单顶层必须是 JSON 对象")
        dev = data.get("devDependencies")
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or "0.1.0"),
            description=str(data.get("description") or ""),
            dependencies=_str_map(data.get("dependencies"), "dependencies"),
            dev_dependencies=None if dev is None else _str_map(dev, "devDependencies"),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.description:
            out["description"] = self.description
        out.update(self.extra)
        out["dependencies"] = dict(self.dependencies)
        if self.dev_dependencies is not None:
            out["devDependencies"] = dict(self.dev_dependencies)
        return out

    def set_dependency(self, name: str, version: str, *, dev: bool = False) -> None:
        """新增或覆盖一条依赖"""
        if dev:
            if self.dev_dependencies is None:
                self.dev_dependencies = {}
            self.dev_dependencies[name] = version
        else:
            self.dependencies[name] = version

    def all_dependencies(self) -> dict[str, str]:
        """合并 dependencies 与 devDependencies，同名时 devDependencies 覆盖"""
        merged = dict(self.dependencies)
        merged.update(self.dev_dependencies or {})
        return merged


# =========================================================================
# 包清单 package.aether.json
# =========================================================================


@dataclass
class PackageManifest:
    """可发布包的清单，dependencies 驱动递归安装"""

    name: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    repository: str = ""
    main: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    _KNOWN = ("name", "version", "description", "author", "repository", "main", "dependencies")

    @classmethod
    def from_dict(cls, data: Any) -> PackageManifest:
        if not isinstance(data, dict):
            raise ManifestError("包清单顶层必须是 JSON 对象")
        return cls(
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            description=str(data.get("description") or ""),
            author=str(data.get("author") or ""),
            repository=str(data.get("repository") or ""),
            main=str(data.get("main") or ""),
            dependencies=_str_map(data.get("dependencies"), "dependencies"),
            extra={k: v for k, v in data.items() if k not in cls._KNOWN},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "version": self.version}
        for key in ("description", "author", "repository", "main"):
            value = getattr(self, key)
            if value:
                out[key] = value
        out.update(self.extra)
        out["dependencies"] = dict(self.dependencies)
        return out

    def missing_fields(self) -> list[str]:
        """返回缺失的必填字段（name / version）"""
        return [k for k in ("name", "version") if not getattr(self, k)]


# =========================================================================
# 注册表条目
# =========================================================================


@dataclass
class RegistryEntry:
    """注册表中的一条发布记录，repository 为拉取来源"""

    name: str
    version: str
    repository: str = ""
    description: str = ""
    author: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegistryEntry:
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            repository=str(data.get("repository") or ""),
            description=str(data.get("description") or ""),
            author=str(data.get("author") or ""),
        )

    @classmethod
    def from_manifest(cls, manifest: PackageManifest, repository: str) -> RegistryEntry:
        return cls(
            name=manifest.name,
            version=manifest.version,
            repository=repository,
            description=manifest.description,
            author=manifest.author,
        )

    def to_dict(self) -> dict[str, str]:
        out = {"name": self.name, "version": self.version}
        if self.description:
            out["description"] = self.description
        out["repository"] = self.repository
        if self.author:
            out["author"] = self.author
        return out


# =========================================================================
# 安装报告
# =========================================================================


@dataclass
class InstallReport:
    """一次安装运行的结果汇总"""

    installed: list[str] = field(default_factory=list)  # name@version
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)  # name -> 错误信息

    @property
    def success(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return (
            f"安装 {len(self.installed)} 个, 跳过 {len(self.skipped)} 个, "
            f"失败 {len(self.failed)} 个"
        )
