"""项目配置存储

职责:
- 读写项目清单 aether.json 与可发布包清单 package.aether.json
- 定义模块目录布局 aether_modules/<name>/
- 判断包是否已安装（目录存在且含可读包清单）
- 初始化新项目
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from aether.core.exceptions import ConfigError, ManifestError, ManifestNotFoundError, ValidationError
from aether.core.models import PackageManifest, ProjectManifest
from aether.utils.file_io import load_json, save_json
from aether.utils.fs import ensure_dir

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "aether.json"
PACKAGE_CONFIG_FILENAME = "package.aether.json"
MODULES_DIR = "aether_modules"

_NAME_RE = re.compile(r"^(?!\.+$)[a-z0-9\-_.]+$")
_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def read_package_manifest(package_dir: str | Path) -> PackageManifest:
    """读取目录下的 package.aether.json

    异常:
        ManifestNotFoundError: 清单文件不存在
        ManifestError: 清单存在但无法解析或结构不合法
    """
    path = Path(package_dir) / PACKAGE_CONFIG_FILENAME
    if not path.is_file():
        raise ManifestNotFoundError(f"{package_dir} 中没有 {PACKAGE_CONFIG_FILENAME}")
    try:
        data = load_json(path)
    except (ValueError, OSError) as e:
        raise ManifestError(f"读取包清单失败 {path}: {e}") from e
    return PackageManifest.from_dict(data)


def write_package_manifest(package_dir: str | Path, manifest: PackageManifest) -> None:
    save_json(Path(package_dir) / PACKAGE_CONFIG_FILENAME, manifest.to_dict())


class ProjectStore:
    """单个项目根目录下的清单与模块目录"""

    def __init__(self, root: str | Path, *, fix_ownership: bool = False) -> None:
        self.root = Path(root)
        self.fix_ownership = fix_ownership

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def modules_dir(self) -> Path:
        return self.root / MODULES_DIR

    def is_project(self) -> bool:
        return self.config_path.is_file()

    # ---- 项目清单 ----

    def read_config(self) -> ProjectManifest:
        """读取项目清单，缺失或格式错误抛 ConfigError"""
        if not self.is_project():
            raise ConfigError(
                f"{self.root} 中没有 {CONFIG_FILENAME}，请先执行 'apm init'",
            )
        try:
            return ProjectManifest.from_dict(load_json(self.config_path))
        except (ValueError, OSError, ManifestError) as e:
            raise ConfigError(f"读取 {CONFIG_FILENAME} 失败: {e}") from e

    def write_config(self, config: ProjectManifest) -> None:
        try:
            save_json(self.config_path, config.to_dict())
        except OSError as e:
            raise ConfigError(f"写入 {CONFIG_FILENAME} 失败: {e}") from e

    # ---- 包清单 ----

    def read_package_manifest(self, package_dir: str | Path | None = None) -> PackageManifest:
        return read_package_manifest(self.root if package_dir is None else package_dir)

    def write_package_manifest(
        self, manifest: PackageManifest, package_dir: str | Path | None = None,
    ) -> None:
        write_package_manifest(self.root if package_dir is None else package_dir, manifest)

    def has_package_manifest(self) -> bool:
        return (self.root / PACKAGE_CONFIG_FILENAME).is_file()

    # ---- 模块目录 ----

    def ensure_modules_dir(self) -> Path:
        try:
            return ensure_dir(self.modules_dir, fix_owner=self.fix_ownership)
        except OSError as e:
            raise ConfigError(f"创建 {MODULES_DIR} 目录失败: {e}") from e

    def package_path(self, name: str) -> Path:
        return self.modules_dir / name

    def installed_version(self, name: str) -> str | None:
        return installed_version(self.package_path(name))

    def is_installed(self, name: str) -> bool:
        return self.installed_version(name) is not None

    # ---- 初始化 ----

    def init_project(
        self,
        name: str,
        version: str = "0.1.0",
        description: str = "",
        *,
        author: str = "",
        repository: str = "",
    ) -> ProjectManifest:
        """创建 aether.json 与模块目录；空目录时额外生成基础骨架"""
        errors = []
        if not _NAME_RE.match(name):
            errors.append("包名只能包含小写字母、数字、连字符、下划线和点，且不能全为点")
        if not _VERSION_RE.match(version):
            errors.append("版本号格式必须为 x.y.z")
        if errors:
            raise ValidationError("项目信息校验失败", details=errors)

        config = ProjectManifest(name=name, version=version, description=description)
        if author:
            config.extra["author"] = author
        if repository:
            config.extra["repository"] = repository
        self.write_config(config)
        self.ensure_modules_dir()

        entries = {p.name for p in self.root.iterdir()}
        if entries <= {CONFIG_FILENAME, MODULES_DIR, ".git"}:
            self._scaffold(config, author=author, repository=repository)

        logger.info("已初始化项目: %s", name)
        return config

    def _scaffold(self, config: ProjectManifest, *, author: str, repository: str) -> None:
        src = self.root / "src"
        src.mkdir(exist_ok=True)
        (src / "index.js").write_text("// Aether package entry point\n", encoding="utf-8")
        (self.root / ".gitignore").write_text(
            f"{MODULES_DIR}/\nnode_modules/\n.DS_Store\n", encoding="utf-8",
        )
        (self.root / "README.md").write_text(
            f"# {config.name}\n\n{config.description}\n", encoding="utf-8",
        )
        self.write_package_manifest(PackageManifest(
            name=config.name,
            version=config.version,
            description=config.description,
            author=author,
            repository=repository,
            main="src/index.js",
        ))


def default_project_name(root: Path) -> str:
    """以目录名作为默认包名，非法字符替换为连字符"""
    name = re.sub(r"[^a-z0-9\-_.]", "-", root.resolve().name.lower())
    return name or "aether-package"


def installed_version(package_dir: Path) -> str | None:
    """返回已安装包的版本；目录不存在或清单不可读时返回 None"""
    if not package_dir.is_dir():
        return None
    try:
        return read_package_manifest(package_dir).version
    except ManifestError as e:
        logger.debug("已安装包清单不可读 %s: %s", package_dir, e)
        return None


def dump_manifest(manifest: ProjectManifest | PackageManifest) -> str:
    """格式化清单为 JSON 文本（用于 dry-run / 调试输出）"""
    return json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False)
