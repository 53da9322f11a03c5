"""集中配置管理

提供 apm 的全局目录布局与行为开关。
支持从 YAML 文件加载 + 环境变量覆盖 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path

from aether.utils.file_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_HOME = str(Path.home() / ".aether")

# 环境变量 -> 配置字段
_ENV_OVERRIDES = {
    "APM_HOME": "home_dir",
    "APM_REGISTRY_FILE": "registry_file",
    "APM_TEMP_DIR": "temp_dir",
    "APM_GITHUB_HOST": "github_host",
}


@dataclass
class Config:
    """apm 全局配置

    registry_file / global_dir 为空时按 home_dir 推导。
    """

    # 目录
    home_dir: str = DEFAULT_HOME
    registry_file: str = ""
    temp_dir: str = field(
        default_factory=lambda: str(Path(tempfile.gettempdir()) / "aether-temp"),
    )
    global_dir: str = ""

    # 拉取
    github_host: str = "https://github.com"
    shallow_clone: bool = False
    clone_timeout: int = 600

    # sudo 下修正新建目录属主
    fix_ownership: bool = True

    extra: dict = field(default_factory=dict)

    @property
    def registry_path(self) -> Path:
        if self.registry_file:
            return Path(self.registry_file)
        return Path(self.home_dir) / "registry" / "packages.json"

    @property
    def global_path(self) -> Path:
        if self.global_dir:
            return Path(self.global_dir)
        return Path(self.home_dir) / "global"

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def apply_env(self, environ: dict[str, str] | None = None) -> Config:
        """用 APM_* 环境变量覆盖对应字段"""
        env = os.environ if environ is None else environ
        for var, attr in _ENV_OVERRIDES.items():
            value = env.get(var)
            if value:
                setattr(self, attr, value)
        return self

    def to_dict(self) -> dict:
        return asdict(self)


_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值 + 环境变量覆盖）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config().apply_env()
    return _current


def set_config(cfg: Config | None) -> None:
    """替换全局配置（传 None 则下次 get_config 重新构造）"""
    global _current  # noqa: PLW0603
    _current = cfg


def init_config(path: str | Path | None = None) -> Config:
    """从文件初始化全局配置，默认读取 <home>/config.yml"""
    global _current  # noqa: PLW0603
    if path is None:
        home = os.environ.get("APM_HOME") or DEFAULT_HOME
        path = Path(home) / "config.yml"
    _current = Config.from_file(path).apply_env()
    logger.debug("配置已加载: %s", path)
    return _current
