"""包说明符解析

install 接受三种写法:
  - lodash                              注册表包名
  - user/repo                           GitHub 简写
  - https://github.com/user/repo.git    完整仓库 URL（也支持 git@ 形式）

解析是纯函数，相同输入总得到相同结果。
包名会直接作为 aether_modules 下的目录名，只能是单层、非 '.'/'..' 的路径段。
"""

from __future__ import annotations

from dataclasses import dataclass

from aether.core.exceptions import ValidationError

_UNSAFE_CHARS = ("/", "\\", ":")


@dataclass(frozen=True)
class PackageSpecifier:
    """解析后的说明符"""

    raw: str
    name: str
    repository: str = ""  # 仓库引用形式时为原始输入，注册表形式为空

    @property
    def is_repository(self) -> bool:
        return bool(self.repository)


def is_url(reference: str) -> bool:
    return reference.startswith("http") or reference.startswith("git@")


def check_package_name(name: str) -> str:
    """校验包名可安全用作模块目录名，非法时抛 ValidationError"""
    if not name or not name.strip("."):
        raise ValidationError(f"非法包名: {name!r}")
    bad = [c for c in _UNSAFE_CHARS if c in name]
    if bad:
        raise ValidationError(f"非法包名: {name!r} (不能包含 {' '.join(bad)})")
    return name


def parse_specifier(specifier: str) -> PackageSpecifier:
    """把 install 参数分类为仓库引用或注册表包名"""
    spec = specifier.strip()
    if not spec:
        raise ValidationError("包名不能为空")

    if "/" not in spec:
        return PackageSpecifier(raw=spec, name=check_package_name(spec))

    if is_url(spec):
        trimmed = spec[:-4] if spec.endswith(".git") else spec
        # git@host:owner/repo 里的 ':' 也视为分隔符
        parts = [p for p in trimmed.replace(":", "/").split("/") if p]
        name = parts[-1] if parts else ""
    else:
        name = spec.split("/")[1]

    if not name:
        raise ValidationError(f"无法从仓库引用解析包名: {specifier}")
    return PackageSpecifier(raw=spec, name=check_package_name(name), repository=spec)
