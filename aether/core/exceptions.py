"""统一异常体系

所有业务异常继承 AetherError，替代散落的 ValueError / RuntimeError。
CLI 层据此输出友好提示并以非零码退出，批量安装据此逐个记录失败。
"""

from __future__ import annotations


class AetherError(Exception):
    """包管理器基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(AetherError):
    """项目清单缺失、不可读或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(AetherError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class RegistryError(AetherError):
    """注册表文件读写或解析失败（对当前操作是致命的）"""

    code = "REGISTRY_ERROR"


class PackageNotFoundError(AetherError):
    """注册表中不存在该包名"""

    code = "PACKAGE_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"注册表中未找到包: {name}")
        self.name = name


class ManifestError(AetherError):
    """包清单存在但格式错误或缺少必填字段"""

    code = "MALFORMED_MANIFEST"


class ManifestNotFoundError(ManifestError):
    """包清单文件不存在"""

    code = "MANIFEST_NOT_FOUND"


class FetchError(AetherError):
    """从仓库拉取包失败（clone / 清单 / 复制任一步骤）"""

    code = "FETCH_FAILED"


class CloneError(AetherError):
    """git clone 失败：仓库不可达或不存在"""

    code = "CLONE_FAILED"

    def __init__(self, url: str, returncode: int, stderr: str = "") -> None:
        super().__init__(f"git clone 失败 (rc={returncode}): {url} {stderr}".rstrip())
        self.url = url
        self.returncode = returncode
        self.stderr = stderr


class ConflictError(AetherError):
    """发布目标与注册表中已有的 name+version 完全相同"""

    code = "ALREADY_EXISTS"
