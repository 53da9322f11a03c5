"""包源拉取器

职责:
- 把仓库引用（完整 URL 或 owner/name 简写）规范化为 clone URL
- clone 到唯一命名的暂存目录，读取包清单
- 清空目标目录并整体复制暂存树（重装总是替换，不做合并）
- 无论成功失败都删除暂存目录

已知限制: 清空目标后、复制完成前失败，目标目录可能为空。
"""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path

from aether.core.exceptions import AetherError, FetchError, ManifestError
from aether.core.models import PackageManifest
from aether.core.project import read_package_manifest
from aether.core.specifier import is_url
from aether.utils.fs import copy_tree, empty_dir, ensure_dir, remove_tree
from aether.utils.git import CloneProvider

logger = logging.getLogger(__name__)


def normalize_repo_url(repository: str, github_host: str = "https://github.com") -> str:
    """owner/name 简写展开为 <host>/owner/name.git，URL 原样返回"""
    repo = repository.strip()
    if not repo:
        raise FetchError("仓库地址为空")
    if is_url(repo):
        return repo
    return f"{github_host.rstrip('/')}/{repo}.git"


class SourceFetcher:
    """包源拉取器 — 每次调用恰好物化一次，失败不留暂存残留"""

    def __init__(
        self,
        cloner: CloneProvider,
        temp_dir: str | Path,
        *,
        github_host: str = "https://github.com",
    ) -> None:
        self.cloner = cloner
        self.temp_dir = Path(temp_dir)
        self.github_host = github_host

    def _staging_dir(self) -> Path:
        """时间戳 + 随机后缀，允许并发拉取共享同一临时根目录"""
        return self.temp_dir / f"{time.time_ns()}-{uuid.uuid4().hex[:8]}"

    def fetch(self, repository: str, destination: str | Path) -> PackageManifest:
        """拉取仓库到 destination，返回其包清单"""
        dest = Path(destination)
        staging = self._staging_dir()
        try:
            url = normalize_repo_url(repository, self.github_host)
            logger.info("克隆 %s 到临时目录...", repository)
            ensure_dir(staging)
            self.cloner.clone(url, staging)

            manifest = read_package_manifest(staging)
            missing = manifest.missing_fields()
            if missing:
                raise ManifestError(f"包清单缺少必填字段: {', '.join(missing)}")

            empty_dir(dest)
            copy_tree(staging, dest)
            return manifest
        except FetchError:
            raise
        except (AetherError, OSError) as e:
            logger.debug("拉取失败: %s", repository, exc_info=True)
            raise FetchError(f"从 {repository} 拉取失败: {e}") from e
        finally:
            self._cleanup(staging)

    @staticmethod
    def _cleanup(staging: Path) -> None:
        try:
            remove_tree(staging)
        except OSError as e:
            logger.warning("清理临时目录失败 %s: %s", staging, e)
