"""Git clone 提供者

把仓库完整检出到指定目录。失败时抛 CloneError（携带返回码与 stderr），
与清单缺失/格式错误可区分。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from aether.core.exceptions import CloneError
from aether.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

# 需要凭据时直接失败，不在终端上等待输入
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


class CloneProvider(Protocol):
    """clone 提供者协议：把 url 对应的仓库检出到 target"""

    def clone(self, url: str, target: Path) -> None:
        ...


class GitCloner:
    """基于 git 命令行的 clone 提供者"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        *,
        shallow: bool = False,
        timeout: int | None = None,
    ) -> None:
        self._executor = executor
        self.shallow = shallow
        self.timeout = timeout

    @property
    def executor(self) -> CommandExecutor:
        return self._executor if self._executor is not None else get_executor()

    def clone(self, url: str, target: Path) -> None:
        cmd = ["git", "clone"]
        if self.shallow:
            cmd += ["--depth", "1"]
        cmd += ["--", url, str(target)]

        logger.debug("git clone %s -> %s", url, target)
        r = self.executor.execute(cmd, env=GIT_ENV, timeout=self.timeout)
        if not r.success:
            raise CloneError(url, r.returncode, r.error_tail())
