"""子进程执行 — apm 调用外部命令（目前只有 git）的唯一出口

CommandExecutor 协议让 clone 提供者与 subprocess 解耦，测试注入记录型实现即可。
传入的 env 是在当前环境之上的增量覆盖，不会丢掉 PATH 等变量。
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)

# 约定俗成的返回码: 命令不存在 / 超时
RC_NOT_FOUND = 127
RC_TIMEOUT = 124


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str
    args: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def error_tail(self, limit: int = 300) -> str:
        """取 stderr 末尾（git 的有效错误信息通常在最后几行）"""
        text = self.stderr.strip()
        return text if len(text) <= limit else "..." + text[-limit:]


class CommandExecutor(Protocol):
    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        ...


class LocalExecutor:
    """在本机直接运行命令；命令缺失与超时转成失败结果而不是异常"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        logger.debug("$ %s", shlex.join(cmd))
        full_env = {**os.environ, **env} if env else None
        try:
            r = subprocess.run(
                cmd, capture_output=True, text=True,
                cwd=cwd, env=full_env, check=False, timeout=timeout,
            )
        except FileNotFoundError as e:
            return CommandResult(RC_NOT_FOUND, "", str(e), list(cmd))
        except subprocess.TimeoutExpired:
            return CommandResult(RC_TIMEOUT, "", f"{cmd[0]} 超时 ({timeout}s)", list(cmd))
        if r.returncode != 0:
            logger.debug("%s 退出码 %d", cmd[0], r.returncode)
        return CommandResult(r.returncode, r.stdout, r.stderr, list(cmd))


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换进程级默认执行器（测试用）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor
