"""apm 日志输出

终端上每条日志以级别符号开头（ℹ ⚠ ✗ 🔍），错误只带异常摘要，
DEBUG 级别下才输出完整堆栈。APM_LOG_JSON=1 时改为一行一个 JSON 对象。
所有日志都写 stderr，stdout 只留给命令结果（如 list --json）。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

import click

_MARKS = {
    logging.DEBUG: ("🔍", "bright_black"),
    logging.INFO: ("ℹ", "blue"),
    logging.WARNING: ("⚠", "yellow"),
    logging.ERROR: ("✗", "red"),
    logging.CRITICAL: ("✗", "red"),
}


class ConsoleFormatter(logging.Formatter):
    def __init__(self, *, color: bool = False, verbose: bool = False) -> None:
        super().__init__()
        self.color = color
        self.verbose = verbose

    def format(self, record: logging.LogRecord) -> str:
        mark, fg = _MARKS.get(record.levelno, ("·", "white"))
        if self.color:
            mark = click.style(mark, fg=fg)
        line = f"{mark} {record.getMessage()}"
        if record.exc_info and record.exc_info[1]:
            if self.verbose:
                line += "\n" + self.formatException(record.exc_info)
            else:
                line += f"\n  {record.exc_info[1]}"
        return line


class JSONFormatter(logging.Formatter):
    """一行一个 JSON: timestamp, level, logger, message[, exception]"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(
    level: str = "INFO", json_output: bool = False, color: bool | None = None,
) -> None:
    """配置根日志器到 stderr；重复调用会先清掉旧 handler

    color 为 None 时仅在 stderr 是终端时着色。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        if color is None:
            color = sys.stderr.isatty()
        handler.setFormatter(ConsoleFormatter(
            color=color, verbose=root.level <= logging.DEBUG,
        ))
    root.addHandler(handler)


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


def log_environment_info(logger: logging.Logger) -> None:
    """DEBUG 模式下输出运行身份信息，用于排查 sudo 权限问题"""
    uid = os.getuid() if hasattr(os, "getuid") else "N/A"
    gid = os.getgid() if hasattr(os, "getgid") else "N/A"
    logger.debug(
        "运行环境: uid=%s gid=%s SUDO_USER=%s SUDO_UID=%s SUDO_GID=%s cwd=%s",
        uid, gid,
        os.environ.get("SUDO_USER", "N/A"),
        os.environ.get("SUDO_UID", "N/A"),
        os.environ.get("SUDO_GID", "N/A"),
        os.getcwd(),
    )
