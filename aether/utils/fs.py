"""目录操作工具 — 清空 / 递归复制 / 删除 / 创建

ensure_dir 附带一个可选的属主修正钩子：以 sudo 运行时把新建目录
交还给真实用户，避免后续普通用户无法写入。
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def fix_ownership(path: Path) -> None:
    """sudo 场景下把目录属主改回 SUDO_UID/SUDO_GID，失败只记 DEBUG"""
    getuid = getattr(os, "getuid", None)
    if getuid is None:
        return
    try:
        sudo_uid = int(os.environ.get("SUDO_UID", "-1") or -1)
        sudo_gid = int(os.environ.get("SUDO_GID", "-1") or -1)
    except ValueError as e:
        logger.debug("SUDO_UID/SUDO_GID 不是数字，跳过属主修正: %s", e)
        return
    if sudo_uid == -1 or getuid() == sudo_uid:
        return
    try:
        os.chown(path, sudo_uid, sudo_gid)
    except OSError as e:
        logger.debug("无法修正目录属主 %s: %s", path, e)


def ensure_dir(path: Path, *, fix_owner: bool = False) -> Path:
    """创建目录（含父目录），可选执行属主修正"""
    path.mkdir(parents=True, exist_ok=True)
    if fix_owner:
        fix_ownership(path)
    return path


def empty_dir(path: Path) -> None:
    """清空目录内容但保留目录本身；目录不存在则创建"""
    if not path.exists():
        path.mkdir(parents=True)
        return
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def copy_tree(src: Path, dest: Path) -> None:
    """递归复制整个目录树到 dest（dest 可已存在）"""
    shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)


def remove_tree(path: Path) -> None:
    """删除目录树，不存在时视为成功"""
    if path.exists():
        shutil.rmtree(path)
