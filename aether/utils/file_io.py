"""JSON / YAML 文件统一读写工具

清单、注册表都是 JSON，工具自身配置是 YAML。
统一 encoding="utf-8"、两空格缩进、目录自动创建、原子写入。
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# 配置/清单文件最大大小限制 (10MB)
MAX_FILE_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 rename

    异常:
        OSError: 文件写入或移动失败
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def _check_size(p: Path) -> None:
    size = p.stat().st_size
    if size > MAX_FILE_SIZE:
        raise ValueError(f"文件过大: {p} ({size} 字节), 超过限制 {MAX_FILE_SIZE} 字节")


def load_json(path: str | Path) -> Any:
    """读取 JSON 文件

    与 load_yaml 不同，文件不存在时直接抛 FileNotFoundError，
    由调用方区分"缺失"与"格式错误"。

    异常:
        FileNotFoundError: 文件不存在
        json.JSONDecodeError: JSON 格式错误（ValueError 子类）
        ValueError: 文件过大
        OSError: 其他 IO 错误
    """
    p = Path(path)
    _check_size(p)
    with open(p, encoding="utf-8") as f:
        return json.load(f)


def save_json(path: str | Path, data: Any) -> None:
    """原子写入 JSON 文件（两空格缩进，保留键顺序）"""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    try:
        atomic_write(Path(path), content)
    except OSError as e:
        logger.error("写入文件失败: %s, 错误: %s", path, e)
        raise


def load_yaml(path: str | Path) -> dict[str, Any]:
    """安全读取 YAML 配置文件

    返回:
        dict: 文件不存在、为空或顶层不是字典时返回空字典

    异常:
        yaml.YAMLError: YAML 格式错误
        OSError: IO 错误
    """
    p = Path(path)
    if not p.exists():
        return {}
    _check_size(p)

    try:
        with open(p, encoding="utf-8") as f:
            result = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("解析 YAML 文件失败: %s, 错误: %s", path, e)
        raise

    if result is None:
        return {}
    if not isinstance(result, dict):
        logger.warning(
            "%s 内容不是字典类型 (实际类型: %s)，忽略", path, type(result).__name__,
        )
        return {}
    return result
