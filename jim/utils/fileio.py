"""文件读写工具

集中管理配置 (YAML) 与包元数据 (package.json) 的读写。
统一 encoding="utf-8"、空值保护、目录自动创建、原子写入。
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from jim.core.exceptions import MetadataParseError

logger = logging.getLogger(__name__)

# 元数据/配置文件最大大小限制 (10MB)
MAX_TEXT_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏"""
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
    if size > MAX_TEXT_SIZE:
        raise ValueError(f"文件过大: {p} ({size} 字节), 超过限制 {MAX_TEXT_SIZE} 字节")


def load_yaml(path: str | Path) -> dict[str, Any]:
    """安全读取 YAML 文件

    文件不存在、为空、或内容不是字典时返回空字典；YAML 语法错误照常抛出。
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
            "%s 内容不是字典类型 (实际类型: %s)，返回空字典",
            path, type(result).__name__,
        )
        return {}
    return result


def load_json(path: str | Path) -> dict[str, Any]:
    """读取 package.json 一类的 JSON 元数据

    返回:
        dict: 文件不存在时返回空字典

    异常:
        MetadataParseError: JSON 格式错误或顶层不是对象
    """
    p = Path(path)
    if not p.exists():
        return {}
    _check_size(p)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MetadataParseError(f"元数据解析失败: {p}: {e}") from e
    if not isinstance(data, dict):
        raise MetadataParseError(f"元数据顶层不是对象: {p}")
    return data


def save_json(path: str | Path, data: dict[str, Any]) -> None:
    """原子写入 JSON 元数据，保持键顺序"""
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    atomic_write(Path(path), content)


def file_digest(path: Path) -> str:
    """计算文件 sha256，用于判断重复安装是否字节一致"""
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def read_script(path: Path) -> str:
    """读取脚本文本：优先 UTF-8，解码失败时按 Latin-1 读取（老库的版权头常见）

    Latin-1 能解码任意字节，因此不会因编码问题中断打包。
    """
    data = path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning("%s 不是 UTF-8 编码 (%s)，按 Latin-1 读取", path, e.reason)
        return data.decode("latin-1")
