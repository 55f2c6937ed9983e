"""名称/版本推断

职责:
- 从显式参数、package.json、文件头注释、文件名中推断 (name, version)
- 每种来源是一个纯函数策略，返回可能只填了一半的 NameVersion
- 按顺序级联，前面的策略优先；全部落空时使用默认值

推断过程只读文件，不产生任何副作用。
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from jim.core.exceptions import MetadataParseError
from jim.utils.fileio import load_json

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0"
DEFAULT_NAME = "unnamed"
METADATA_FILE = "package.json"

SCRIPT_SUFFIXES = (".js",)
ARCHIVE_SUFFIXES = (".tar.gz", ".tar.bz2", ".tar.xz", ".tgz", ".tar", ".zip")

# 只扫描文件开头这么多行来找注释头
_HEADER_MAX_LINES = 40

_FILENAME_RE = re.compile(r"^(?P<name>.+?)-(?P<version>\d[\w.]*)$")
_LINE_COMMENT_RE = re.compile(r"^\s*//")
_HEADER_FIELD_RE = re.compile(
    r"^\s*(?:/\*+!?|\*+|//+)?\s*"
    r"(?:@(?P<tag>name|version)\s+(?P<tagged>[\w.\-]+)"
    r"|(?P<key>name|version)\s*[:=]\s*(?P<value>[\w.\-]+)"
    # 没有分隔符时只认 "version 1.2"，值必须以数字开头
    r"|(?P<bare>version)\s+(?P<number>\d[\w.\-]*))",
    re.IGNORECASE,
)
_UNSAFE_NAME_RE = re.compile(r"[^a-z0-9_.\-]+")
_PATH_SEP_RE = re.compile(r"[/\\]+")
_VERSION_SEP_RE = re.compile(r"[^0-9A-Za-z_]+")


@dataclass(frozen=True)
class NameVersion:
    """推断结果；字段为 None 表示该策略没有给出信号"""

    name: str | None = None
    version: str | None = None

    @property
    def complete(self) -> bool:
        return bool(self.name) and bool(self.version)

    def fill(self, other: NameVersion) -> NameVersion:
        """用 other 补齐尚未确定的字段，已确定的字段保持不变"""
        return NameVersion(
            name=self.name or other.name,
            version=self.version or other.version,
        )


Strategy = Callable[[Path], NameVersion]


def strip_suffix(filename: str) -> str:
    """去掉脚本或归档扩展名（支持 .tar.gz 这类双后缀）"""
    lower = filename.lower()
    for suffix in ARCHIVE_SUFFIXES + SCRIPT_SUFFIXES:
        if lower.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def sanitize_name(name: str) -> str:
    """包名统一小写，只保留字母、数字、下划线、点和连字符

    路径分隔符转为 "-"（@acme/widget -> acme-widget），开头的 "." 和 "-"
    去掉，结果只会是存储目录下的一级名字。
    """
    cleaned = _PATH_SEP_RE.sub("-", name.strip().lower())
    return _UNSAFE_NAME_RE.sub("", cleaned).lstrip(".-")


def sanitize_version(version: str) -> str | None:
    """规范化版本号，使 <name>-<version> 能按最后一个 "-" 拆回原样

    去掉开头的 v，"-"、"+" 等分隔符统一转为 "."（2.0.0-beta.1 -> 2.0.0.beta.1）。
    不以数字开头的版本无效，返回 None。
    """
    cleaned = version.strip()
    if cleaned[:1] in ("v", "V"):
        cleaned = cleaned[1:]
    cleaned = _VERSION_SEP_RE.sub(".", cleaned).strip(".")
    head = cleaned[:1]
    if not (head.isascii() and head.isdecimal()):
        return None
    return cleaned


# ---------------------------------------------------------------------------
# 策略
# ---------------------------------------------------------------------------


def from_metadata(path: Path) -> NameVersion:
    """同目录（或目录本身）下的 package.json"""
    meta = (path if path.is_dir() else path.parent) / METADATA_FILE
    try:
        data = load_json(meta)
    except MetadataParseError as e:
        logger.debug("忽略损坏的元数据: %s", e)
        return NameVersion()
    name = data.get("name")
    version = data.get("version")
    return NameVersion(
        name=str(name) if name else None,
        version=str(version) if version else None,
    )


def from_comments(path: Path) -> NameVersion:
    """脚本开头注释块中的 name: / version: 声明"""
    if not path.is_file() or not path.name.lower().endswith(SCRIPT_SUFFIXES):
        return NameVersion()

    found: dict[str, str] = {}
    in_block = False
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for lineno, line in enumerate(f):
                if lineno >= _HEADER_MAX_LINES:
                    break
                stripped = line.strip()
                if not stripped:
                    continue
                if not in_block and stripped.startswith("/*"):
                    in_block = True
                elif not in_block and not _LINE_COMMENT_RE.match(line):
                    # 第一行代码，注释头结束
                    break
                m = _HEADER_FIELD_RE.match(line)
                if m:
                    key = (m.group("tag") or m.group("key") or m.group("bare")).lower()
                    value = m.group("tagged") or m.group("value") or m.group("number")
                    found.setdefault(key, value)
                if in_block and "*/" in stripped:
                    in_block = False
    except OSError as e:
        logger.debug("读取注释头失败 %s: %s", path, e)
        return NameVersion()
    return NameVersion(name=found.get("name"), version=found.get("version"))


def from_filename(path: Path) -> NameVersion:
    """文件名形如 <name>-<version>.js / <name>-<version>.zip"""
    m = _FILENAME_RE.match(strip_suffix(path.name))
    if not m:
        return NameVersion()
    return NameVersion(name=sanitize_name(m.group("name")), version=m.group("version"))


def defaults(path: Path) -> NameVersion:
    return NameVersion(
        name=sanitize_name(strip_suffix(path.name)),
        version=DEFAULT_VERSION,
    )


def _normalized(nv: NameVersion) -> NameVersion:
    if not nv.version:
        return nv
    version = sanitize_version(nv.version)
    if version is None:
        logger.debug("忽略无效版本号: %r", nv.version)
    return NameVersion(name=nv.name, version=version)


STRATEGIES: tuple[Strategy, ...] = (from_metadata, from_comments, from_filename)


def resolve_name_version(
    path: Path,
    name: str | None = None,
    version: str | None = None,
    fallback_version: str | None = None,
    strategies: tuple[Strategy, ...] = STRATEGIES,
) -> NameVersion:
    """按级联顺序推断 (name, version)，总是返回完整结果

    优先级:
      1. 显式 name / version
      2. package.json
      3. 文件头注释
      4. 文件名 <name>-<version>
      5. fallback_version（多文件安装时，来自外层归档/目录的版本）
      6. 默认值: 文件名 + "0"

    每个来源给出的版本都先规范化，无效版本视为没有信号；
    最终的名称统一经过 sanitize_name。
    """
    path = Path(path)
    result = _normalized(NameVersion(name=name or None, version=version or None))
    for strategy in strategies:
        if result.complete:
            break
        result = result.fill(_normalized(strategy(path)))
    if fallback_version:
        result = result.fill(_normalized(NameVersion(version=fallback_version)))
    result = result.fill(defaults(path))
    result = NameVersion(
        name=sanitize_name(result.name or "") or defaults(path).name or DEFAULT_NAME,
        version=result.version,
    )
    logger.debug("推断名称/版本: %s -> %s@%s", path.name, result.name, result.version)
    return result
