"""包索引

文件系统本身就是索引: 扫描各根目录的直接子项，按最后一个 "-"
拆分为 <name>-<version>。扫描结果在单个 Index 实例内缓存，
每次构造新实例都会重新扫描，不存在跨进程缓存。
"""

from __future__ import annotations

import logging
from pathlib import Path

from jim.core import version as vc
from jim.core.models import IndexEntry
from jim.core.pkg.naming import SCRIPT_SUFFIXES

logger = logging.getLogger(__name__)


def split_name_version(basename: str) -> tuple[str, str] | None:
    """'jquery.ui-1.8.0' -> ('jquery.ui', '1.8.0')；不符合格式返回 None"""
    name, sep, version = basename.rpartition("-")
    head = version[:1]
    if not sep or not name or not (head.isascii() and head.isdecimal()):
        return None
    return name, version


def scan_root(root: Path) -> list[IndexEntry]:
    """纯函数: 根目录列表 -> 索引条目

    识别两种形式:
      - <name>-<version>/ 目录（存储布局）
      - <name>-<version>.js 单文件（项目本地目录）
    其他子项直接忽略。
    """
    if not root.is_dir():
        return []
    entries: list[IndexEntry] = []
    for child in sorted(root.iterdir()):
        if child.name.startswith("."):
            continue
        if child.is_dir():
            parsed = split_name_version(child.name)
        elif child.is_file() and child.name.lower().endswith(SCRIPT_SUFFIXES):
            parsed = split_name_version(child.name[: -len(".js")])
        else:
            parsed = None
        if parsed:
            entries.append(IndexEntry(name=parsed[0], version=parsed[1], path=child))
    return entries


def script_in(entry_path: Path, name: str) -> Path | None:
    """条目对应的脚本文件: 单文件条目即自身，目录条目优先 <name>.js"""
    if entry_path.is_file():
        return entry_path
    preferred = entry_path / f"{name}.js"
    if preferred.is_file():
        return preferred
    scripts = sorted(p for p in entry_path.glob("*.js") if p.is_file())
    return scripts[0] if len(scripts) == 1 else None


class Index:
    """聚合一个或多个根目录的包索引（第一个根目录为安装存储）"""

    def __init__(self, *roots: str | Path) -> None:
        self.roots = [Path(r).expanduser() for r in roots]
        self._entries: list[IndexEntry] | None = None

    @property
    def directories(self) -> list[Path]:
        return [r for r in self.roots if r.is_dir()]

    @property
    def entries(self) -> list[IndexEntry]:
        """合并所有根目录的条目，相同 (name, version) 只保留第一次出现"""
        if self._entries is None:
            seen: set[tuple[str, str]] = set()
            merged: list[IndexEntry] = []
            for root in self.roots:
                for entry in scan_root(root):
                    key = (entry.name, entry.version)
                    if key in seen:
                        continue
                    seen.add(key)
                    merged.append(entry)
            logger.debug("索引扫描完成: %d 个条目 (%s)", len(merged), self.roots)
            self._entries = merged
        return self._entries

    def list(self, search: str | None = None) -> dict[str, list[tuple[str, Path]]]:
        """按名称分组，组内按版本降序；search 为大小写不敏感的子串过滤"""
        needle = search.lower() if search else None
        grouped: dict[str, list[tuple[str, Path]]] = {}
        for entry in self.entries:
            if needle and needle not in entry.name.lower():
                continue
            grouped.setdefault(entry.name, []).append((entry.version, entry.path))
        return {
            name: sorted(grouped[name], key=lambda vp: vc.version_key(vp[0]), reverse=True)
            for name in sorted(grouped)
        }

    def find_all(self, name: str, version: str | None = None) -> list[Path]:
        """精确匹配名称（可选版本）的全部条目路径，新版本在前"""
        matches = [
            e for e in self.entries
            if e.name == name and (version is None or e.version == version)
        ]
        matches.sort(key=lambda e: vc.version_key(e.version), reverse=True)
        return [e.path for e in matches]

    def find_entry(self, name: str, version: str | None = None) -> IndexEntry | None:
        """最新的可用条目（必须能定位到脚本文件）"""
        matches = [
            e for e in self.entries
            if e.name == name and (version is None or e.version == version)
        ]
        for entry in sorted(matches, key=lambda e: vc.version_key(e.version), reverse=True):
            if script_in(entry.path, entry.name):
                return entry
        return None

    def find(self, name: str, version: str | None = None) -> Path | None:
        """最新匹配条目的脚本文件路径"""
        entry = self.find_entry(name, version)
        return script_in(entry.path, entry.name) if entry else None

    def in_store(self, path: Path) -> bool:
        """路径是否位于安装存储（第一个根目录）之下"""
        if not self.roots:
            return False
        store = self.roots[0].resolve()
        return store in Path(path).resolve().parents
