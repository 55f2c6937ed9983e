"""拉取与解压

职责:
- URL 下载到临时工作目录，本地路径原地使用
- 归档 (zip / tar.*) 解压到临时目录
- 扫描目录树，列出脚本文件，跳过测试/示例等忽略目录
"""

from __future__ import annotations

import logging
import re
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

from jim.core.exceptions import FetchError
from jim.core.pkg.naming import ARCHIVE_SUFFIXES, SCRIPT_SUFFIXES
from jim.utils.net import download, is_url, url_basename

logger = logging.getLogger(__name__)

TMP_PREFIX = "jim-"

# 整个名字命中即忽略的目录/文件
IGNORE_NAMES = frozenset((
    "test", "tests", "spec", "specs", "unit",
    "example", "examples", "demo", "demos",
    "vendor", "external", "site",
))
# 名字中以 _ - . 分隔出的 test/spec 单词，如 qunit-spec.js、test_app.js
_IGNORE_WORD_RE = re.compile(r"(^|[_\-.])(tests?|specs?)([_\-.]|$)", re.IGNORECASE)


def is_ignored(name: str) -> bool:
    """单个路径分量是否命中忽略规则（大小写不敏感）"""
    if name.startswith((".", "_")):
        return True
    lower = name.lower()
    stem = lower
    for suffix in SCRIPT_SUFFIXES:
        if stem.endswith(suffix):
            stem = stem[: -len(suffix)]
    return lower in IGNORE_NAMES or stem in IGNORE_NAMES or bool(_IGNORE_WORD_RE.search(stem))


def is_archive(path: Path) -> bool:
    return path.is_file() and path.name.lower().endswith(ARCHIVE_SUFFIXES)


def is_script(path: Path) -> bool:
    return path.name.lower().endswith(SCRIPT_SUFFIXES)


class Fetcher:
    """拉取器 — 管理自己创建的临时目录，用完调用 cleanup()"""

    def __init__(self) -> None:
        self._tmp_dirs: list[Path] = []

    def _make_tmp(self) -> Path:
        tmp = Path(tempfile.mkdtemp(prefix=TMP_PREFIX))
        self._tmp_dirs.append(tmp)
        return tmp

    def fetch(self, source: str | Path) -> Path:
        """返回来源的本地路径

        异常:
            FetchError: URL 不可达或本地路径不存在
        """
        src = str(source)
        if is_url(src):
            dest = self._make_tmp() / url_basename(src)
            logger.info("下载 %s", src)
            return download(src, dest)

        path = Path(src).expanduser()
        if not path.exists():
            raise FetchError(f"路径不存在: {path}")
        return path

    def extract(self, local_path: Path) -> list[Path]:
        """列出待安装的脚本文件

        单个脚本直接返回；归档先解压再扫描；目录直接扫描。
        """
        if local_path.is_dir():
            return scan_scripts(local_path)
        if is_archive(local_path):
            return scan_scripts(self.unpack(local_path))
        return [local_path]

    def unpack(self, archive: Path) -> Path:
        """解压归档到临时目录"""
        dest = self._make_tmp()
        logger.debug("解压 %s -> %s", archive, dest)
        try:
            if archive.name.lower().endswith(".zip"):
                _safe_unzip(archive, dest)
            else:
                with tarfile.open(archive) as tf:
                    tf.extractall(path=str(dest), filter="data")  # noqa: S202
        except (zipfile.BadZipFile, tarfile.TarError, OSError) as e:
            raise FetchError(f"解压失败: {archive} - {e}") from e
        return dest

    def cleanup(self) -> None:
        """删除本次拉取产生的临时目录"""
        for tmp in self._tmp_dirs:
            shutil.rmtree(tmp, ignore_errors=True)
        self._tmp_dirs.clear()


def _safe_unzip(archive: Path, dest: Path) -> None:
    """解压 zip，拒绝越出目标目录的成员"""
    root = dest.resolve()
    with zipfile.ZipFile(archive) as zf:
        for member in zf.namelist():
            target = (dest / member).resolve()
            if root != target and root not in target.parents:
                raise FetchError(f"归档成员路径非法: {member}")
        zf.extractall(str(dest))


def scan_scripts(root: Path) -> list[Path]:
    """递归列出 root 下的脚本文件，按相对路径排序

    命中忽略规则的目录整棵子树跳过，命中忽略规则的文件跳过。
    """
    found: list[Path] = []
    stack = [root]
    while stack:
        current = stack.pop()
        for child in sorted(current.iterdir()):
            if is_ignored(child.name):
                logger.debug("忽略: %s", child)
                continue
            if child.is_dir():
                stack.append(child)
            elif child.is_file() and is_script(child):
                found.append(child)
    return sorted(found, key=lambda p: p.relative_to(root).as_posix())
