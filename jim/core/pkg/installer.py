"""安装器

把单个脚本、归档或目录中的脚本安装到版本化存储:

    <install_path>/lib/<name>-<version>/<name>.js
    <install_path>/lib/<name>-<version>/package.json

规则:
  - 目标已存在且脚本字节一致 → 视为成功，不重复写入
  - 目标已存在但内容不同 → 未指定 force 时该文件安装失败，不影响同批其他文件
  - 单文件安装失败返回 False（不是异常），多文件安装返回成功的目标目录列表
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Literal

from jim.core.exceptions import FetchError, MetadataParseError
from jim.core.models import FailedCandidate, InstallReport
from jim.core.pkg.fetcher import Fetcher
from jim.core.pkg.naming import (
    METADATA_FILE,
    NameVersion,
    from_comments,
    from_filename,
    resolve_name_version,
    sanitize_name,
)
from jim.utils.fileio import file_digest, load_json, save_json

logger = logging.getLogger(__name__)

STORE_SUBDIR = "lib"
SCRIPT_EXT = ".js"


class Installer:
    """把 fetch_path 指向的内容安装到 install_path/lib 下"""

    def __init__(
        self,
        fetch_path: str | Path,
        install_path: str | Path,
        force: bool = False,
        name: str | None = None,
        version: str | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self.source = str(fetch_path)
        self.install_path = Path(install_path).expanduser()
        self.force = force
        self.name = name or None
        self.version = version or None
        self.fetcher = fetcher or Fetcher()
        self.report = InstallReport()

    @property
    def store_dir(self) -> Path:
        return self.install_path / STORE_SUBDIR

    def install(self) -> list[Path] | Literal[False]:
        """执行安装

        返回:
            成功（含幂等跳过）的目标目录列表；单文件冲突或全部冲突时返回 False

        异常:
            FetchError: 来源不可达，或其中没有任何脚本文件
        """
        self.report = InstallReport()
        try:
            fetched = self.fetcher.fetch(self.source)
            candidates = self.fetcher.extract(fetched)
            if not candidates:
                raise FetchError(f"没有找到可安装的脚本文件: {self.source}")

            if len(candidates) == 1:
                self._install_one(candidates[0], self._resolve_single(fetched, candidates[0]), True)
            else:
                # 多文件: 每个文件自行推断名称，外层版本作为兜底
                parent = resolve_name_version(fetched, version=self.version)
                logger.info(
                    "发现 %d 个脚本文件 (%s@%s)", len(candidates), parent.name, parent.version,
                )
                for candidate in candidates:
                    nv = resolve_name_version(
                        candidate,
                        fallback_version=parent.version,
                        strategies=(from_comments, from_filename),
                    )
                    self._install_one(candidate, nv, False)
        finally:
            self.fetcher.cleanup()

        for failed in self.report.failed:
            logger.warning("%s 已存在且内容不同，跳过。使用 --force 覆盖", failed.target)
        if not self.report.installed:
            return False
        return list(self.report.installed)

    def _resolve_single(self, fetched: Path, candidate: Path) -> NameVersion:
        """单文件: 显式参数生效；归档内只有一个脚本时文件名信息来自归档"""
        if candidate == fetched:
            return resolve_name_version(candidate, name=self.name, version=self.version)
        parent = resolve_name_version(fetched, version=self.version)
        return resolve_name_version(
            candidate, name=self.name, version=self.version,
            fallback_version=parent.version,
        )

    def _install_one(self, candidate: Path, nv: NameVersion, single: bool) -> None:
        target_dir = self.store_dir / f"{nv.name}-{nv.version}"
        target_file = target_dir / f"{nv.name}{SCRIPT_EXT}"

        if target_file.exists():
            if file_digest(target_file) == file_digest(candidate):
                logger.info("已安装（内容一致），跳过: %s", target_dir)
                self.report.installed.append(target_dir)
                self.report.skipped.append(target_dir)
                return
            if not self.force:
                self.report.failed.append(
                    FailedCandidate(source=candidate, target=target_dir, reason="exists"),
                )
                return

        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(candidate, target_file)
        self._write_metadata(candidate, target_dir, nv, single)
        logger.info("已安装 %s -> %s", candidate.name, target_file)
        self.report.installed.append(target_dir)

    @staticmethod
    def _write_metadata(candidate: Path, target_dir: Path, nv: NameVersion, single: bool) -> None:
        """合并写入 package.json: 已有记录 <- 来源记录 <- name/version"""
        meta_path = target_dir / METADATA_FILE
        merged: dict = {}
        for path, only_same_name in ((meta_path, False), (candidate.parent / METADATA_FILE, not single)):
            try:
                data = load_json(path)
            except MetadataParseError as e:
                logger.warning("忽略损坏的元数据: %s", e)
                continue
            if only_same_name and sanitize_name(str(data.get("name", ""))) != nv.name:
                continue
            merged.update(data)
        merged["name"] = nv.name
        merged["version"] = nv.version
        save_json(meta_path, merged)


def delete(path: str | Path) -> None:
    """删除存储中的一个条目（目录或单文件）；是否确认由调用方决定"""
    p = Path(path)
    if p.is_dir():
        shutil.rmtree(p)
    else:
        p.unlink()
    logger.info("已删除 %s", p)
