"""打包器

职责:
- 按 Jimfile 声明顺序把每个需求解析到具体文件
- bundle: 拼接文件内容
- compress: 逐个压缩后拼接
- vendor: 把解析到的文件复制到项目目录

Bundler 不保存任何状态，每次调用都重新解析。
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import IO, Union

from jim.core.exceptions import AlreadyExistsError, ResolutionError
from jim.core.jimfile import Manifest
from jim.core.models import BundleResult, Requirement, ResolvedFile
from jim.core.pkg.index import Index
from jim.utils.fileio import file_digest, read_script

logger = logging.getLogger(__name__)

DEFAULT_VENDOR_DIR = "vendor"
SEPARATOR = "\n"

Destination = Union[str, Path, IO[str], None]


class Bundler:
    """根据 Manifest 和 Index 生成打包结果"""

    def __init__(
        self,
        manifest: Manifest,
        index: Index,
        compressor: Callable[[str], str] | None = None,
    ) -> None:
        self.manifest = manifest
        self.index = index
        self._compressor = compressor

    @property
    def options(self) -> dict[str, str]:
        return self.manifest.options

    @property
    def compressor(self) -> Callable[[str], str]:
        if self._compressor is None:
            from jim.core.minifier import minify
            self._compressor = minify
        return self._compressor

    # ------------------------------------------------------------------
    # 解析
    # ------------------------------------------------------------------

    def resolve(self, strict: bool = True) -> BundleResult:
        """按声明顺序解析全部需求

        参数:
            strict: 为 True 时只要有需求解析失败就抛出 ResolutionError
                    （列出全部失败项）；否则失败项记录在 result.missing
        """
        result = BundleResult()
        for req in self.manifest.requirements:
            resolved = self._resolve_one(req)
            if resolved is None:
                logger.debug("无法解析: %s", req)
                result.missing.append(req)
            else:
                result.files.append(resolved)

        if result.missing and strict:
            names = [str(r) for r in result.missing]
            raise ResolutionError(
                f"以下需求没有找到已安装的文件: {', '.join(names)}", missing=names,
            )
        return result

    def _resolve_one(self, req: Requirement) -> ResolvedFile | None:
        if req.is_file:
            path = Path(req.path)  # type: ignore[arg-type]
            if not path.is_absolute():
                path = self.manifest.base_dir() / path
            return ResolvedFile(requirement=req, path=path) if path.is_file() else None

        version = req.version.strip() if req.constrained else None  # type: ignore[union-attr]
        entry = self.index.find_entry(req.name, version)
        if entry is None:
            return None
        path = self.index.find(entry.name, entry.version)
        if path is None:
            return None
        return ResolvedFile(requirement=req, path=path, version=entry.version)

    # ------------------------------------------------------------------
    # 输出
    # ------------------------------------------------------------------

    def bundle(self, destination: Destination = None) -> str | Path | IO[str]:
        """拼接全部文件内容，文件之间以换行分隔

        destination 为 None 时使用 Jimfile 的 bundle_path，
        两者都没有则直接返回字符串。
        """
        content = self._concat(lambda text: text)
        return self._write(content, destination, self.options.get("bundle_path"))

    def compress(self, destination: Destination = None) -> str | Path | IO[str]:
        """同 bundle，但每个文件先经过压缩"""
        content = self._concat(self.compressor)
        return self._write(content, destination, self.options.get("compressed_path"))

    def _concat(self, transform: Callable[[str], str]) -> str:
        parts = []
        for resolved in self.resolve():
            logger.debug("加入 %s (%s)", resolved.requirement, resolved.path)
            parts.append(transform(read_script(resolved.path)))
        return SEPARATOR.join(parts)

    @staticmethod
    def _write(content: str, destination: Destination, default: str | None) -> str | Path | IO[str]:
        target = destination if destination is not None else default
        if target is None or target == "":
            return content
        if hasattr(target, "write"):
            target.write(content)  # type: ignore[union-attr]
            return target  # type: ignore[return-value]
        path = Path(target)  # type: ignore[arg-type]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info("已写入 %s (%dkb)", path, path.stat().st_size // 1024)
        return path

    def vendor(self, directory: str | Path | None = None, force: bool = False) -> list[Path]:
        """把解析到的文件复制到 directory/<需求名>.js

        目标已存在且内容不同时，未指定 force 则在复制任何文件之前
        抛出 AlreadyExistsError。
        """
        dest_dir = Path(directory or self.options.get("vendor_dir") or DEFAULT_VENDOR_DIR)
        plan: list[tuple[Path, Path]] = []
        conflicts: list[str] = []
        for resolved in self.resolve():
            req = resolved.requirement
            filename = Path(req.path).name if req.is_file else f"{req.name}.js"  # type: ignore[arg-type]
            dest = dest_dir / filename
            if dest.exists():
                if dest.resolve() == resolved.path.resolve():
                    continue
                if file_digest(dest) == file_digest(resolved.path):
                    logger.debug("内容一致，跳过 %s", dest)
                    continue
                if not force:
                    conflicts.append(str(dest))
                    continue
            plan.append((resolved.path, dest))

        if conflicts:
            raise AlreadyExistsError(
                f"以下文件已存在: {', '.join(conflicts)}", paths=conflicts,
            )

        dest_dir.mkdir(parents=True, exist_ok=True)
        for src, dest in plan:
            shutil.copyfile(src, dest)
            logger.info("已复制 %s -> %s", src, dest)
        return [dest for _, dest in plan]
