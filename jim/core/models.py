"""核心数据模型

数据类:
- Requirement: Jimfile 中声明的单个需求
- IndexEntry: 索引扫描得到的 (name, version, path)
- ResolvedFile / BundleResult: 需求解析结果
- FailedCandidate / InstallReport: 安装结果明细
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# 表示"任意版本"的写法
ANY_VERSION = frozenset(("", "*", "any"))


@dataclass(frozen=True)
class Requirement:
    """单个需求: 包名 + 可选版本约束，或直接引用的文件路径"""

    name: str
    version: str | None = None
    path: str | None = None

    @property
    def constrained(self) -> bool:
        return self.version is not None and self.version.strip().lower() not in ANY_VERSION

    @property
    def is_file(self) -> bool:
        return self.path is not None

    def __str__(self) -> str:
        if self.path:
            return self.path
        return f"{self.name} {self.version}" if self.constrained else self.name


@dataclass(frozen=True)
class IndexEntry:
    """索引条目 — 只读投影，不单独持久化"""

    name: str
    version: str
    path: Path


@dataclass(frozen=True)
class ResolvedFile:
    requirement: Requirement
    path: Path
    version: str = ""


@dataclass
class BundleResult:
    """按声明顺序排列的解析结果"""

    files: list[ResolvedFile] = field(default_factory=list)
    missing: list[Requirement] = field(default_factory=list)

    @property
    def paths(self) -> list[Path]:
        return [f.path for f in self.files]

    def __iter__(self):
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class FailedCandidate:
    source: Path
    target: Path
    reason: str


@dataclass
class InstallReport:
    """一次安装的明细；skipped 中的路径同时出现在 installed 中"""

    installed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: list[FailedCandidate] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.installed)
