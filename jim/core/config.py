"""集中配置管理

提供统一的配置入口：JIMHOME、Jimfile 路径、Web 打包路由等。
支持从 YAML 文件加载 + 编程式覆盖，JIMHOME 默认取环境变量。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from jim.core.exceptions import ConfigError
from jim.utils.fileio import load_yaml

logger = logging.getLogger(__name__)


def _default_jimhome() -> str:
    return os.environ.get("JIMHOME") or "~/.jim"


@dataclass
class Config:
    """jim 全局配置"""

    # 目录
    jimhome: str = field(default_factory=_default_jimhome)
    jimfile: str = "Jimfile"
    # 额外的索引搜索路径（available 命令、Bundler 解析时与存储目录合并）
    extra_paths: list[str] = field(default_factory=lambda: ["."])

    # Web 打包路由
    bundle_uri: str = "/javascripts/"
    compressed_suffix: str = ".min"

    # 自定义扩展 (放不到字段里的配置项)
    extra: dict = field(default_factory=dict)

    @property
    def home_dir(self) -> Path:
        return Path(self.jimhome).expanduser()

    @property
    def store_dir(self) -> Path:
        """已安装包的存储根目录: <jimhome>/lib"""
        return self.home_dir / "lib"

    @classmethod
    def from_file(cls, path: str = "jim.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if "extra_paths" in matched and not isinstance(matched["extra_paths"], list):
            raise ConfigError(f"extra_paths 必须是列表: {path}")
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        from dataclasses import asdict
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "jim.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current


def set_config(cfg: Config) -> Config:
    """直接替换全局配置（CLI 选项覆盖后调用）"""
    global _current  # noqa: PLW0603
    _current = cfg
    return _current
