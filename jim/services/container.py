"""服务容器 — CLI 与 Web 层统一从这里拿 Index / Bundler

依赖关系:
  bundler → manifest + index
  index   → store_dir + extra_paths
  installed_index → store_dir

同一容器内的 Index 实例共享扫描缓存；需要重新扫描时新建容器即可
（Web 层每个请求都会新建 Bundler）。

用法:
    container = ServiceContainer()
    container.installed_index.list("jquery")
    container.bundler.bundle("public/bundled.js")
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jim.core.bundler import Bundler
    from jim.core.config import Config
    from jim.core.jimfile import Manifest
    from jim.core.pkg.index import Index
    from jim.core.pkg.installer import Installer

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from jim.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def installed_index(self) -> Index:
        """仅包含安装存储的索引（list / remove 使用）"""
        if "installed_index" not in self._instances:
            from jim.core.pkg.index import Index
            self._instances["installed_index"] = Index(self._config.store_dir)
        return self._instances["installed_index"]  # type: ignore[return-value]

    @property
    def index(self) -> Index:
        """安装存储 + 项目本地路径（available / bundle 使用）"""
        if "index" not in self._instances:
            from jim.core.pkg.index import Index
            self._instances["index"] = Index(
                self._config.store_dir, *self._config.extra_paths,
            )
        return self._instances["index"]  # type: ignore[return-value]

    @property
    def manifest(self) -> Manifest:
        if "manifest" not in self._instances:
            from jim.core.jimfile import load_jimfile
            self._instances["manifest"] = load_jimfile(self._config.jimfile)
        return self._instances["manifest"]  # type: ignore[return-value]

    @property
    def bundler(self) -> Bundler:
        if "bundler" not in self._instances:
            from jim.core.bundler import Bundler
            self._instances["bundler"] = Bundler(self.manifest, self.index)
        return self._instances["bundler"]  # type: ignore[return-value]

    def installer(
        self,
        source: str | Path,
        force: bool = False,
        name: str | None = None,
        version: str | None = None,
    ) -> Installer:
        """每次安装一个新的 Installer（安装器带有单次运行的状态）"""
        from jim.core.pkg.installer import Installer
        return Installer(
            source, self._config.home_dir, force=force, name=name, version=version,
        )


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（配置变更后或测试中使用）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
