"""包存储管理模块

拆分说明:
- naming.py: 名称/版本推断（策略级联）
- fetcher.py: 拉取 + 解压 + 忽略规则
- installer.py: 安装到版本化存储目录
- index.py: 扫描存储目录建立索引
"""

from jim.core.pkg.fetcher import Fetcher
from jim.core.pkg.index import Index
from jim.core.pkg.installer import Installer, delete
from jim.core.pkg.naming import NameVersion, resolve_name_version

__all__ = [
    "Fetcher",
    "Index",
    "Installer",
    "NameVersion",
    "delete",
    "resolve_name_version",
]
