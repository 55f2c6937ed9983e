"""jim - 前端脚本库依赖管理与打包工具"""

__version__ = "0.3.0"
