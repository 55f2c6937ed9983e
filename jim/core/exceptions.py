"""统一异常体系

所有业务异常继承 JimError。CLI 层据此输出友好提示，Web 层据此返回 500 诊断页。
单文件安装冲突不走异常通道，Installer.install() 直接返回 False。
"""

from __future__ import annotations


class JimError(Exception):
    """jim 基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(JimError):
    """配置文件或 Jimfile 缺失、内容无效"""

    code = "CONFIG_ERROR"


class FetchError(JimError):
    """URL 不可达或本地路径不存在"""

    code = "FETCH_ERROR"


class AlreadyExistsError(JimError):
    """目标已存在且内容不同，未指定 force"""

    code = "ALREADY_EXISTS"

    def __init__(self, message: str, paths: list[str] | None = None) -> None:
        super().__init__(message)
        self.paths = paths or []


class ResolutionError(JimError):
    """需求项在索引中找不到任何已安装文件"""

    code = "RESOLUTION_ERROR"

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


class MetadataParseError(JimError):
    """package.json 格式错误（在名称/版本推断中被吞掉，不会致命）"""

    code = "METADATA_PARSE_ERROR"


class ValidationError(JimError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"
