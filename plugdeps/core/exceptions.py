"""统一异常体系

所有业务异常继承 PlugDepsError。
解析流程内部的失败（如单个 slug 拉取失败）会被降级为"缺失"，
不会越过核心边界；这些异常主要用于服务层与 CLI / Web 层。
"""

from __future__ import annotations


class PlugDepsError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PlugDepsError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class RegistryError(PlugDepsError):
    """插件目录查询失败（网络错误、服务错误、未找到）"""

    code = "REGISTRY_ERROR"

    def __init__(self, slug: str, message: str) -> None:
        super().__init__(f"{slug}: {message}")
        self.slug = slug
        self.reason = message


class ValidationError(PlugDepsError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []
