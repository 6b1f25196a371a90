"""协作方协议定义

解析核心依赖这些抽象而非具体实现：
宿主应用提供已安装插件列表，网络层提供元信息查询。

使用 typing.Protocol 而非 ABC，使外部类无需继承即可满足协议。
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from plugdeps.core.models import ComponentRecord

# 依赖元信息默认请求的字段
DEFAULT_FIELDS: dict[str, bool] = {
    "short_description": True,
    "icons": True,
}


class ComponentRegistry(Protocol):
    """已安装插件的枚举来源"""

    def list_components(self) -> Iterable[ComponentRecord]:
        """枚举所有已安装插件"""
        ...


class MetadataService(Protocol):
    """远程插件目录查询服务

    查询失败（未找到、服务错误、网络故障、超时）时抛出 RegistryError。
    """

    def query(self, slug: str, fields: dict[str, bool]) -> dict[str, Any]:
        """查询单个 slug 的元信息"""
        ...


class FetchObserver(Protocol):
    """元信息拉取观察者，用于把被吞掉的失败暴露给日志 / 指标"""

    def on_success(self, slug: str) -> None:
        ...

    def on_failure(self, slug: str, error: Exception) -> None:
        ...
