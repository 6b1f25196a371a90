"""核心数据模型

一次解析流程内使用的全部数据类集中定义于此。
所有模型在构造后不再修改，每次解析从头重建。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any


def component_slug(identifier: str) -> str:
    """插件标识对应的 slug

    akismet/akismet.php -> akismet；顶层单文件插件 hello.php -> hello
    """
    path = PurePosixPath(identifier.replace("\\", "/"))
    parent = path.parent.as_posix()
    if parent not in ("", "."):
        return parent.split("/")[0]
    return path.stem


@dataclass(frozen=True)
class ComponentRecord:
    """外部组件注册表提供的已安装插件条目"""

    identifier: str
    display_name: str
    headers: dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str:
        """按名称读取头字段，名称大小写不敏感"""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return ""


@dataclass(frozen=True)
class InstalledComponent:
    """已安装插件及其净化后的依赖"""

    identifier: str
    display_name: str
    raw_requires: str = ""
    requires: tuple[str, ...] = ()

    @property
    def slug(self) -> str:
        return component_slug(self.identifier)


@dataclass(frozen=True)
class RemoteMetadata:
    """远程插件目录返回的依赖元信息"""

    slug: str
    name: str = ""
    short_description: str = ""
    icons: dict[str, str] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)  # 服务返回的完整字段

    @classmethod
    def from_response(cls, response: dict[str, Any], query_slug: str) -> RemoteMetadata:
        """从服务响应构建，以服务返回的 slug 为键，缺失时回退到查询 slug"""
        icons = response.get("icons")
        return cls(
            slug=str(response.get("slug") or query_slug),
            name=str(response.get("name", "")),
            short_description=str(response.get("short_description", "")),
            icons=dict(icons) if isinstance(icons, dict) else {},
            data=dict(response),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.data,
            "slug": self.slug,
            "name": self.name,
            "short_description": self.short_description,
            "icons": dict(self.icons),
        }


@dataclass(frozen=True)
class SanitizedHeaders:
    """净化结果：各插件的依赖 slug + 全局排序后的必需 slug 集"""

    requires: dict[str, tuple[str, ...]] = field(default_factory=dict)
    required_slugs: tuple[str, ...] = ()


@dataclass
class FetchReport:
    """一次元信息拉取的汇总"""

    metadata: dict[str, RemoteMetadata] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)  # slug -> 失败原因

    @property
    def success(self) -> bool:
        return not self.failed
