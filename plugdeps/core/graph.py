"""依赖图与解析查询

DependencyGraph 是一次解析流程的只读结果：
  - 已安装插件及其净化后的依赖 slug
  - 全局必需 slug 集（升序）
  - 远程元信息（按 slug）

供展示层调用的查询:
  - missing_slugs():    必需但未安装的 slug
  - dependents_of():    哪些已安装插件依赖某个 slug
  - is_required():      某个已安装插件是否被其他插件依赖
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from plugdeps.core.models import (
    ComponentRecord,
    InstalledComponent,
    RemoteMetadata,
    component_slug,
)
from plugdeps.core.sanitizer import sanitize_headers
from plugdeps.core.scanner import REQUIRES_HEADER, scan_headers

logger = logging.getLogger(__name__)

# 被依赖插件不允许的操作
PROTECTED_ACTIONS = ("delete", "deactivate")


@dataclass(frozen=True)
class DependencyGraph:
    """已安装插件的依赖图"""

    components: tuple[InstalledComponent, ...] = ()
    required_slugs: tuple[str, ...] = ()
    metadata: Mapping[str, RemoteMetadata] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        records: Iterable[ComponentRecord],
        header_name: str = REQUIRES_HEADER,
    ) -> DependencyGraph:
        """扫描 + 净化，构建尚未附带元信息的依赖图"""
        records = list(records)
        raw = scan_headers(records, header_name)
        sanitized = sanitize_headers(raw)

        components = tuple(
            InstalledComponent(
                identifier=r.identifier,
                display_name=r.display_name,
                raw_requires=raw.get(r.identifier, ""),
                requires=sanitized.requires.get(r.identifier, ()),
            )
            for r in records
        )
        logger.info(
            "依赖图: %d 个插件, %d 个必需依赖",
            len(components), len(sanitized.required_slugs),
        )
        return cls(components=components, required_slugs=sanitized.required_slugs)

    def with_metadata(self, metadata: Mapping[str, RemoteMetadata]) -> DependencyGraph:
        return dataclasses.replace(self, metadata=dict(metadata))

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def get(self, identifier: str) -> InstalledComponent | None:
        for component in self.components:
            if component.identifier == identifier:
                return component
        return None

    @property
    def installed_slugs(self) -> frozenset[str]:
        return frozenset(c.slug for c in self.components)

    def missing_slugs(self) -> frozenset[str]:
        """必需但本地未安装的依赖"""
        return frozenset(self.required_slugs) - self.installed_slugs

    def all_satisfied(self) -> bool:
        return not self.missing_slugs()

    def dependents_of(self, slug: str) -> list[str]:
        """依赖 slug 的已安装插件显示名（去重、升序）

        slug 没有远程元信息时返回空列表。
        """
        if slug not in self.metadata:
            return []
        return sorted({c.display_name for c in self.components if slug in c.requires})

    def dependency_sources(self, slug: str) -> str:
        """生成 Required by 文本，如 Akismet, Jetpack"""
        return ", ".join(self.dependents_of(slug))

    def is_required(self, identifier: str) -> bool:
        return component_slug(identifier) in self.required_slugs

    def filter_action_links(
        self, identifier: str, actions: Mapping[str, Any],
    ) -> dict[str, Any]:
        """去掉被依赖插件的删除 / 停用操作，返回新字典"""
        if not self.is_required(identifier):
            return dict(actions)
        return {k: v for k, v in actions.items() if k not in PROTECTED_ACTIONS}

    def dependencies_listing(self) -> dict[str, Any]:
        """依赖安装页使用的列表视图（单页）"""
        plugins = [self.metadata[s].to_dict() for s in sorted(self.metadata)]
        return {
            "info": {"page": 1, "pages": 1, "results": len(plugins)},
            "plugins": plugins,
        }

    def summary(self) -> dict[str, Any]:
        missing = self.missing_slugs()
        return {
            "components": len(self.components),
            "required": list(self.required_slugs),
            "missing": sorted(missing),
            "resolved": sorted(self.metadata),
            "all_satisfied": not missing,
        }
