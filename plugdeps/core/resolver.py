"""依赖解析流程

单向流水线: 扫描 -> 净化 -> 建图 -> 拉取元信息。
每次调用从零开始，不跨调用缓存任何状态。

用法:
    from plugdeps.core.resolver import resolve_dependencies

    graph = resolve_dependencies(
        DirectoryComponentRegistry("wp-content/plugins"),
        HttpMetadataService(),
        max_workers=4,
    )
    graph.missing_slugs()
    graph.dependents_of("woocommerce")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from plugdeps.core.fetcher import MetadataFetcher
from plugdeps.core.graph import DependencyGraph
from plugdeps.core.protocols import ComponentRegistry, FetchObserver, MetadataService
from plugdeps.core.scanner import REQUIRES_HEADER

if TYPE_CHECKING:
    from plugdeps.core.config import Config

logger = logging.getLogger(__name__)


def resolve_dependencies(
    registry: ComponentRegistry,
    service: MetadataService | None = None,
    *,
    header_name: str = REQUIRES_HEADER,
    max_workers: int = 1,
    observer: FetchObserver | None = None,
) -> DependencyGraph:
    """执行一次完整解析，service 为 None 时跳过远程元信息（离线模式）"""
    graph = DependencyGraph.build(registry.list_components(), header_name)
    if service is None:
        logger.info("离线模式，跳过远程元信息")
        return graph
    if not graph.required_slugs:
        return graph

    fetcher = MetadataFetcher(service, max_workers=max_workers, observer=observer)
    report = fetcher.fetch_all(graph.required_slugs)
    return graph.with_metadata(report.metadata)


def resolve_from_config(
    config: Config | None = None,
    *,
    use_components_file: bool = False,
    offline: bool = False,
    observer: FetchObserver | None = None,
) -> DependencyGraph:
    """按配置构造注册表与元信息服务并执行解析"""
    from plugdeps.core.fetcher import HttpMetadataService
    from plugdeps.core.registry import DirectoryComponentRegistry, YamlComponentRegistry

    if config is None:
        from plugdeps.core.config import get_config
        config = get_config()

    registry: ComponentRegistry
    if use_components_file:
        registry = YamlComponentRegistry(config.components_file)
    else:
        registry = DirectoryComponentRegistry(
            config.plugins_dir, header_names=(config.header_name,),
        )

    service = None
    if not offline:
        service = HttpMetadataService(
            api_url=config.registry_api_url, timeout=config.fetch_timeout,
        )

    return resolve_dependencies(
        registry,
        service,
        header_name=config.header_name,
        max_workers=config.max_workers,
        observer=observer,
    )
