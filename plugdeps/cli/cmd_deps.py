"""CLI：依赖解析命令"""

from __future__ import annotations

import json
from typing import Any, Callable

import click

from plugdeps.core.config import DEFAULT_CONFIG_FILE, Config
from plugdeps.core.exceptions import PlugDepsError
from plugdeps.core.graph import DependencyGraph


def register(group: click.Group) -> None:
    group.add_command(status)
    group.add_command(missing)
    group.add_command(required_by)
    group.add_command(listing)


def _resolve_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """各命令共用的解析选项"""
    options = [
        click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
                     help="配置文件路径"),
        click.option("--plugins-dir", default=None, help="插件目录（覆盖配置）"),
        click.option("--components", default=None,
                     help="YAML 插件清单，指定后不再扫描插件目录"),
        click.option("--offline", is_flag=True, help="不查询远程插件目录"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_graph(
    config_path: str, plugins_dir: str | None,
    components: str | None, offline: bool,
) -> DependencyGraph:
    from plugdeps.core.config import init_config
    from plugdeps.core.resolver import resolve_from_config

    try:
        cfg: Config = init_config(config_path)
        if plugins_dir:
            cfg.plugins_dir = plugins_dir
        if components:
            cfg.components_file = components
        return resolve_from_config(
            cfg, use_components_file=bool(components), offline=offline,
        )
    except PlugDepsError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@_resolve_options
def status(
    config_path: str, plugins_dir: str | None,
    components: str | None, offline: bool,
) -> None:
    """列出各插件的依赖与被依赖情况"""
    graph = _load_graph(config_path, plugins_dir, components, offline)
    if not graph.components:
        click.echo("没有已安装的插件。")
        return

    for c in graph.components:
        requires = ", ".join(c.requires) or "-"
        flag = " [被依赖]" if graph.is_required(c.identifier) else ""
        click.echo(f"  {c.identifier:40s} {c.display_name:30s} 依赖: {requires}{flag}")
        sources = graph.dependency_sources(c.slug)
        if sources:
            click.echo(f"  {'':40s} Required by: {sources}")

    missing_slugs = sorted(graph.missing_slugs())
    if missing_slugs:
        click.echo(f"缺失依赖: {', '.join(missing_slugs)}")
    else:
        click.echo("所有依赖均已安装。")


@click.command()
@_resolve_options
def missing(
    config_path: str, plugins_dir: str | None,
    components: str | None, offline: bool,
) -> None:
    """列出缺失的依赖，存在缺失时退出码为 1"""
    graph = _load_graph(config_path, plugins_dir, components, offline)
    missing_slugs = sorted(graph.missing_slugs())
    for slug in missing_slugs:
        meta = graph.metadata.get(slug)
        desc = f"  {meta.short_description}" if meta and meta.short_description else ""
        click.echo(f"{slug}{desc}")
    if missing_slugs:
        click.get_current_context().exit(1)


@click.command(name="required-by")
@click.argument("slug")
@_resolve_options
def required_by(
    slug: str, config_path: str, plugins_dir: str | None,
    components: str | None, offline: bool,
) -> None:
    """列出依赖指定 slug 的已安装插件"""
    graph = _load_graph(config_path, plugins_dir, components, offline)
    dependents = graph.dependents_of(slug)
    if not dependents:
        click.echo(f"没有插件依赖: {slug}")
        return
    for name in dependents:
        click.echo(f"  {name}")


@click.command()
@_resolve_options
def listing(
    config_path: str, plugins_dir: str | None,
    components: str | None, offline: bool,
) -> None:
    """以 JSON 输出依赖安装页列表"""
    graph = _load_graph(config_path, plugins_dir, components, offline)
    click.echo(json.dumps(graph.dependencies_listing(), ensure_ascii=False, indent=2))
