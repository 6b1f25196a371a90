"""plugdeps 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from plugdeps import __version__
from plugdeps.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """plugdeps - 插件依赖解析"""
    setup_logging(
        level=os.getenv("PLUGDEPS_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("PLUGDEPS_LOG_JSON", "") == "1",
    )


from plugdeps.cli.cmd_deps import register as _reg_deps  # noqa: E402

_reg_deps(main)
