"""已安装插件注册表

两种 ComponentRegistry 实现:
  - DirectoryComponentRegistry: 扫描插件目录，读取各主文件的头字段
  - YamlComponentRegistry: 从 YAML 清单加载（宿主已导出插件列表时使用）

YAML 清单格式:
    components:
      akismet/akismet.php:
        name: Akismet Anti-spam
        headers:
          Requires Plugins: jetpack
"""

from __future__ import annotations

import logging
from pathlib import Path

from plugdeps.core.models import ComponentRecord
from plugdeps.core.scanner import REQUIRES_HEADER, read_file_headers
from plugdeps.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

NAME_HEADER = "Plugin Name"


class DirectoryComponentRegistry:
    """插件目录注册表

    只收录顶层 *.php 以及一级子目录中的 *.php，
    且文件头声明了 Plugin Name 的才视为插件。
    """

    def __init__(
        self,
        plugins_dir: str | Path,
        header_names: tuple[str, ...] = (REQUIRES_HEADER,),
    ) -> None:
        self.plugins_dir = Path(plugins_dir)
        self.header_names = tuple(
            h for h in header_names if h.lower() != NAME_HEADER.lower()
        )

    def _candidate_files(self) -> list[Path]:
        files: list[Path] = []
        for entry in sorted(self.plugins_dir.iterdir()):
            if entry.name.startswith("."):
                continue
            if entry.is_file() and entry.suffix == ".php":
                files.append(entry)
            elif entry.is_dir():
                files.extend(
                    f for f in sorted(entry.iterdir())
                    if f.is_file() and f.suffix == ".php"
                )
        return files

    def list_components(self) -> list[ComponentRecord]:
        if not self.plugins_dir.is_dir():
            logger.warning("插件目录不存在: %s", self.plugins_dir)
            return []

        components: list[ComponentRecord] = []
        for path in self._candidate_files():
            try:
                headers = read_file_headers(path, (NAME_HEADER, *self.header_names))
            except OSError as e:
                logger.warning("读取插件文件失败 %s: %s", path, e)
                continue
            name = headers.pop(NAME_HEADER)
            if not name:
                continue
            identifier = path.relative_to(self.plugins_dir).as_posix()
            components.append(ComponentRecord(
                identifier=identifier,
                display_name=name,
                headers={k: v for k, v in headers.items() if v},
            ))

        logger.info("插件目录 %s 中发现 %d 个插件", self.plugins_dir, len(components))
        return components


class YamlComponentRegistry:
    """YAML 清单注册表"""

    section_key = "components"

    def __init__(self, components_file: str | Path) -> None:
        self.components_file = Path(components_file)

    def list_components(self) -> list[ComponentRecord]:
        if not self.components_file.exists():
            logger.warning("插件清单不存在: %s", self.components_file)
            return []

        data = load_yaml(self.components_file)
        components: list[ComponentRecord] = []
        for identifier, info in (data.get(self.section_key) or {}).items():
            info = info or {}
            headers = info.get("headers") or {}
            components.append(ComponentRecord(
                identifier=str(identifier),
                display_name=str(info.get("name") or identifier),
                headers={str(k): str(v) for k, v in headers.items() if v is not None},
            ))

        logger.info("已加载 %d 个插件: %s", len(components), self.components_file)
        return components
