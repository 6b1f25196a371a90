"""集中配置管理

支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

from plugdeps.core.exceptions import ConfigError
from plugdeps.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "configs/plugdeps.yml"


@dataclass
class Config:
    """全局配置"""

    # 插件来源
    plugins_dir: str = "wp-content/plugins"
    components_file: str = "data/components.yml"
    header_name: str = "Requires Plugins"

    # 远程插件目录
    registry_api_url: str = "https://api.wordpress.org/plugins/info/1.2/"
    fetch_timeout: float = 10.0
    max_workers: int = 4

    # 放不到字段里的配置项
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigError(f"配置文件无法加载: {path}: {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        cfg = cls(**matched)
        cfg.extra = extra
        cfg.validate()
        return cfg

    def validate(self) -> None:
        """校验并规整字段类型，YAML 中写成字符串的数字也接受"""
        self.fetch_timeout = _coerce(self.fetch_timeout, float, "fetch_timeout")
        self.max_workers = _coerce(self.max_workers, int, "max_workers")
        if not isinstance(self.header_name, str):
            raise ConfigError(f"header_name 必须为字符串: {self.header_name!r}")
        if self.fetch_timeout <= 0:
            raise ConfigError(f"fetch_timeout 必须为正数: {self.fetch_timeout}")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers 至少为 1: {self.max_workers}")
        if not self.header_name.strip():
            raise ConfigError("header_name 不能为空")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _coerce(value: Any, kind: type, name: str) -> Any:
    if isinstance(value, bool):
        raise ConfigError(f"{name} 必须为数字: {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} 必须为数字: {value!r}") from e


# 首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
