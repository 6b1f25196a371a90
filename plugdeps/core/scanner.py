"""插件清单扫描

从插件主文件头部读取元信息字段，
并从已枚举的插件中提取 Requires Plugins 原始声明。
扫描只做提取，不做校验，也不访问网络。
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from plugdeps.core.models import ComponentRecord

logger = logging.getLogger(__name__)

REQUIRES_HEADER = "Requires Plugins"

# 头字段只出现在文件开头
HEADER_READ_BYTES = 8 * 1024

_COMMENT_TAIL_RE = re.compile(r"\s*(?:\*/|\?>).*")


def _header_pattern(name: str) -> re.Pattern[str]:
    return re.compile(
        r"^(?:[ \t]*<\?php)?[ \t/*#@]*" + re.escape(name) + r":(.*)$",
        re.IGNORECASE | re.MULTILINE,
    )


def parse_headers(text: str, names: Iterable[str]) -> dict[str, str]:
    """从文件头文本中解析指定字段，未出现的字段值为空字符串"""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    headers: dict[str, str] = {}
    for name in names:
        match = _header_pattern(name).search(text)
        value = match.group(1) if match else ""
        headers[name] = _COMMENT_TAIL_RE.sub("", value).strip()
    return headers


def read_file_headers(path: str | Path, names: Iterable[str]) -> dict[str, str]:
    """读取插件主文件开头的头字段"""
    with open(path, "rb") as f:
        head = f.read(HEADER_READ_BYTES)
    return parse_headers(head.decode("utf-8", errors="replace"), names)


def scan_headers(
    components: Iterable[ComponentRecord],
    header_name: str = REQUIRES_HEADER,
) -> dict[str, str]:
    """提取各插件的原始依赖声明

    返回 {插件标识: 原始头字段}，未声明或声明为空的插件不出现在结果中。
    """
    raw: dict[str, str] = {}
    total = 0
    for component in components:
        total += 1
        value = component.header(header_name)
        if value.strip():
            raw[component.identifier] = value
    logger.debug("扫描 %d 个插件，%d 个声明了 %s", total, len(raw), header_name)
    return raw
