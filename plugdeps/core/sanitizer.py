"""依赖 slug 净化

对原始 Requires Plugins 声明按逗号拆分、去空白、按 slug 格式过滤、去重。
不合格的 token 直接丢弃，不视为错误。
"""

from __future__ import annotations

import logging
import re

from plugdeps.core.models import SanitizedHeaders

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def is_valid_slug(token: str) -> bool:
    # fullmatch: "$" 会放过末尾换行
    return SLUG_RE.fullmatch(token) is not None


def sanitize_slugs(raw: str) -> tuple[str, ...]:
    """净化单个插件的原始依赖声明，保留首次出现的顺序

    >>> sanitize_slugs("  Foo, bar!!, bar, -ok-")
    ('bar', '-ok-')
    """
    slugs: dict[str, None] = {}
    for token in raw.split(","):
        token = token.strip()
        if not is_valid_slug(token):
            if token:
                logger.debug("丢弃非法依赖 slug: %r", token)
            continue
        slugs.setdefault(token, None)
    return tuple(slugs)


def sanitize_headers(raw_headers: dict[str, str]) -> SanitizedHeaders:
    """净化全部插件的依赖声明，同时汇总全局必需 slug 集（升序）"""
    requires: dict[str, tuple[str, ...]] = {}
    candidates: set[str] = set()
    for identifier, raw in raw_headers.items():
        slugs = sanitize_slugs(raw)
        requires[identifier] = slugs
        candidates.update(slugs)
    return SanitizedHeaders(
        requires=requires,
        required_slugs=tuple(sorted(candidates)),
    )
