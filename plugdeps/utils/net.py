"""网络工具：插件目录地址校验"""

from __future__ import annotations

from urllib.parse import urlparse

from plugdeps.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_registry_url(url: str, *, context: str = "") -> None:
    """校验远程插件目录地址

    只接受带主机名的 http/https 地址，且地址中不得内嵌账号密码
    （该地址会原样出现在日志里）。

    Raises:
        ValidationError: 地址不满足上述条件
    """
    label = f" ({context})" if context else ""
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，仅支持 http/https: {url}"
        )
    if not parsed.hostname:
        raise ValidationError(f"URL 缺少主机名{label}: {url}")
    if parsed.username or parsed.password:
        raise ValidationError(f"URL 不得包含账号密码{label}")
