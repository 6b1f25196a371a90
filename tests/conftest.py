"""测试共享 fixture：假注册表与假元信息服务"""

from __future__ import annotations

import threading
from typing import Any

import pytest

from plugdeps.core.exceptions import RegistryError
from plugdeps.core.models import ComponentRecord


class FakeComponentRegistry:
    """内存中的已安装插件列表"""

    def __init__(self, records: list[ComponentRecord]) -> None:
        self.records = records

    def list_components(self) -> list[ComponentRecord]:
        return list(self.records)


class FakeMetadataService:
    """按 slug 返回预置响应；未预置的 slug 视为未找到"""

    def __init__(
        self,
        responses: dict[str, dict[str, Any]] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.responses = responses or {}
        self.errors = errors or {}
        self.calls: list[tuple[str, dict[str, bool]]] = []
        self._lock = threading.Lock()

    def query(self, slug: str, fields: dict[str, bool]) -> dict[str, Any]:
        with self._lock:
            self.calls.append((slug, dict(fields)))
        if slug in self.errors:
            raise self.errors[slug]
        if slug not in self.responses:
            raise RegistryError(slug, "Plugin not found.")
        return self.responses[slug]


def record(identifier: str, name: str, requires: str | None = None) -> ComponentRecord:
    headers = {"Requires Plugins": requires} if requires is not None else {}
    return ComponentRecord(identifier=identifier, display_name=name, headers=headers)


@pytest.fixture()
def make_record():
    return record


@pytest.fixture()
def site_records() -> list[ComponentRecord]:
    """A 依赖 x,y；B 依赖 x；x / y 均未安装"""
    return [
        record("a/a.php", "A", "x, y"),
        record("b/b.php", "B", "x"),
    ]


@pytest.fixture()
def fake_service_cls():
    return FakeMetadataService


@pytest.fixture()
def fake_registry_cls():
    return FakeComponentRegistry
