"""解析流程测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from plugdeps.core.config import Config
from plugdeps.core.fetcher import CountingObserver
from plugdeps.core.resolver import resolve_dependencies, resolve_from_config


class TestResolveDependencies:
    def test_example_site(self, site_records, fake_registry_cls, fake_service_cls) -> None:
        svc = fake_service_cls(responses={"x": {"slug": "x", "name": "X"}})
        graph = resolve_dependencies(fake_registry_cls(site_records), svc, max_workers=2)
        assert graph.missing_slugs() == {"x", "y"}
        assert graph.dependents_of("x") == ["A", "B"]
        assert graph.dependents_of("y") == []
        assert sorted(s for s, _ in svc.calls) == ["x", "y"]

    def test_offline(self, site_records, fake_registry_cls) -> None:
        graph = resolve_dependencies(fake_registry_cls(site_records))
        assert dict(graph.metadata) == {}
        assert graph.missing_slugs() == {"x", "y"}

    def test_no_dependencies_no_queries(self, make_record, fake_registry_cls, fake_service_cls) -> None:
        svc = fake_service_cls()
        graph = resolve_dependencies(fake_registry_cls([make_record("a/a.php", "A")]), svc)
        assert svc.calls == []
        assert graph.required_slugs == ()

    def test_all_failures_do_not_raise(self, site_records, fake_registry_cls, fake_service_cls) -> None:
        svc = fake_service_cls(errors={"x": OSError("down"), "y": OSError("down")})
        observer = CountingObserver()
        graph = resolve_dependencies(fake_registry_cls(site_records), svc, observer=observer)
        assert dict(graph.metadata) == {}
        assert set(observer.failed) == {"x", "y"}
        assert graph.missing_slugs() == {"x", "y"}

    def test_each_pass_starts_cold(self, site_records, fake_registry_cls, fake_service_cls) -> None:
        svc = fake_service_cls(responses={"x": {"slug": "x"}})
        registry = fake_registry_cls(site_records)
        resolve_dependencies(registry, svc)
        resolve_dependencies(registry, svc)
        assert [s for s, _ in svc.calls].count("x") == 2


class TestResolveFromConfig:
    def test_components_file_offline(self, tmp_path: Path) -> None:
        f = tmp_path / "components.yml"
        f.write_text(
            "components:\n"
            "  a/a.php:\n"
            "    name: A\n"
            "    headers:\n"
            "      Requires Plugins: b, c\n"
            "  b/b.php:\n"
            "    name: B\n",
            encoding="utf-8",
        )
        cfg = Config(components_file=str(f))
        graph = resolve_from_config(cfg, use_components_file=True, offline=True)
        assert graph.missing_slugs() == {"c"}
        assert graph.is_required("b/b.php")

    def test_plugins_dir_with_fetch(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        plugin = tmp_path / "a" / "a.php"
        plugin.parent.mkdir()
        plugin.write_text("<?php\n/*\nPlugin Name: A\nRequires Plugins: b\n*/\n", encoding="utf-8")

        queried: list[str] = []

        class _Service:
            def __init__(self, api_url: str, timeout: float) -> None:
                assert timeout == 2.5

            def query(self, slug: str, fields: dict[str, bool]) -> dict:
                queried.append(slug)
                return {"slug": slug, "name": "B"}

        monkeypatch.setattr("plugdeps.core.fetcher.HttpMetadataService", _Service)
        cfg = Config(plugins_dir=str(tmp_path), fetch_timeout=2.5)
        graph = resolve_from_config(cfg)
        assert queried == ["b"]
        assert graph.dependents_of("b") == ["A"]
