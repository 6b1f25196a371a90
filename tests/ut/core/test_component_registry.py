"""已安装插件注册表测试"""

from __future__ import annotations

from pathlib import Path

import yaml

from plugdeps.core.registry import DirectoryComponentRegistry, YamlComponentRegistry


def _plugin(path: Path, name: str, requires: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = ["<?php", "/**", f" * Plugin Name: {name}"]
    if requires:
        lines.append(f" * Requires Plugins: {requires}")
    lines.append(" */")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


class TestDirectoryComponentRegistry:
    def test_enumerates_plugins(self, tmp_path: Path) -> None:
        _plugin(tmp_path / "akismet" / "akismet.php", "Akismet", "jetpack")
        _plugin(tmp_path / "hello.php", "Hello Dolly")
        (tmp_path / "akismet" / "class-helper.php").write_text("<?php\n", encoding="utf-8")
        (tmp_path / "index.php").write_text("<?php // Silence is golden.\n", encoding="utf-8")
        _plugin(tmp_path / ".hidden" / "x.php", "Hidden")
        _plugin(tmp_path / "deep" / "sub" / "y.php", "Too Deep")

        components = DirectoryComponentRegistry(tmp_path).list_components()
        by_id = {c.identifier: c for c in components}
        assert set(by_id) == {"akismet/akismet.php", "hello.php"}
        assert by_id["akismet/akismet.php"].display_name == "Akismet"
        assert by_id["akismet/akismet.php"].headers == {"Requires Plugins": "jetpack"}
        assert by_id["hello.php"].headers == {}

    def test_missing_dir(self, tmp_path: Path) -> None:
        assert DirectoryComponentRegistry(tmp_path / "nope").list_components() == []

    def test_custom_header(self, tmp_path: Path) -> None:
        f = tmp_path / "a" / "a.php"
        f.parent.mkdir()
        f.write_text("<?php\n/*\nPlugin Name: A\nDepends: b\n*/\n", encoding="utf-8")
        components = DirectoryComponentRegistry(
            tmp_path, header_names=("Depends",),
        ).list_components()
        assert components[0].headers == {"Depends": "b"}


class TestYamlComponentRegistry:
    def test_load(self, tmp_path: Path) -> None:
        f = tmp_path / "components.yml"
        f.write_text(yaml.dump({
            "components": {
                "a/a.php": {"name": "A", "headers": {"Requires Plugins": "x, y"}},
                "b/b.php": {"headers": {"Requires Plugins": None}},
                "c/c.php": None,
            },
        }), encoding="utf-8")
        components = YamlComponentRegistry(f).list_components()
        by_id = {c.identifier: c for c in components}
        assert by_id["a/a.php"].header("Requires Plugins") == "x, y"
        assert by_id["b/b.php"].display_name == "b/b.php"
        assert by_id["b/b.php"].headers == {}
        assert by_id["c/c.php"].headers == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        assert YamlComponentRegistry(tmp_path / "none.yml").list_components() == []

    def test_empty_section(self, tmp_path: Path) -> None:
        f = tmp_path / "components.yml"
        f.write_text("components:\n", encoding="utf-8")
        assert YamlComponentRegistry(f).list_components() == []
