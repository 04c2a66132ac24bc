"""Unit tests for loading ``docgraph.yaml``."""

from __future__ import annotations

import typing as typ

import pytest

from docgraph.config import SiteConfigError, load_site_config

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_defaults_and_relative_paths(tmp_path: Path) -> None:
    config_path = tmp_path / "docgraph.yaml"
    config_path.write_text(
        "site:\n  outline: config/sitemap.yml\n  content_root: content\n",
        encoding="utf-8",
    )

    config = load_site_config(config_path)

    assert config.outline == tmp_path / "config" / "sitemap.yml", (
        "paths resolve against the configuration file"
    )
    assert config.output == tmp_path / ".build" / "sitemap.json", "default output"
    assert config.root_title == "Docs", "default root title"
    assert config.pygments_style == "monokai", "default highlighting style"
    assert config.image_mapping is None, "no image mapping unless configured"
    assert config.strict_anchors is False, "lenient anchors by default"


def test_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "docgraph.yaml"
    config_path.write_text(
        "site:\n"
        "  outline: sitemap.yml\n"
        "  content_root: /srv/content\n"
        "  output: dist/graph.json\n"
        "  root_title: Руководство\n"
        "  strict_anchors: true\n",
        encoding="utf-8",
    )

    config = load_site_config(config_path)

    assert str(config.content_root) == "/srv/content", "absolute paths are kept"
    assert config.output == tmp_path / "dist" / "graph.json", "output override"
    assert config.root_title == "Руководство", "root title override"
    assert config.strict_anchors is True, "strict anchors override"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_site_config(tmp_path / "absent.yaml")


def test_missing_required_keys(tmp_path: Path) -> None:
    config_path = tmp_path / "docgraph.yaml"
    config_path.write_text("site:\n  outline: sitemap.yml\n", encoding="utf-8")

    with pytest.raises(SiteConfigError, match="content_root"):
        load_site_config(config_path)


def test_non_mapping_document(tmp_path: Path) -> None:
    config_path = tmp_path / "docgraph.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(TypeError, match="mapping"):
        load_site_config(config_path)
