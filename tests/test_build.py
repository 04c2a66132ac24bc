"""End-to-end tests for resolving and writing a whole site graph.

The tests build the sample Free/Dreamer site from ``conftest.py``: two
sections that both contain a ``Шины`` page, with the Dreamer page linking to
a heading of the Free page. They verify the rendered links, the titles, the
JSON written by :func:`docgraph.build.write_site_graph`, and that repeated
builds are identical.
"""

from __future__ import annotations

import json
import typing as typ

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from docgraph.build import SiteBuilder, resolve_site, write_site_graph
from docgraph.config import load_site_config
from docgraph.errors import UnknownRelativeLinkError
from docgraph.generator import HtmlContentRenderer

from conftest import SAMPLE_DOCUMENTS, SAMPLE_OUTLINE

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write_config(tmp_path: Path) -> Path:
    (tmp_path / "image-mapping.json").write_text(
        json.dumps({"dreamer/img/scheme.png": "scheme.abc123.png"}), encoding="utf-8"
    )
    config_path = tmp_path / "docgraph.yaml"
    config_path.write_text(
        "site:\n"
        "  outline: sitemap.yml\n"
        "  content_root: content\n"
        "  image_mapping: image-mapping.json\n",
        encoding="utf-8",
    )
    return config_path


def test_cross_section_link_is_not_the_current_page(sample_site: Path) -> None:
    graph = resolve_site(SAMPLE_OUTLINE, sample_site)

    soup = BeautifulSoup(graph.pages["/dreamer/tyres"].html, "html.parser")
    link = soup.find("a", string="датчики")
    assert link["href"] == "/free/tyres#датчики", (
        "the Dreamer page must link into the Free section"
    )
    assert graph.warnings == [], "the sample site resolves cleanly"


def test_pages_titles_and_lookups(sample_site: Path) -> None:
    graph = resolve_site(SAMPLE_OUTLINE, sample_site)

    assert list(graph.pages) == [
        "/",
        "/free",
        "/free/tyres",
        "/dreamer",
        "/dreamer/tyres",
    ], "pages follow outline order"
    assert graph.pages["/dreamer/tyres"].title == "Шины | Dreamer | Главная", (
        "titles list the page, its ancestors, and the root name"
    )
    assert graph.file_to_url["free/tyres.md"] == "/free/tyres", "file lookup"
    assert graph.url_to_file["/dreamer/tyres"] == "dreamer/tyres.md", "URL lookup"
    index = BeautifulSoup(graph.pages["/"].html, "html.parser")
    assert [a["href"] for a in index.select("li a")] == ["/free", "/dreamer"], (
        "relative document links become absolute URLs"
    )


def test_builds_are_idempotent(sample_site: Path) -> None:
    first = resolve_site(SAMPLE_OUTLINE, sample_site)
    second = resolve_site(SAMPLE_OUTLINE, sample_site)

    assert first.to_dict() == second.to_dict(), (
        "two builds over the same inputs yield the same graph"
    )


def test_broken_link_aborts_the_build(write_site: typ.Callable[..., Path]) -> None:
    documents = dict(SAMPLE_DOCUMENTS)
    documents["free/index.md"] = "# Free\n\n[gone](removed.md)\n"
    content_root = write_site(SAMPLE_OUTLINE, documents)

    with pytest.raises(UnknownRelativeLinkError, match="free/index.md"):
        resolve_site(SAMPLE_OUTLINE, content_root)


def test_site_builder_writes_graph(sample_site: Path, tmp_path: Path) -> None:
    config = load_site_config(_write_config(tmp_path))

    graph, path = SiteBuilder(config).run()

    assert path == tmp_path / ".build" / "sitemap.json", "default output location"
    raw = path.read_text(encoding="utf-8")
    assert "Главная" in raw, "non-ASCII text is written literally"
    payload = msgspec_json.decode(raw)
    assert set(payload) == {"sitemap", "pages", "file_to_url", "url_to_file"}, (
        "the graph exposes its four top-level keys"
    )
    assert payload["url_to_file"]["/free/tyres"] == "free/tyres.md", "URL lookup"
    dreamer = BeautifulSoup(payload["pages"]["/dreamer"]["html"], "html.parser")
    assert dreamer.find("img")["src"] == "/scheme.abc123.png", (
        "images are rewritten to their hashed names"
    )
    assert graph.pages["/"].html == payload["pages"]["/"]["html"], (
        "the written graph matches the returned one"
    )


def test_write_site_graph_creates_parent_dirs(sample_site: Path, tmp_path: Path) -> None:
    graph = resolve_site(SAMPLE_OUTLINE, sample_site)

    path = write_site_graph(graph, tmp_path / "nested" / "out" / "graph.json")

    assert msgspec_json.decode(path.read_bytes())["sitemap"] == [
        {"/": [{"/free": ["/free/tyres"]}, {"/dreamer": ["/dreamer/tyres"]}]}
    ], "the nested navigation is serialised"


def test_site_builder_writes_code_stylesheet_beside_graph(
    sample_site: Path, tmp_path: Path
) -> None:
    config_path = _write_config(tmp_path)
    config_path.write_text(
        config_path.read_text(encoding="utf-8") + "  pygments_style: friendly\n",
        encoding="utf-8",
    )

    _graph, path = SiteBuilder(load_site_config(config_path)).run(
        tmp_path / "dist" / "graph.json"
    )

    stylesheet = path.parent / "codehilite.css"
    assert stylesheet.read_text(encoding="utf-8") == (
        HtmlContentRenderer("friendly").stylesheet
    ), "the configured pygments style is written next to the graph"
    assert ".codehilite" in stylesheet.read_text(encoding="utf-8"), (
        "the rules target the highlighted blocks"
    )
