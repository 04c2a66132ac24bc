"""Tests for the Markdown renderer and its content-graph extension."""

from __future__ import annotations

from bs4 import BeautifulSoup

from docgraph.generator import HtmlContentRenderer
from docgraph.links import DocumentContext, LinkResolver
from docgraph.models import LinkTable, PageRecord


def _resolver() -> LinkResolver:
    page = PageRecord("guide/setup.md", "/guide/setup", "Setup", "Setup", "guide", [])
    return LinkResolver(LinkTable.from_pages({page.url: page}))


def test_render_document_returns_anchors_and_highlighted_code() -> None:
    document = DocumentContext(url="/guide/intro", file="guide/intro.md")
    source = (
        "# Intro\n\n"
        "## Install\n\n"
        "```rust,no_run\n"
        'fn main() { println!("hi"); }\n'
        "```\n\n"
        "Continue with [setup](setup.md).\n"
    )

    rendered = HtmlContentRenderer().render_document(source, _resolver(), document)

    assert rendered.anchors.ids == {"intro", "intro-install"}, "anchors are returned"
    assert document.anchors is rendered.anchors, "the document keeps its table"
    soup = BeautifulSoup(rendered.html, "html.parser")
    block = soup.select_one("div.codehilite")
    assert block is not None, "fenced code is highlighted"
    assert block.get("data-language") == "rust", "fence labels are normalised"
    assert soup.find("a", string="setup")["href"] == "/guide/setup", (
        "document links are rewritten while rendering"
    )


def test_heading_with_inline_markup_keeps_its_children() -> None:
    document = DocumentContext(url="/guide/intro", file="guide/intro.md")

    rendered = HtmlContentRenderer().render_document(
        "# Use `docgraph` *today*\n", _resolver(), document
    )

    heading = BeautifulSoup(rendered.html, "html.parser").h1
    assert heading["id"] == "use-docgraph-today", "inline markup is slugified as text"
    link = heading.find("a", class_="heading-anchor")
    assert link.code.get_text() == "docgraph", "inline code moves inside the self-link"
    assert link.em.get_text() == "today", "emphasis moves inside the self-link"


def test_blank_markdown_renders_nothing() -> None:
    assert HtmlContentRenderer().markdown("  \n") == "", "blank input yields no HTML"


def test_tilde_and_backtick_fences_keep_their_languages() -> None:
    html = HtmlContentRenderer().markdown(
        "~~~python\nprint(1)\n~~~\n\n```rust\nfn main() {}\n```\n\n```\nplain\n```\n"
    )

    blocks = BeautifulSoup(html, "html.parser").select("div.codehilite")
    assert [block.get("data-language") for block in blocks] == [
        "python",
        "rust",
        "text",
    ], "each block is labelled with its own fence language"


def test_anchor_table_matches_rendered_ids() -> None:
    source = "Overview\n========\n\n## See [Setup](setup.md)\n\n## **Bold** part\n"
    document = DocumentContext(url="/guide/intro", file="guide/intro.md")

    rendered = HtmlContentRenderer().render_document(source, _resolver(), document)
    table = HtmlContentRenderer().anchor_table(source, source="guide/intro.md")

    soup = BeautifulSoup(rendered.html, "html.parser")
    rendered_ids = [heading["id"] for heading in soup.find_all(["h1", "h2"])]
    assert rendered_ids == ["overview", "overview-see-setup", "overview-bold-part"], (
        "setext headings and inline links contribute their visible text"
    )
    assert [heading.anchor for heading in table.headings] == rendered_ids, (
        "the standalone table agrees with the rendered page"
    )


def test_stylesheet_targets_codehilite() -> None:
    assert ".codehilite" in HtmlContentRenderer("friendly").stylesheet, (
        "pygments rules are scoped to the codehilite class"
    )
