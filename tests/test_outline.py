"""Unit tests for the outline parser."""

from __future__ import annotations

from docgraph.outline import Leaf, Section, parse_outline


def test_nested_items_become_sections() -> None:
    outline = parse_outline(
        "sitemap:\n"
        "- Home [/, index.md]\n"
        "  - Free [free, free/index.md]\n"
        "    - Tyres [tyres, free/tyres.md]\n"
        "  - About [about, about.md]\n"
        "- Contacts [/contacts, contacts.md]\n"
    )

    home, contacts = outline.nodes
    assert isinstance(home, Section), "an item followed by deeper items is a section"
    assert isinstance(contacts, Leaf), "the last top-level item has no children"
    free, about = home.children
    assert isinstance(free, Section), "Free owns the Tyres item"
    assert free.children == [Leaf("Tyres [tyres, free/tyres.md]")], (
        "leaf text is kept verbatim for the registry"
    )
    assert about == Leaf("About [about, about.md]"), "About returns to level one"
    assert outline.warnings == [], "a well-formed outline produces no warnings"


def test_comments_and_blank_lines_do_not_break_nesting() -> None:
    outline = parse_outline(
        "- Guide [/guide, guide.md]\n"
        "\n"
        "  # install steps follow\n"
        "  - Install [install, guide/install.md]\n"
    )

    (guide,) = outline.nodes
    assert isinstance(guide, Section), "lookahead skips blank and comment lines"
    assert [child.text for child in guide.children] == [
        "Install [install, guide/install.md]"
    ], "the indented item is nested under Guide"


def test_dedent_closes_several_levels() -> None:
    outline = parse_outline(
        "- A [/a, a.md]\n"
        "  - B [b, b.md]\n"
        "    - C [c, c.md]\n"
        "- D [/d, d.md]\n"
    )

    assert [node.text.split()[0] for node in outline.nodes] == ["A", "D"], (
        "D returns to the top level after a two-level dedent"
    )


def test_unparsable_lines_are_reported_with_line_numbers() -> None:
    outline = parse_outline(
        "- Home [/, index.md]\nthis line is not a bullet\n- About [/about, about.md]\n",
        source="sitemap.yml",
    )

    assert len(outline.nodes) == 2, "the stray line is skipped"
    (warning,) = outline.warnings
    assert warning.line == 2, "the warning points at the offending line"
    assert str(warning).startswith("sitemap.yml:2:"), "the warning names its source"


def test_empty_outline() -> None:
    outline = parse_outline("sitemap:\n\n# nothing yet\n")

    assert outline.nodes == [], "an outline with no bullets has no nodes"
    assert outline.warnings == [], "wrapper, blank, and comment lines are silent"


def test_only_the_leading_wrapper_key_is_ignored() -> None:
    outline = parse_outline(
        "sitemap:\n"
        "- Home [/, index.md]\n"
        "pages:\n"
        "  - About [about, about.md]\n",
        source="sitemap.yml",
    )

    (home,) = outline.nodes
    assert isinstance(home, Section), "the stray key does not split Home from About"
    assert [warning.line for warning in outline.warnings] == [3], (
        "a key after the first bullet is reported"
    )


def test_second_or_indented_wrapper_key_is_reported() -> None:
    outline = parse_outline("  sitemap:\nnav:\n- Home [/, index.md]\n")

    assert outline.nodes == [Leaf("Home [/, index.md]")], "bullets still parse"
    assert [warning.line for warning in outline.warnings] == [1, 2], (
        "an indented key is not a wrapper, and neither is a key after it"
    )
