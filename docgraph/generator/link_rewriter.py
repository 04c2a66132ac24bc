"""Markdown extension that assigns heading anchors and rewrites links."""

from __future__ import annotations

import re
import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import ETX, STX

from docgraph._constants import HEADING_ANCHOR_CLASS, HEADING_TAGS
from docgraph.anchors import (
    CUSTOM_ANCHOR_PATTERN,
    HeadingAnchor,
    HeadingStack,
    clean_heading_text,
    compute_anchors,
)

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown

    from docgraph.links import DocumentContext, LinkResolver
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

PLACEHOLDER_PATTERN = re.compile(f"{STX}[^{ETX}]*{ETX}")


class ContentGraphExtension(Extension):
    """Resolve anchors and links of one document against the site graph.

    Insert this extension into a ``markdown.Markdown`` instance rendering
    ``document``: headings receive hierarchical ids wrapped in a self-link,
    ``<a href>`` targets go through :meth:`LinkResolver.resolve`, and
    ``<img src>`` targets through :meth:`LinkResolver.resolve_image`. Without a
    resolver only the headings are rewritten. The computed
    :class:`~docgraph.anchors.AnchorTable` is stored on ``document.anchors``
    before any link is resolved.
    """

    def __init__(
        self, resolver: LinkResolver | None, document: DocumentContext
    ) -> None:
        super().__init__()
        self.resolver = resolver
        self.document = document

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the content-graph treeprocessor on the Markdown instance."""
        processor = ContentGraphTreeprocessor(md, self.resolver, self.document)
        md.treeprocessors.register(processor, "docgraph_content_graph", 15)


class ContentGraphTreeprocessor(Treeprocessor):
    """Assign heading ids and rewrite link targets in document order."""

    def __init__(
        self, md: Markdown, resolver: LinkResolver | None, document: DocumentContext
    ) -> None:
        super().__init__(md)
        self.resolver = resolver
        self.document = document

    def run(self, root: Element) -> Element:
        """Rewrite headings, anchors, and images in the parsed markdown tree."""
        elements = [
            element
            for element in root.iter()
            if element.tag in HEADING_TAGS or element.tag in ("a", "img")
        ]
        headings = [element for element in elements if element.tag in HEADING_TAGS]
        table = compute_anchors(
            [(int(element.tag[1]), _heading_text(element)) for element in headings],
            source=self.document.file,
        )
        self.document.anchors = table

        stack = HeadingStack()
        assigned = iter(table.headings)
        for element in elements:
            if element.tag in HEADING_TAGS:
                anchor = next(assigned)
                stack.push(anchor.level, clean_heading_text(anchor.text))
                _apply_anchor(element, anchor)
            elif self.resolver is None:
                continue
            elif element.tag == "a":
                href = element.get("href")
                if href is not None:
                    link = self.resolver.resolve(href, self.document, stack.path())
                    element.set("href", link.href)
            else:
                src = element.get("src")
                if src:
                    element.set("src", self.resolver.resolve_image(src, self.document).href)
        return root


def _heading_text(element: Element) -> str:
    """Return the visible text of a heading without inline placeholders."""
    return PLACEHOLDER_PATTERN.sub("", "".join(element.itertext())).strip()


def _apply_anchor(element: Element, anchor: HeadingAnchor) -> None:
    """Drop any ``{#id}`` suffix, set the id, and wrap the content in a self-link."""
    if len(element):
        last = element[-1]
        if last.tail:
            last.tail = CUSTOM_ANCHOR_PATTERN.sub("", last.tail)
    elif element.text:
        element.text = CUSTOM_ANCHOR_PATTERN.sub("", element.text)

    if not anchor.anchor:
        return
    element.set("id", anchor.anchor)
    if any(child.tag == "a" for child in element.iter()):
        return
    link = etree.Element("a", {"href": f"#{anchor.anchor}", "class": HEADING_ANCHOR_CLASS})
    link.text, element.text = element.text, None
    for child in list(element):
        element.remove(child)
        link.append(child)
    element.append(link)


__all__ = ["ContentGraphExtension", "ContentGraphTreeprocessor"]
