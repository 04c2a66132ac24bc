"""Render site documents to HTML with highlighted code and resolved links."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

from docgraph.anchors import AnchorTable
from docgraph.links import DocumentContext

from .link_rewriter import ContentGraphExtension

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from markdown.extensions import Extension

    from docgraph.links import LinkResolver
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

CODE_BLOCK_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?[^\n]*\n.*?^\1", re.DOTALL | re.MULTILINE
)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


@dc.dataclass(slots=True)
class RenderedDocument:
    """HTML for one document together with the anchors assigned to it."""

    html: str
    anchors: AnchorTable = dc.field(default_factory=AnchorTable)


class DocumentRenderer(typ.Protocol):
    """Callable surface the document processor renders through."""

    def render_document(
        self, text: str, resolver: LinkResolver, document: DocumentContext
    ) -> RenderedDocument:
        """Return the HTML and anchor table for ``text``."""
        ...

    @property
    def stylesheet(self) -> str:
        """Return the CSS matching the markup of highlighted code."""
        ...


class HtmlContentRenderer:
    """Render markdown documents with consistent code styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer with the given pygments style.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str, extensions: cabc.Sequence[Extension] = ()) -> str:
        """Render markdown into HTML using the configured extensions."""
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists", *extensions],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return self._annotate_codehilite(html, normalized)

    def render_document(
        self, text: str, resolver: LinkResolver, document: DocumentContext
    ) -> RenderedDocument:
        """Render ``document`` and resolve its anchors and links.

        Parameters
        ----------
        text : str
            Markdown source of the document.
        resolver : LinkResolver
            Resolver bound to the site's link table.
        document : DocumentContext
            The document being rendered; its ``anchors`` are filled in.

        Returns
        -------
        RenderedDocument
            Rendered HTML plus the computed anchor table.
        """
        html = self.markdown(text, [ContentGraphExtension(resolver, document)])
        return RenderedDocument(html=html, anchors=document.anchors or AnchorTable())

    def anchor_table(self, text: str, source: str = "<document>") -> AnchorTable:
        """Return the anchors rendering ``text`` would assign, leaving links alone."""
        document = DocumentContext(url="", file=source)
        self.markdown(text, [ContentGraphExtension(None, document)])
        return document.anchors or AnchorTable()

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach language metadata to each highlighted block in converted markdown."""
        languages = [
            match.group(2) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = [
    "CODE_BLOCK_PATTERN",
    "DocumentRenderer",
    "HtmlContentRenderer",
    "RenderedDocument",
]
