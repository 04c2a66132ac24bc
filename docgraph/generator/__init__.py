"""Render site documents with resolved anchors and links."""

from .link_rewriter import ContentGraphExtension
from .renderer import DocumentRenderer, HtmlContentRenderer, RenderedDocument

__all__ = [
    "ContentGraphExtension",
    "DocumentRenderer",
    "HtmlContentRenderer",
    "RenderedDocument",
]
