"""Exception types raised while resolving the content graph.

Content-authoring problems (cycles, broken links, duplicate anchors) derive
from :class:`ContentError` and always abort the affected page. They carry the
context a writer needs to locate the fault: the in-flight URL chain, the
source document, and the offending link text.
"""

from __future__ import annotations

import typing as typ

from ._constants import CHAIN_SEPARATOR

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class DocGraphError(RuntimeError):
    """Base class for every error raised by the resolution engine."""


class ContentError(DocGraphError):
    """Raised when a document contains an authoring error that must be fixed."""


class CircularDependencyError(ContentError):
    """Raised when a document transitively requests its own rendering."""

    def __init__(self, chain: cabc.Sequence[str], url: str) -> None:
        self.chain = [*chain, url]
        super().__init__(f"Circular dependency: {CHAIN_SEPARATOR.join(self.chain)}")


class UnknownRelativeLinkError(ContentError):
    """Raised when a relative link does not point at a registered document."""

    def __init__(self, link: str, source: str, reason: str | None = None) -> None:
        self.link = link
        self.source = source
        detail = reason or (
            "The target document is not registered in the site outline."
        )
        super().__init__(f'Unknown relative link in {source}: "{link}"\n{detail}')


class MalformedLinkError(ContentError):
    """Raised for empty or whitespace-padded link targets."""

    def __init__(self, link: str, source: str) -> None:
        self.link = link
        self.source = source
        super().__init__(
            f'Malformed link target in {source}: "{link}"\n'
            "Link targets must be non-empty and carry no surrounding whitespace."
        )


class DuplicateAnchorError(ContentError):
    """Raised when two headings of one document resolve to the same id."""

    def __init__(self, heading: str, anchor: str, source: str) -> None:
        self.heading = heading
        self.anchor = anchor
        self.source = source
        super().__init__(
            f'Duplicate heading ID in {source}: "{heading}"\n'
            f'The heading generates the duplicate ID "{anchor}". Use custom '
            f'anchor syntax like "# {heading} {{#custom-id}}" to create a unique ID.'
        )


class UnknownAnchorError(ContentError):
    """Raised in strict mode when a fragment matches no heading of its target."""

    def __init__(self, fragment: str, target: str, source: str) -> None:
        self.fragment = fragment
        self.target = target
        self.source = source
        super().__init__(
            f'Unknown anchor in {source}: "#{fragment}" does not match any '
            f"heading of {target}"
        )


class EmptyDocumentError(ContentError):
    """Raised when a registered document has no content."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(
            f"Empty markdown input in {source}\n"
            "Markdown files must contain content. Empty files are not allowed."
        )


class StrictModeError(DocGraphError):
    """Raised when warnings are treated as fatal."""


__all__ = [
    "CircularDependencyError",
    "ContentError",
    "DocGraphError",
    "DuplicateAnchorError",
    "EmptyDocumentError",
    "MalformedLinkError",
    "StrictModeError",
    "UnknownAnchorError",
    "UnknownRelativeLinkError",
]
