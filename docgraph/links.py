"""Rewrite document references into absolute site URLs.

The resolver classifies every link target found while rendering a document:
external URIs and absolute site paths pass through, pure fragments resolve to
the current document's hierarchical anchors, and relative ``.md`` references
are looked up in the :class:`~docgraph.models.LinkTable`. A relative link that
names an unregistered document is an authoring error and raises instead of
rendering a dead link.

Example
-------
>>> from docgraph.links import DocumentContext, LinkResolver
>>> from docgraph.models import LinkTable, PageRecord
>>> page = PageRecord("free/tyres.md", "/free/tyres", "Tyres", "Tyres", "free", ["/free"])
>>> resolver = LinkResolver(LinkTable.from_pages({page.url: page}))
>>> document = DocumentContext(url="/dreamer/tyres", file="dreamer/tyres.md")
>>> resolver.resolve("../free/tyres.md#датчики", document).href
'/free/tyres#датчики'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import json
import logging
import posixpath
import typing as typ
from pathlib import Path
from urllib.parse import unquote, urlsplit

from markdown.util import AMP_SUBSTITUTE

from ._constants import DISALLOWED_LINK_SUFFIXES, DOCUMENT_SUFFIX
from .anchors import AnchorTable
from .errors import MalformedLinkError, UnknownAnchorError, UnknownRelativeLinkError
from .models import ParseWarning, ResolvedLink

if typ.TYPE_CHECKING:
    from .models import LinkTable

logger = logging.getLogger(__name__)

ImageResolver = cabc.Callable[[str], str | None]
AnchorProvider = cabc.Callable[[str], AnchorTable]


@dc.dataclass(slots=True)
class DocumentContext:
    """The document whose links are being resolved.

    Attributes
    ----------
    url : str
        Canonical URL of the document.
    file : str
        Document path relative to the content root.
    anchors : AnchorTable | None
        Anchors computed for the document, once its headings have been scanned.
    """

    url: str
    file: str
    anchors: AnchorTable | None = None


def load_image_mapping(path: Path) -> dict[str, str]:
    """Load a JSON mapping of content-relative image paths to hashed names."""
    payload = json.loads(path.read_text(encoding="utf-8") or "{}")
    if not isinstance(payload, dict):
        msg = f"Image mapping '{path}' must contain a JSON object."
        raise TypeError(msg)
    return {str(key): str(value) for key, value in payload.items()}


def mapping_image_resolver(mapping: cabc.Mapping[str, str]) -> ImageResolver:
    """Return an image resolver backed by a static path mapping."""

    def _resolve(path: str) -> str | None:
        return mapping.get(path.lstrip("/"))

    return _resolve


def is_external(target: str) -> bool:
    """Return True for targets that leave the site (schemes, ``//host``)."""
    if target.startswith("//") or target.startswith(AMP_SUBSTITUTE):
        return True
    return bool(urlsplit(target).scheme)


class LinkResolver:
    """Resolve link and image targets against the page registry."""

    def __init__(
        self,
        links: LinkTable,
        *,
        image_resolver: ImageResolver | None = None,
        anchors_for: AnchorProvider | None = None,
        strict_anchors: bool = False,
        warnings: list[ParseWarning] | None = None,
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        links : LinkTable
            Document/URL lookups built by the registry.
        image_resolver : Callable[[str], str | None], optional
            Maps content-relative image paths to hashed asset names.
        anchors_for : Callable[[str], AnchorTable], optional
            Returns the anchor table of another page, processing it on demand.
            Without it, cross-document fragments are emitted unchecked.
        strict_anchors : bool, optional
            Raise :class:`UnknownAnchorError` instead of recording a warning
            when a fragment matches no heading.
        warnings : list[ParseWarning], optional
            Sink for best-effort anomalies; a private list is used when omitted.
        """
        self.links = links
        self.image_resolver = image_resolver
        self.anchors_for = anchors_for
        self.strict_anchors = strict_anchors
        self.warnings = warnings if warnings is not None else []

    def resolve(
        self,
        href: str,
        document: DocumentContext,
        context: cabc.Sequence[str] = (),
    ) -> ResolvedLink:
        """Return the final ``href`` for a link found in ``document``.

        Parameters
        ----------
        href : str
            Link target exactly as authored.
        document : DocumentContext
            Document containing the link.
        context : Sequence[str], optional
            Heading texts enclosing the link, used to resolve section-relative
            fragments.

        Raises
        ------
        MalformedLinkError
            For empty or whitespace-padded targets.
        UnknownRelativeLinkError
            For relative document links that are not registered, escape the
            content root, or point at server-side pages.
        """
        if not href or href != href.strip():
            raise MalformedLinkError(href, document.file)
        if is_external(href):
            return ResolvedLink(href, is_external=True)
        if href.startswith("/"):
            return ResolvedLink(href)
        if href.startswith("#"):
            fragment = self._resolve_fragment(href[1:], document, context)
            return ResolvedLink(f"#{fragment}")

        parsed = urlsplit(href)
        suffix = parsed.path.lower()
        if suffix.endswith(DOCUMENT_SUFFIX):
            return self._resolve_document(href, document)
        if suffix.endswith(DISALLOWED_LINK_SUFFIXES):
            extension = suffix.rsplit(".", 1)[-1]
            reason = (
                f"Relative links to .{extension} files are not allowed. "
                "Use .md files or absolute URLs."
            )
            raise UnknownRelativeLinkError(href, document.file, reason)
        return ResolvedLink(href)

    def resolve_image(self, src: str, document: DocumentContext) -> ResolvedLink:
        """Return the hashed asset URL for an image, or ``src`` when unmapped."""
        if not src or is_external(src) or src.startswith("data:"):
            return ResolvedLink(src, is_external=bool(src))
        if self.image_resolver is None:
            return ResolvedLink(src)

        path = unquote(urlsplit(src).path)
        candidates = [path.lstrip("/")]
        if not path.startswith("/"):
            joined = posixpath.normpath(
                posixpath.join(posixpath.dirname(document.file), path)
            )
            candidates.insert(0, joined)
        for candidate in candidates:
            hashed = self.image_resolver(candidate)
            if hashed:
                return ResolvedLink(f"/{hashed.lstrip('/')}")

        if not src.startswith("/"):
            self._warn(document.file, f"Unmapped image: {src}")
        return ResolvedLink(src)

    def _resolve_document(self, href: str, document: DocumentContext) -> ResolvedLink:
        parsed = urlsplit(href)
        base_dir = posixpath.dirname(document.file)
        target_file = posixpath.normpath(posixpath.join(base_dir, unquote(parsed.path)))
        if target_file == ".." or target_file.startswith("../"):
            reason = "The link points outside the content root."
            raise UnknownRelativeLinkError(href, document.file, reason)

        url = self.links.file_to_url.get(target_file)
        if url is None:
            reason = (
                f'Markdown file not found in sitemap. The file "{target_file}" '
                "is not registered in the site outline."
            )
            raise UnknownRelativeLinkError(href, document.file, reason)

        resolved = url
        if parsed.query:
            resolved = f"{resolved}?{parsed.query}"
        if parsed.fragment:
            fragment = unquote(parsed.fragment)
            self._check_fragment(fragment, url, document)
            resolved = f"{resolved}#{fragment}"
        return ResolvedLink(resolved)

    def _resolve_fragment(
        self, fragment: str, document: DocumentContext, context: cabc.Sequence[str]
    ) -> str:
        decoded = unquote(fragment)
        if document.anchors is None:
            return decoded
        resolved = document.anchors.lookup(decoded, context)
        if resolved is not None:
            return resolved
        self._unknown_anchor(decoded, document.url, document)
        return decoded

    def _check_fragment(self, fragment: str, url: str, document: DocumentContext) -> None:
        """Verify a cross-document fragment against the target's headings."""
        if url == document.url:
            table = document.anchors
        elif self.anchors_for is not None:
            table = self.anchors_for(url)
        else:
            return
        if table is not None and fragment not in table:
            self._unknown_anchor(fragment, url, document)

    def _unknown_anchor(self, fragment: str, target: str, document: DocumentContext) -> None:
        if self.strict_anchors:
            raise UnknownAnchorError(fragment, target, document.file)
        self._warn(document.file, f'Anchor "#{fragment}" matches no heading of {target}')

    def _warn(self, source: str, message: str) -> None:
        warning = ParseWarning(source, message)
        logger.warning("%s", warning)
        self.warnings.append(warning)


__all__ = [
    "DocumentContext",
    "ImageResolver",
    "LinkResolver",
    "is_external",
    "load_image_mapping",
    "mapping_image_resolver",
]
