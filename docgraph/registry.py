"""Flatten the navigation tree into page records and URL lookup tables.

Every outline item has the form ``Title [url, file]`` with an optional third
element holding an inline metadata mapping (``{ layout: 'page-index' }``).
Relative URLs are resolved against the parent item, breadcrumbs and sections
are derived from the URL path, and titles are assembled in a second pass once
every ancestor record exists.

Example
-------
>>> from docgraph.outline import parse_outline
>>> from docgraph.registry import build_registry
>>> outline = parse_outline("- Home [/, index.md]\\n  - Guide [guide, guide.md]")
>>> registry = build_registry(outline.nodes)
>>> registry.pages["/guide"].title
'Guide | Home'
>>> registry.links.file_to_url["guide.md"]
'/guide'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ._constants import DEFAULT_ROOT_TITLE, TITLE_SEPARATOR
from .models import LinkTable, PageRecord, ParseWarning
from .outline import Leaf, Section

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .outline import NavigationNode

logger = logging.getLogger(__name__)

ENTRY_PATTERN = re.compile(
    r"^(?P<title>.*?)\s*\[(?P<url>[^,\]]+),\s*(?P<file>[^,\]]+?)\s*"
    r"(?:,\s*(?P<meta>\{.*\}))?\s*\]$"
)

SitemapNode = str | dict[str, list["SitemapNode"]]


@dc.dataclass(slots=True)
class OutlineEntry:
    """Parsed ``Title [url, file, {meta}]`` outline item.

    Attributes
    ----------
    title : str
        Navigation label.
    url : str
        URL exactly as written (absolute or relative to the parent item).
    file : str
        Document path relative to the content root.
    meta : dict[str, Any]
        Parsed inline metadata; empty when absent or unparsable.
    meta_error : str | None
        Description of the metadata parse failure, if one occurred.
    """

    title: str
    url: str
    file: str
    meta: dict[str, typ.Any] = dc.field(default_factory=dict)
    meta_error: str | None = None


@dc.dataclass(slots=True)
class PageRegistry:
    """Flattened site graph before any document has been rendered."""

    sitemap: list[SitemapNode]
    pages: dict[str, PageRecord]
    links: LinkTable
    warnings: list[ParseWarning]

    @property
    def file_to_url(self) -> cabc.Mapping[str, str]:
        """Return the document path to URL lookup."""
        return self.links.file_to_url

    @property
    def url_to_file(self) -> cabc.Mapping[str, str]:
        """Return the URL to document path lookup."""
        return self.links.url_to_file


def _parse_meta(raw: str) -> tuple[dict[str, typ.Any], str | None]:
    """Parse the inline flow mapping used for per-page layout overrides."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(raw)
    except YAMLError as exc:
        return {}, str(exc).splitlines()[0] if str(exc) else type(exc).__name__
    if not isinstance(loaded, dict):
        return {}, "metadata must be a mapping"
    return {str(key): value for key, value in loaded.items()}, None


def parse_outline_entry(line: str) -> OutlineEntry | None:
    """Parse a ``Title [url, file, {meta}]`` item, or return None when malformed.

    Examples
    --------
    >>> entry = parse_outline_entry("Home [/, index.md, { layout: 'index' }]")
    >>> entry.url, entry.file, entry.meta
    ('/', 'index.md', {'layout': 'index'})
    >>> parse_outline_entry("no brackets here") is None
    True
    """
    match = ENTRY_PATTERN.match(line.strip())
    if not match:
        return None
    entry = OutlineEntry(
        title=match.group("title").strip(),
        url=match.group("url").strip(),
        file=match.group("file").strip(),
    )
    raw_meta = match.group("meta")
    if raw_meta:
        entry.meta, entry.meta_error = _parse_meta(raw_meta)
    return entry


def build_full_url(parent_url: str, url: str) -> str:
    """Resolve ``url`` against ``parent_url`` unless it is already absolute.

    Examples
    --------
    >>> build_full_url("/free/", "models")
    '/free/models'
    >>> build_full_url("/free", "/about")
    '/about'
    """
    if url.startswith("/"):
        return url
    return f"{parent_url.rstrip('/')}/{url}"


def _breadcrumbs(url: str) -> tuple[list[str], str | None]:
    """Return ancestor URLs and the section name derived from ``url``."""
    parts = [part for part in url.split("/") if part]
    section = parts[0] if parts else None
    crumbs = ["/" + "/".join(parts[: idx + 1]) for idx in range(len(parts) - 1)]
    return crumbs, section


class RegistryBuilder:
    """Walk navigation nodes and accumulate page records."""

    def __init__(
        self, *, root_title: str = DEFAULT_ROOT_TITLE, source: str = "<outline>"
    ) -> None:
        self.root_title = root_title
        self.source = source
        self.pages: dict[str, PageRecord] = {}
        self.warnings: list[ParseWarning] = []
        self._files: set[str] = set()

    def build(
        self, nodes: cabc.Sequence[NavigationNode], parent_url: str = ""
    ) -> PageRegistry:
        """Return the registry for ``nodes`` with titles already assembled."""
        sitemap: list[SitemapNode] = []
        self._walk(nodes, parent_url, sitemap)
        self._assign_titles()
        return PageRegistry(
            sitemap=sitemap,
            pages=self.pages,
            links=LinkTable.from_pages(self.pages),
            warnings=self.warnings,
        )

    def _warn(self, message: str) -> None:
        warning = ParseWarning(self.source, message)
        logger.warning("%s", warning)
        self.warnings.append(warning)

    def _walk(
        self,
        nodes: cabc.Sequence[NavigationNode],
        parent_url: str,
        sitemap: list[SitemapNode],
    ) -> None:
        for node in nodes:
            entry = parse_outline_entry(node.text)
            if entry is None:
                self._warn(f"Could not parse sitemap line: {node.text}")
                if isinstance(node, Section):
                    self._walk(node.children, parent_url, sitemap)
                continue
            if entry.meta_error:
                self._warn(
                    f"Could not parse metadata for line: {node.text} ({entry.meta_error})"
                )

            url = build_full_url(parent_url, entry.url)
            registered = self._register(entry, url)

            match node:
                case Section(children=children) if children:
                    nested: list[SitemapNode] = []
                    self._walk(children, url, nested)
                    if registered:
                        sitemap.append({url: nested})
                    else:
                        sitemap.extend(nested)
                case Leaf() | Section():
                    if registered:
                        sitemap.append(url)

    def _register(self, entry: OutlineEntry, url: str) -> bool:
        """Store a record for ``entry`` unless its URL or file is already taken."""
        if url in self.pages:
            self._warn(f"Duplicate URL {url} for {entry.file}; keeping the first entry")
            return False
        if entry.file in self._files:
            self._warn(f"Duplicate file {entry.file} for {url}; keeping the first entry")
            return False
        breadcrumbs, section = _breadcrumbs(url)
        self.pages[url] = PageRecord(
            file=entry.file,
            url=url,
            name=entry.title,
            title=entry.title,
            section=section,
            breadcrumbs=breadcrumbs,
            meta=entry.meta,
        )
        self._files.add(entry.file)
        return True

    def _assign_titles(self) -> None:
        root = self.pages.get("/")
        root_title = root.name if root else self.root_title
        for record in self.pages.values():
            parts = [record.name]
            parts.extend(
                self.pages[crumb].name
                for crumb in reversed(record.breadcrumbs)
                if crumb in self.pages
            )
            if record.url != "/":
                parts.append(root_title)
            if (
                not record.breadcrumbs
                and record.section
                and len(parts) >= 2
                and parts[0] == parts[1]
            ):
                parts.pop(0)
            record.title = TITLE_SEPARATOR.join(parts)


def build_registry(
    nodes: cabc.Sequence[NavigationNode],
    *,
    root_title: str = DEFAULT_ROOT_TITLE,
    source: str = "<outline>",
) -> PageRegistry:
    """Build the page registry for a parsed outline.

    Parameters
    ----------
    nodes : Sequence[NavigationNode]
        Output of :func:`docgraph.outline.parse_outline`.
    root_title : str, optional
        Title suffix used when the outline has no ``/`` page.
    source : str, optional
        Label used in warnings.

    Returns
    -------
    PageRegistry
        Page records keyed by URL, the nested URL sitemap, the immutable
        :class:`~docgraph.models.LinkTable`, and any best-effort warnings.
    """
    return RegistryBuilder(root_title=root_title, source=source).build(nodes)


__all__ = [
    "OutlineEntry",
    "PageRegistry",
    "RegistryBuilder",
    "build_full_url",
    "build_registry",
    "parse_outline_entry",
]
