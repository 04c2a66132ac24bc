"""Shared dataclasses used by the content graph pipeline."""

from __future__ import annotations

import dataclasses as dc
import types
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dc.dataclass(frozen=True, slots=True)
class ParseWarning:
    """A best-effort anomaly recorded instead of aborting the build.

    Attributes
    ----------
    source : str
        Where the anomaly was found (outline path, document path, or URL).
    message : str
        Human-readable description of the problem.
    line : int | None
        1-based line number in ``source`` when known.
    """

    source: str
    message: str
    line: int | None = None

    def __str__(self) -> str:
        location = self.source if self.line is None else f"{self.source}:{self.line}"
        return f"{location}: {self.message}"


@dc.dataclass(slots=True)
class PageRecord:
    """A single page of the site graph.

    Attributes
    ----------
    file : str
        Document path relative to the content root.
    url : str
        Canonical absolute URL of the page.
    name : str
        Navigation label taken from the outline.
    title : str
        Full page title (name, ancestor names, and the root title suffix).
    section : str | None
        First URL segment, or ``None`` for the root page.
    breadcrumbs : list[str]
        Ancestor URLs ordered from the root to the parent.
    meta : dict[str, Any]
        Layout overrides parsed from the outline's inline metadata.
    html : str
        Rendered document content; empty until the page is processed.
    """

    file: str
    url: str
    name: str
    title: str
    section: str | None
    breadcrumbs: list[str]
    meta: dict[str, typ.Any] = dc.field(default_factory=dict)
    html: str = ""

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serialisable mapping of the record."""
        return dc.asdict(self)


@dc.dataclass(frozen=True, slots=True)
class LinkTable:
    """Read-only bidirectional lookup between documents and URLs."""

    file_to_url: cabc.Mapping[str, str]
    url_to_file: cabc.Mapping[str, str]

    @classmethod
    def from_pages(cls, pages: cabc.Mapping[str, PageRecord]) -> LinkTable:
        """Build the lookup tables from the registered page records."""
        file_to_url = {record.file: url for url, record in pages.items()}
        url_to_file = {url: record.file for url, record in pages.items()}
        return cls(
            file_to_url=types.MappingProxyType(file_to_url),
            url_to_file=types.MappingProxyType(url_to_file),
        )


@dc.dataclass(frozen=True, slots=True)
class ResolvedLink:
    """Final attribute value written into rendered HTML."""

    href: str
    is_external: bool = False


__all__ = ["LinkTable", "PageRecord", "ParseWarning", "ResolvedLink"]
