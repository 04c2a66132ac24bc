"""High-level orchestration for resolving a whole documentation site.

This module reads the outline, builds the page registry, renders every page
in outline order through a shared :class:`~docgraph.processor.DocumentProcessor`,
and writes the resolved site graph as JSON for the template and asset stages
that run afterwards.

Example
-------
>>> from pathlib import Path
>>> from docgraph.build import SiteBuilder
>>> from docgraph.config import load_site_config
>>> config = load_site_config(Path("docgraph.yaml"))  # doctest: +SKIP
>>> graph, path = SiteBuilder(config).run()  # doctest: +SKIP
>>> sorted(graph.pages)[:2]  # doctest: +SKIP
['/', '/about']
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import typing as typ
from pathlib import Path

from ._constants import CODE_STYLESHEET_NAME, DEFAULT_ROOT_TITLE
from .generator import HtmlContentRenderer
from .links import load_image_mapping, mapping_image_resolver
from .models import LinkTable, PageRecord, ParseWarning
from .outline import parse_outline
from .processor import DocumentProcessor, ProcessingState
from .registry import build_registry

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .generator import DocumentRenderer
    from .links import ImageResolver
    from .registry import SitemapNode

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class SiteGraph:
    """Fully resolved site: navigation, rendered pages, and lookups."""

    sitemap: list[SitemapNode]
    pages: dict[str, PageRecord]
    links: LinkTable
    warnings: list[ParseWarning] = dc.field(default_factory=list)

    @property
    def file_to_url(self) -> dict[str, str]:
        """Return the document path to URL lookup as a plain dict."""
        return dict(self.links.file_to_url)

    @property
    def url_to_file(self) -> dict[str, str]:
        """Return the URL to document path lookup as a plain dict."""
        return dict(self.links.url_to_file)

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the JSON payload consumed by downstream site stages."""
        return {
            "sitemap": self.sitemap,
            "pages": {url: record.to_dict() for url, record in self.pages.items()},
            "file_to_url": self.file_to_url,
            "url_to_file": self.url_to_file,
        }


def resolve_site(
    outline_text: str,
    content_root: Path,
    *,
    root_title: str | None = None,
    outline_source: str = "<outline>",
    image_resolver: ImageResolver | None = None,
    strict_anchors: bool = False,
    renderer: DocumentRenderer | None = None,
    state: ProcessingState | None = None,
) -> SiteGraph:
    """Resolve the site described by ``outline_text``.

    Parameters
    ----------
    outline_text : str
        Outline source listing every page.
    content_root : Path
        Directory the outline's document paths are relative to.
    root_title : str, optional
        Title suffix used when the outline has no ``/`` page.
    outline_source : str, optional
        Label for warnings raised while parsing the outline.
    image_resolver : Callable[[str], str | None], optional
        Maps content-relative image paths to hashed asset names.
    strict_anchors : bool, optional
        Raise on fragments that match no heading instead of warning.
    renderer : DocumentRenderer, optional
        Markdown renderer; defaults to ``HtmlContentRenderer``.
    state : ProcessingState, optional
        Build state to reuse; it is reset before rendering starts.

    Returns
    -------
    SiteGraph
        Pages with rendered HTML, the sitemap, lookups, and every warning.

    Raises
    ------
    ContentError
        When any document carries an authoring error; the build stops.
    FileNotFoundError
        When a registered document is missing.
    """
    outline = parse_outline(outline_text, source=outline_source)
    registry = build_registry(
        outline.nodes, root_title=root_title or DEFAULT_ROOT_TITLE, source=outline_source
    )

    state = state if state is not None else ProcessingState()
    state.reset()
    processor = DocumentProcessor(
        registry,
        content_root,
        state=state,
        renderer=renderer,
        image_resolver=image_resolver,
        strict_anchors=strict_anchors,
    )
    for url, record in registry.pages.items():
        record.html = processor.process_url(url)
    logger.debug("Resolved %d pages", len(registry.pages))

    return SiteGraph(
        sitemap=registry.sitemap,
        pages=registry.pages,
        links=registry.links,
        warnings=[*outline.warnings, *registry.warnings, *state.warnings],
    )


class SiteBuilder:
    """Resolve and persist the site graph described by a :class:`SiteConfig`."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        renderer: DocumentRenderer | None = None,
        state: ProcessingState | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer
        self.state = state if state is not None else ProcessingState()

    def resolve(self) -> SiteGraph:
        """Return the resolved site graph without writing anything."""
        config = self.config
        image_resolver = None
        if config.image_mapping is not None:
            if config.image_mapping.exists():
                mapping = load_image_mapping(config.image_mapping)
                image_resolver = mapping_image_resolver(mapping)
            else:
                logger.warning("Image mapping %s not found", config.image_mapping)

        if self.renderer is None:
            self.renderer = HtmlContentRenderer(config.pygments_style)

        return resolve_site(
            config.outline.read_text(encoding="utf-8"),
            config.content_root,
            root_title=config.root_title,
            outline_source=str(config.outline),
            image_resolver=image_resolver,
            strict_anchors=config.strict_anchors,
            renderer=self.renderer,
            state=self.state,
        )

    def run(self, output: Path | None = None) -> tuple[SiteGraph, Path]:
        """Resolve the site and write the graph JSON.

        The renderer's code stylesheet is written beside the graph as
        ``codehilite.css`` so the highlighted markup can be styled.

        Returns
        -------
        tuple[SiteGraph, Path]
            The resolved graph and the path it was written to.
        """
        graph = self.resolve()
        path = write_site_graph(graph, output or self.config.output)
        if self.renderer is not None:
            stylesheet_path = path.with_name(CODE_STYLESHEET_NAME)
            write_stylesheet(self.renderer.stylesheet, stylesheet_path)
        return graph, path


def write_site_graph(graph: SiteGraph, path: Path) -> Path:
    """Serialise ``graph`` as UTF-8 JSON at ``path`` and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(graph.to_dict(), ensure_ascii=False, indent=4, default=str)
    path.write_text(payload, encoding="utf-8")
    return path


def write_stylesheet(css: str, path: Path) -> Path:
    """Write the code highlighting ``css`` to ``path`` and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(css, encoding="utf-8")
    logger.debug("Wrote code stylesheet to %s", path)
    return path


__all__ = [
    "SiteBuilder",
    "SiteGraph",
    "resolve_site",
    "write_site_graph",
    "write_stylesheet",
]
