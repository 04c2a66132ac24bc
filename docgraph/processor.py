"""Render each registered document lazily, once per build, with cycle detection.

Documents reference each other: resolving ``other.md#section`` needs the
anchor table of ``other.md``, which may in turn link back. The processor
renders a target on first request, caches the result for the rest of the
build, and tracks the in-flight URLs so that mutual references fail with a
readable chain instead of recursing forever.

Example
-------
>>> from docgraph.processor import ProcessingState
>>> state = ProcessingState()
>>> state.enter("/a")
>>> state.path
['/a']
>>> state.leave("/a")
>>> state.in_progress
set()
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from .errors import CircularDependencyError, EmptyDocumentError
from .generator import HtmlContentRenderer
from .links import DocumentContext, LinkResolver

if typ.TYPE_CHECKING:
    from .anchors import AnchorTable
    from .generator import DocumentRenderer
    from .links import ImageResolver
    from .models import ParseWarning
    from .registry import PageRegistry

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class ProcessingState:
    """Mutable bookkeeping shared by every document render of one build.

    Attributes
    ----------
    in_progress : set[str]
        URLs whose rendering has started but not finished.
    path : list[str]
        The same URLs in the order they were entered, used for cycle messages.
    completed : dict[str, str]
        Rendered HTML keyed by URL.
    anchors : dict[str, AnchorTable]
        Anchor tables of the rendered documents keyed by URL.
    warnings : list[ParseWarning]
        Best-effort anomalies recorded while rendering.
    """

    in_progress: set[str] = dc.field(default_factory=set)
    path: list[str] = dc.field(default_factory=list)
    completed: dict[str, str] = dc.field(default_factory=dict)
    anchors: dict[str, AnchorTable] = dc.field(default_factory=dict)
    warnings: list[ParseWarning] = dc.field(default_factory=list)

    def enter(self, url: str) -> None:
        """Mark ``url`` as in flight, rejecting re-entry."""
        if url in self.in_progress:
            raise CircularDependencyError(self.path, url)
        self.in_progress.add(url)
        self.path.append(url)

    def leave(self, url: str) -> None:
        """Remove ``url`` from the in-flight set and path."""
        self.in_progress.discard(url)
        if self.path and self.path[-1] == url:
            self.path.pop()
        elif url in self.path:
            self.path.remove(url)

    def reset(self) -> None:
        """Forget everything recorded by a previous build."""
        self.in_progress.clear()
        self.path.clear()
        self.completed.clear()
        self.anchors.clear()
        self.warnings.clear()


class DocumentProcessor:
    """Render registered documents on demand against a shared state."""

    def __init__(
        self,
        registry: PageRegistry,
        content_root: Path,
        *,
        state: ProcessingState | None = None,
        renderer: DocumentRenderer | None = None,
        image_resolver: ImageResolver | None = None,
        strict_anchors: bool = False,
    ) -> None:
        """Initialize the processor.

        Parameters
        ----------
        registry : PageRegistry
            Pages and link tables produced by the registry builder.
        content_root : Path
            Directory that registered document paths are relative to.
        state : ProcessingState, optional
            Build state to share; a fresh one is created when omitted.
        renderer : DocumentRenderer, optional
            Markdown renderer; defaults to :class:`HtmlContentRenderer`.
        image_resolver : Callable[[str], str | None], optional
            Maps content-relative image paths to hashed asset names.
        strict_anchors : bool, optional
            Raise on fragments that match no heading instead of warning.
        """
        self.registry = registry
        self.content_root = Path(content_root)
        self.state = state if state is not None else ProcessingState()
        self.renderer = renderer or HtmlContentRenderer()
        self.resolver = LinkResolver(
            registry.links,
            image_resolver=image_resolver,
            anchors_for=self.anchors_for,
            strict_anchors=strict_anchors,
            warnings=self.state.warnings,
        )

    def process_url(self, url: str) -> str:
        """Render the registered page at ``url``."""
        file = self.registry.url_to_file[url]
        return self.process_document(url, self.content_root / file)

    def process_document(self, url: str, file_path: Path) -> str:
        """Return the rendered HTML for ``url``, rendering it at most once.

        Parameters
        ----------
        url : str
            Canonical URL of the document.
        file_path : Path
            Location of the markdown source.

        Returns
        -------
        str
            Rendered HTML, served from the cache when already completed.

        Raises
        ------
        CircularDependencyError
            When ``url`` is already being rendered further up the call chain.
        EmptyDocumentError
            When the source holds no content.
        FileNotFoundError
            When the source file does not exist.
        """
        cached = self.state.completed.get(url)
        if cached is not None and url not in self.state.in_progress:
            logger.debug("Using cached render for %s", url)
            return cached

        self.state.enter(url)
        try:
            source = self._source_label(url, Path(file_path))
            logger.debug("Rendering %s from %s", url, source)
            text = Path(file_path).read_text(encoding="utf-8")
            if not text.strip():
                raise EmptyDocumentError(source)
            document = DocumentContext(url=url, file=source)
            rendered = self.renderer.render_document(text, self.resolver, document)
        finally:
            self.state.leave(url)

        self.state.completed[url] = rendered.html
        self.state.anchors[url] = rendered.anchors
        return rendered.html

    def anchors_for(self, url: str) -> AnchorTable:
        """Return the anchor table of ``url``, rendering the page first if needed."""
        if url not in self.state.anchors:
            self.process_url(url)
        return self.state.anchors[url]

    def _source_label(self, url: str, file_path: Path) -> str:
        registered = self.registry.url_to_file.get(url)
        if registered is not None:
            return registered
        try:
            return file_path.relative_to(self.content_root).as_posix()
        except ValueError:
            return file_path.as_posix()


__all__ = ["DocumentProcessor", "ProcessingState"]
