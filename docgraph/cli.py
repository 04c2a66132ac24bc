"""Cyclopts CLI entrypoint for resolving docgraph documentation sites.

The ``docgraph`` console script defined here resolves the site graph described
by ``docgraph.yaml``, lists the registered pages, and prints the anchor table
of a single document. Typical usage involves running ``docgraph build`` in CI
before the template and asset stages, and ``docgraph anchors`` while writing
documents to look up the id a heading will receive.

Examples
--------
Resolve the site using the default configuration:

>>> from docgraph.cli import main
>>> main()  # doctest: +SKIP

Write the graph to a custom location and fail on any warning:

>>> from docgraph.cli import app
>>> app(["build", "--output", "dist/sitemap.json", "--strict"])  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .build import SiteBuilder
from .config import load_site_config
from .errors import StrictModeError
from .generator import HtmlContentRenderer
from .outline import parse_outline
from .registry import build_registry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import ParseWarning

DEFAULT_CONFIG = Path("docgraph.yaml")

app = App(name="docgraph", config=cyclopts.config.Env("DOCGRAPH_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _report(warnings: cabc.Sequence[ParseWarning], *, strict: bool) -> None:
    for warning in warnings:
        print(f"warning: {warning}")
    if strict and warnings:
        msg = f"{len(warnings)} warning(s) reported in strict mode."
        raise StrictModeError(msg)


@app.command(help="Resolve the site graph and write it as JSON.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCGRAPH_CONFIG")
    ] = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Override the graph output path", env_var="DOCGRAPH_OUTPUT"),
    ] = None,
    strict: typ.Annotated[
        bool, Parameter(help="Treat warnings as errors", env_var="DOCGRAPH_STRICT")
    ] = False,
) -> None:
    """Resolve every page of the configured site and persist the graph.

    Parameters
    ----------
    config : Path, optional
        Path to the ``docgraph.yaml`` configuration file (overridable via
        ``DOCGRAPH_CONFIG``).
    output : Path or None, optional
        Override for the JSON destination configured under ``site.output``.
    strict : bool, optional
        Raise :class:`~docgraph.errors.StrictModeError` when any warning was
        recorded. The graph is written before the check so it can be inspected.

    Raises
    ------
    ContentError
        When a document contains an authoring error.
    StrictModeError
        When ``strict`` is set and the build produced warnings.
    """
    site_config = load_site_config(config)
    graph, path = SiteBuilder(site_config).run(output)
    print(f"wrote {_format_path(path)}")
    _report(graph.warnings, strict=strict)


@app.command(help="List every page registered by the outline.")
def pages(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCGRAPH_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print ``url``, ``file`` and ``title`` for each page without rendering."""
    site_config = load_site_config(config)
    outline = parse_outline(
        site_config.outline.read_text(encoding="utf-8"),
        source=str(site_config.outline),
    )
    registry = build_registry(
        outline.nodes,
        root_title=site_config.root_title,
        source=str(site_config.outline),
    )
    for url, record in registry.pages.items():
        print(f"{url}  {record.file}  {record.title}")
    _report([*outline.warnings, *registry.warnings], strict=False)


@app.command(help="Print the heading anchors of a markdown document.")
def anchors(
    file: typ.Annotated[Path, Parameter(help="Markdown document to inspect")],
) -> None:
    """Print ``anchor``, GitHub-style slug and text for each heading of ``file``.

    Headings are collected by rendering the document, so the printed ids are
    the ones the built page carries. Links are left unresolved.
    """
    table = HtmlContentRenderer().anchor_table(
        file.read_text(encoding="utf-8"), source=_format_path(file)
    )
    for heading in table.headings:
        indent = "  " * (heading.level - 1)
        print(f"{indent}#{heading.anchor}  ({heading.github_slug})  {heading.text}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docgraph`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
