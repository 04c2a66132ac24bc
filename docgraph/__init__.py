"""Resolve documentation sites built from interlinked Markdown documents.

This package turns a declarative site outline plus a corpus of
cross-referencing documents into a resolved site graph: canonical URLs,
rendered HTML with absolute links, and stable hierarchical heading anchors.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docgraph import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
