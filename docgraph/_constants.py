"""Common literal values used across docgraph.

These constants keep outline grammar details, output filenames, and link
classification rules centralized so the parser, resolver, and tests can import
the same values without drifting. Intended for internal use within the
docgraph package.

Examples
--------
>>> from docgraph import _constants
>>> _constants.INDENT_SIZE
2
>>> _constants.TITLE_SEPARATOR.join(["Page", "Docs"])
'Page | Docs'
"""

INDENT_SIZE = 2
MAX_HEADING_LEVEL = 6
HEADING_TAGS = tuple(f"h{level}" for level in range(1, MAX_HEADING_LEVEL + 1))
TITLE_SEPARATOR = " | "
CHAIN_SEPARATOR = " → "
DEFAULT_ROOT_TITLE = "Docs"
DEFAULT_OUTPUT = ".build/sitemap.json"
CODE_STYLESHEET_NAME = "codehilite.css"
DOCUMENT_SUFFIX = ".md"
DISALLOWED_LINK_SUFFIXES = (".html", ".htm", ".php", ".asp", ".jsp")
HEADING_ANCHOR_CLASS = "heading-anchor"
