r"""Parse the indented site outline into a navigation tree.

The outline is an ad-hoc bullet list: one ``-`` item per line, two spaces per
nesting level, ``#`` comments, and an optional top-level ``sitemap:`` wrapper.
Each item is a ``Title [url, file]`` leaf whose inner grammar is left to
:mod:`docgraph.registry`; this module only recovers the tree shape.

Example
-------
>>> from docgraph.outline import parse_outline
>>> outline = parse_outline("sitemap:\n- Home [/, index.md]\n  - About [about, about.md]")
>>> outline.nodes[0].text
'Home [/, index.md]'
>>> outline.nodes[0].children[0].text
'About [about, about.md]'
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re

from ._constants import INDENT_SIZE
from .models import ParseWarning

logger = logging.getLogger(__name__)

BULLET_PATTERN = re.compile(r"^(\s*)-\s*(.+)$")
WRAPPER_PATTERN = re.compile(r"^[A-Za-z_][\w-]*:\s*$")


@dc.dataclass(frozen=True, slots=True)
class Leaf:
    """Outline item without children."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class Section:
    """Outline item that owns nested navigation nodes."""

    text: str
    children: list[NavigationNode] = dc.field(default_factory=list)


NavigationNode = Leaf | Section


@dc.dataclass(slots=True)
class Outline:
    """Parsed navigation tree together with the lines that were skipped."""

    nodes: list[NavigationNode]
    warnings: list[ParseWarning]


@dc.dataclass(slots=True)
class _Frame:
    level: int
    children: list[NavigationNode]


def _is_ignorable(stripped: str) -> bool:
    """Return True for blank lines and comments."""
    return not stripped or stripped.startswith("#")


def _bullet_level(line: str) -> tuple[int, str] | None:
    match = BULLET_PATTERN.match(line)
    if not match:
        return None
    return len(match.group(1)) // INDENT_SIZE, match.group(2).strip()


def _next_level(lines: list[str], start: int) -> int | None:
    """Return the level of the next bullet line after ``start``, if any."""
    for candidate in lines[start:]:
        if _is_ignorable(candidate.strip()):
            continue
        parsed = _bullet_level(candidate)
        if parsed is not None:
            return parsed[0]
    return None


def parse_outline(content: str, *, source: str = "<outline>") -> Outline:
    """Turn outline text into an ordered list of navigation nodes.

    Parameters
    ----------
    content : str
        Raw outline text (for example the contents of ``sitemap.yml``).
    source : str, optional
        Label used when reporting skipped lines.

    Returns
    -------
    Outline
        Navigation tree plus a warning for every non-bullet line that was
        skipped. The parser never raises on malformed input.
    """
    lines = content.splitlines()
    nodes: list[NavigationNode] = []
    warnings: list[ParseWarning] = []
    stack = [_Frame(level=-1, children=nodes)]
    wrapper_allowed = True

    for index, line in enumerate(lines):
        if _is_ignorable(line.strip()):
            continue
        # Only one unindented wrapper key, ahead of every other entry.
        if wrapper_allowed and WRAPPER_PATTERN.match(line):
            wrapper_allowed = False
            continue
        wrapper_allowed = False
        parsed = _bullet_level(line)
        if parsed is None:
            warning = ParseWarning(
                source, f"Skipped unparsable outline line: {line.strip()}", index + 1
            )
            logger.warning("%s", warning)
            warnings.append(warning)
            continue

        level, item = parsed
        while len(stack) > 1 and stack[-1].level >= level:
            stack.pop()
        parent = stack[-1]

        following = _next_level(lines, index + 1)
        if following is not None and following > level:
            section = Section(text=item)
            parent.children.append(section)
            stack.append(_Frame(level=level, children=section.children))
        else:
            parent.children.append(Leaf(text=item))

    return Outline(nodes=nodes, warnings=warnings)


__all__ = ["Leaf", "NavigationNode", "Outline", "Section", "parse_outline"]
