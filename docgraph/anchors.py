r"""Compute hierarchical, Unicode-aware heading anchors.

Anchors are built from the slugified text of every ancestor heading, so two
``Windows`` subsections under ``Yandex`` and ``One`` become ``yandex-windows``
and ``one-windows`` without numeric suffixes. Letters from any script are
kept literally, numbered-list prefixes are dropped, and a trailing
``{#custom-id}`` overrides the generated id.

Example
-------
>>> from docgraph.anchors import compute_anchors
>>> table = compute_anchors([(1, "Yandex"), (2, "Windows"), (1, "One"), (2, "Windows")])
>>> [heading.anchor for heading in table.headings]
['yandex', 'yandex-windows', 'one', 'one-windows']
>>> table.github_slugs["windows-1"]
'one-windows'
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ._constants import MAX_HEADING_LEVEL
from .errors import DuplicateAnchorError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

TAG_PATTERN = re.compile(r"<[^>]+>")
NUMBERED_PREFIX_PATTERN = re.compile(r"^\d+(?:\.\d+)*\.\s+(?=\S)")
CUSTOM_ANCHOR_PATTERN = re.compile(r"\s*\{#([^}]+)\}\s*$")
DUPLICATE_SUFFIX_PATTERN = re.compile(r"-\d+$")


def clean_heading_text(text: str) -> str:
    """Remove tags and display-only list numbering from heading text.

    Examples
    --------
    >>> clean_heading_text("2.1.3. Поднастройки")
    'Поднастройки'
    >>> clean_heading_text("2.4.3")
    '2.4.3'
    """
    without_tags = TAG_PATTERN.sub("", text)
    return NUMBERED_PREFIX_PATTERN.sub("", without_tags.strip()).strip()


def slugify(text: str, separator: str = "-") -> str:
    """Convert heading text into an anchor fragment, keeping Unicode letters.

    Examples
    --------
    >>> slugify("Мультимедиа система")
    'мультимедиа-система'
    >>> slugify("Настройки положений сидений/зеркал")
    'настройки-положений-сидений-зеркал'
    """
    escaped = re.escape(separator)
    value = TAG_PATTERN.sub("", text.lower())
    value = re.sub(r"^(\d+)\.\s", r"\1 ", value)
    value = re.sub(r"[/\\]+", separator, value)
    value = re.sub(r"[\s_]+", separator, value)
    value = re.sub(rf"[^\w.{escaped}]+", "", value)
    value = re.sub(rf"^{escaped}+|{escaped}+$", "", value)
    return re.sub(rf"{escaped}+", separator, value)


def github_slug(text: str) -> str:
    """Return the anchor GitHub would generate for ``text``.

    Authors frequently write links in this style (``#настройки-сиденийзеркал``)
    because that is what the repository browser shows; the anchor table maps
    these slugs back onto hierarchical ids.

    Examples
    --------
    >>> github_slug("2.0.5")
    '205'
    >>> github_slug("Тест & Разработка")
    'тест--разработка'
    """
    value = re.sub(r"[^\w\s-]", "", text.strip().lower())
    return re.sub(r"\s", "-", value)


def split_custom_anchor(text: str) -> tuple[str, str | None]:
    """Separate a trailing ``{#custom-id}`` override from heading text.

    Examples
    --------
    >>> split_custom_anchor("Install {#setup}")
    ('Install', 'setup')
    >>> split_custom_anchor("Install")
    ('Install', None)
    """
    match = CUSTOM_ANCHOR_PATTERN.search(text)
    if not match:
        return text.strip(), None
    return text[: match.start()].strip(), match.group(1).strip()


def build_hierarchical_anchor(parts: cabc.Iterable[str | None]) -> str:
    """Join the slugs of the non-empty heading texts in ``parts`` with ``-``.

    Examples
    --------
    >>> build_hierarchical_anchor(["Секция", "Подсекция", "Элемент"])
    'секция-подсекция-элемент'
    >>> build_hierarchical_anchor([None, "", "Deep"])
    'deep'
    """
    slugs = (slugify(part) for part in parts if part)
    return "-".join(slug for slug in slugs if slug)


class HeadingStack:
    """Active heading text per level while scanning one document."""

    def __init__(self) -> None:
        self._levels: list[str | None] = []

    def push(self, level: int, text: str) -> None:
        """Record ``text`` at ``level`` and forget every deeper heading."""
        if not 1 <= level <= MAX_HEADING_LEVEL:
            msg = f"Heading level must be between 1 and {MAX_HEADING_LEVEL}, got {level}"
            raise ValueError(msg)
        del self._levels[level - 1 :]
        self._levels.extend([None] * (level - 1 - len(self._levels)))
        self._levels.append(text)

    def path(self, level: int | None = None) -> list[str]:
        """Return the non-empty heading texts from level 1 to ``level``."""
        selected = self._levels if level is None else self._levels[:level]
        return [text for text in selected if text]

    def __len__(self) -> int:
        return len(self._levels)


@dc.dataclass(frozen=True, slots=True)
class HeadingAnchor:
    """Anchor assigned to a single heading.

    Attributes
    ----------
    level : int
        Heading level (1-6).
    text : str
        Heading text with any ``{#custom-id}`` suffix removed.
    anchor : str
        Final id written into the rendered heading.
    github_slug : str
        GitHub-style slug, including duplicate suffixes such as ``-1``.
    context : tuple[str, ...]
        Cleaned ancestor heading texts (the stack above this heading).
    """

    level: int
    text: str
    anchor: str
    github_slug: str
    context: tuple[str, ...] = ()


@dc.dataclass(slots=True)
class AnchorTable:
    """Anchors of one document and the lookups used to resolve fragments."""

    headings: list[HeadingAnchor] = dc.field(default_factory=list)
    ids: set[str] = dc.field(default_factory=set)
    github_slugs: dict[str, str] = dc.field(default_factory=dict)

    def __contains__(self, fragment: object) -> bool:
        return fragment in self.ids or fragment in self.github_slugs

    def lookup(self, fragment: str, context: cabc.Sequence[str] = ()) -> str | None:
        """Return the hierarchical id ``fragment`` refers to, if any.

        The fragment is accepted when it already is an assigned id, when it is
        a GitHub-style slug of one of the headings, or when prefixing it with
        the heading ``context`` at the link position (deepest first) yields an
        assigned id.
        """
        if fragment in self.ids:
            return fragment
        mapped = self.github_slugs.get(fragment)
        if mapped:
            return mapped
        base = DUPLICATE_SUFFIX_PATTERN.sub("", fragment)
        for depth in range(len(context), -1, -1):
            candidate = build_hierarchical_anchor([*context[:depth], base])
            if candidate in self.ids:
                return candidate
        return None


def compute_anchors(
    headings: cabc.Iterable[tuple[int, str]], *, source: str = "<document>"
) -> AnchorTable:
    """Assign hierarchical anchors to ``(level, text)`` headings in document order.

    Parameters
    ----------
    headings : Iterable[tuple[int, str]]
        Heading levels and raw texts, in the order they appear.
    source : str, optional
        Document label used in error messages.

    Returns
    -------
    AnchorTable
        The ordered anchors plus id and GitHub-slug lookups.

    Raises
    ------
    DuplicateAnchorError
        When two headings resolve to the same id.
    """
    table = AnchorTable()
    stack = HeadingStack()
    slug_counts: dict[str, int] = {}

    for level, raw_text in headings:
        text, custom = split_custom_anchor(raw_text)
        context = tuple(stack.path(level - 1))
        stack.push(level, clean_heading_text(text))
        anchor = custom or build_hierarchical_anchor(stack.path(level))

        if anchor and anchor in table.ids:
            raise DuplicateAnchorError(text, anchor, source)

        slug = github_slug(text)
        seen = slug_counts.get(slug)
        slug_counts[slug] = 1 if seen is None else seen + 1
        final_slug = slug if seen is None else f"{slug}-{seen}"

        if anchor:
            table.ids.add(anchor)
            table.github_slugs.setdefault(final_slug, anchor)
        table.headings.append(
            HeadingAnchor(
                level=level,
                text=text,
                anchor=anchor,
                github_slug=final_slug,
                context=context,
            )
        )
    return table


__all__ = [
    "AnchorTable",
    "HeadingAnchor",
    "HeadingStack",
    "build_hierarchical_anchor",
    "clean_heading_text",
    "compute_anchors",
    "github_slug",
    "slugify",
    "split_custom_anchor",
]
