"""Typed dataclasses describing docgraph site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from docgraph._constants import DEFAULT_ROOT_TITLE


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteConfig:
    """Inputs and options for one full-site build.

    Attributes
    ----------
    outline : Path
        Outline file describing the site navigation.
    content_root : Path
        Directory that outline document paths are relative to.
    output : Path
        Destination of the resolved site graph JSON.
    root_title : str
        Title suffix used when the outline has no ``/`` page.
    image_mapping : Path | None
        JSON mapping of content-relative image paths to hashed names.
    pygments_style : str
        Pygments style used for highlighted code blocks.
    strict_anchors : bool
        Treat fragments that match no heading as errors.
    """

    outline: Path
    content_root: Path
    output: Path
    root_title: str = DEFAULT_ROOT_TITLE
    image_mapping: Path | None = None
    pygments_style: str = "monokai"
    strict_anchors: bool = False


__all__ = ["SiteConfig", "SiteConfigError"]
