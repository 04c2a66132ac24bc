"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from docgraph._constants import DEFAULT_OUTPUT, DEFAULT_ROOT_TITLE

from .models import SiteConfig, SiteConfigError

REQUIRED_KEYS = ("outline", "content_root")


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a docgraph build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``docgraph.yaml``).

    Returns
    -------
    SiteConfig
        Parsed configuration with every relative path resolved against the
        directory holding ``path``.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required keys are missing or a value has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docgraph.config import load_site_config
    >>> config = load_site_config(Path("docgraph.yaml"))  # doctest: +SKIP
    >>> config.output.name  # doctest: +SKIP
    'sitemap.json'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)

    raw: dict[str, typ.Any] = dict(loaded)
    site = raw.get("site", raw)
    if not isinstance(site, dict):
        msg = "The 'site' section must be a mapping."
        raise SiteConfigError(msg)

    missing = [key for key in REQUIRED_KEYS if not site.get(key)]
    if missing:
        msg = f"Missing required site configuration keys: {', '.join(missing)}."
        raise SiteConfigError(msg)

    base_dir = path.resolve().parent
    image_mapping = site.get("image_mapping")
    strict_anchors = site.get("strict_anchors", False)
    if not isinstance(strict_anchors, bool):
        msg = "'strict_anchors' must be true or false."
        raise SiteConfigError(msg)

    return SiteConfig(
        outline=_resolve(base_dir, site["outline"]),
        content_root=_resolve(base_dir, site["content_root"]),
        output=_resolve(base_dir, site.get("output") or DEFAULT_OUTPUT),
        root_title=str(site.get("root_title") or DEFAULT_ROOT_TITLE),
        image_mapping=_resolve(base_dir, image_mapping) if image_mapping else None,
        pygments_style=str(site.get("pygments_style") or "monokai"),
        strict_anchors=strict_anchors,
    )


def _resolve(base_dir: Path, value: object) -> Path:
    """Return ``value`` as a path, anchored at ``base_dir`` when relative."""
    if not isinstance(value, str):
        msg = f"Expected a path string, got {value!r}."
        raise SiteConfigError(msg)
    candidate = Path(value)
    return candidate if candidate.is_absolute() else base_dir / candidate


__all__ = ["load_site_config"]
