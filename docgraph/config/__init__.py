"""Load and validate the docgraph site configuration.

This subpackage parses the project's ``docgraph.yaml`` file, applies defaults,
resolves paths relative to the configuration file, and produces a
:class:`SiteConfig` ready for :class:`docgraph.build.SiteBuilder`.

Examples
--------
>>> from pathlib import Path
>>> from docgraph.config import load_site_config
>>> site = load_site_config(Path("docgraph.yaml"))  # doctest: +SKIP
>>> site.root_title  # doctest: +SKIP
'Docs'
"""

from .loader import load_site_config
from .models import SiteConfig, SiteConfigError

__all__ = ["SiteConfig", "SiteConfigError", "load_site_config"]
