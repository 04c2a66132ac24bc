"""Shared fixtures for docgraph tests.

The ``write_site`` fixture materialises a small content tree under
``tmp_path`` so that the processor, build, and CLI tests render real files.
"""

from __future__ import annotations

import typing as typ

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

SiteWriter = typ.Callable[..., "Path"]

SAMPLE_OUTLINE = """\
sitemap:
# Navigation for the sample site
- Главная [/, index.md]
  - Free [free, free/index.md]
    - Шины [tyres, free/tyres.md]
  - Dreamer [dreamer, dreamer/index.md]
    - Шины [tyres, dreamer/tyres.md]
"""

SAMPLE_DOCUMENTS = {
    "index.md": "# Главная\n\n- [Free](free/index.md)\n- [Dreamer](dreamer/index.md)\n",
    "free/index.md": "# Free\n\nСм. [шины](tyres.md).\n",
    "free/tyres.md": "# Шины\n\n## Датчики\n\nДавление в шинах.\n",
    "dreamer/index.md": "# Dreamer\n\n![Схема](img/scheme.png)\n",
    "dreamer/tyres.md": (
        "# Шины\n\n"
        "Подробнее про [датчики](../free/tyres.md#датчики).\n"
    ),
}


@pytest.fixture
def write_site(tmp_path: Path) -> SiteWriter:
    """Return a helper writing ``documents`` under ``tmp_path/content``.

    The helper stores ``outline`` as ``tmp_path/sitemap.yml`` and returns the
    content root.
    """

    def _write(outline: str, documents: cabc.Mapping[str, str]) -> Path:
        content_root = tmp_path / "content"
        for name, text in documents.items():
            path = content_root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        (tmp_path / "sitemap.yml").write_text(outline, encoding="utf-8")
        return content_root

    return _write


@pytest.fixture
def sample_site(write_site: SiteWriter) -> Path:
    """Write the sample Free/Dreamer site and return its content root."""
    return write_site(SAMPLE_OUTLINE, SAMPLE_DOCUMENTS)
