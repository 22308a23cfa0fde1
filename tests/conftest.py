"""Shared pytest fixtures and test helpers for sitesmith tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from sitesmith.config.settings import SiteSettings
from sitesmith.services.site import Site


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's SITESMITH_* environment out of the tests."""
    for name in ("SITESMITH_CONFIG", "SITESMITH_SOURCE", "SITESMITH_DESTINATION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


def write(root: Path, relpath: str, content: str | bytes) -> Path:
    """Write *content* to *relpath* under *root*, creating directories."""
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A small site source tree.

    - ``index.md`` and ``about.md`` (dynamic, ``about`` uses a layout)
    - ``_posts/2024-01-15-hello-world.md`` (dynamic, in a collection)
    - ``draft.md`` (dynamic, unpublished)
    - ``assets/logo.png`` and ``robots.txt`` (static)
    - ``_layouts/default.html`` and ``_includes/footer.html``
    """
    root = tmp_path / "site"
    root.mkdir()
    write(root, "sitesmith.toml", '[site]\ntitle = "Test Site"\n')
    write(root, "index.md", "---\ntitle: Home\n---\n# {{ page.front_matter.title }}\n")
    write(
        root,
        "about.md",
        "---\ntitle: About\nlayout: default\npermalink: /about/\n---\nAbout {{ site.title }}.\n",
    )
    write(
        root,
        "_posts/2024-01-15-hello-world.md",
        "---\ntitle: Hello World\ncategories: news updates\n---\nFirst post.\n",
    )
    write(root, "draft.md", "---\npublished: false\n---\nNot yet.\n")
    write(root, "assets/logo.png", b"\x89PNG\r\n\x1a\n\x00\x00")
    write(root, "robots.txt", "User-agent: *\n")
    write(
        root,
        "_layouts/default.html",
        "<html><body>{{ content }}{% include 'footer.html' %}</body></html>\n",
    )
    write(root, "_includes/footer.html", "<footer>{{ page.url }}</footer>")
    return root


@pytest.fixture
def site(site_root: Path) -> Site:
    """A Site over :func:`site_root` with its files read."""
    settings = SiteSettings.from_cli(source=site_root)
    s = Site(settings)
    s.read_files()
    return s
