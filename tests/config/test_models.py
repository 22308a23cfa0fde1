"""Tests for the configuration section models."""

import pytest

from sitesmith.config.models import DefaultsEntry, SiteConfig


class TestSiteConfig:
    def test_defaults(self) -> None:
        cfg = SiteConfig()
        assert cfg.permalink == "date"
        assert cfg.markdown_extensions() == ("markdown", "mkdown", "mkdn", "mkd", "md")

    def test_markdown_extensions_normalized(self) -> None:
        cfg = SiteConfig(markdown_ext=" MD, .txt ,,")
        assert cfg.markdown_extensions() == ("md", "txt")

    def test_frozen(self) -> None:
        cfg = SiteConfig()
        with pytest.raises(Exception):
            cfg.title = "x"  # type: ignore[misc]


class TestDefaultsEntry:
    def test_empty_path_matches_everything(self) -> None:
        assert DefaultsEntry().matches("a/b.md", None)

    def test_path_prefix(self) -> None:
        entry = DefaultsEntry(path="/docs/")
        assert entry.matches("docs/a.md", None)
        assert entry.matches("docs", None)
        assert not entry.matches("docsx/a.md", None)

    def test_collection_filter(self) -> None:
        entry = DefaultsEntry(collection="posts")
        assert entry.matches("_posts/a.md", "posts")
        assert not entry.matches("a.md", None)
