"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults are baked here and ``sitesmith.toml``
only contains overrides. An empty file (or none at all) builds a site.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from sitesmith.domain.permalinks import DEFAULT_MARKDOWN_EXT


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    title: str = ""
    url: str = ""
    baseurl: str = ""
    permalink: str = "date"
    markdown_ext: str = ",".join(DEFAULT_MARKDOWN_EXT)
    exclude: list[str] = Field(default_factory=list)
    include: list[str] = Field(default_factory=list)

    def markdown_extensions(self) -> tuple[str, ...]:
        """Markdown extensions as a tuple of lowercase names without dots."""
        return tuple(
            ext.strip().lstrip(".").lower() for ext in self.markdown_ext.split(",") if ext.strip()
        )


class CollectionConfig(BaseModel):
    """[collections.<name>] section."""

    model_config = {"frozen": True}

    output: bool = True
    permalink: str | None = None


class DefaultsEntry(BaseModel):
    """One [[defaults]] entry: front matter applied to files under a path.

    An empty *path* matches every file. When *collection* is set, only
    files in that collection match.
    """

    model_config = {"frozen": True}

    path: str = ""
    collection: str | None = None
    values: dict[str, Any] = Field(default_factory=dict)

    def matches(self, relpath: str, collection: str | None) -> bool:
        if self.collection is not None and self.collection != collection:
            return False
        prefix = self.path.strip("/")
        if not prefix:
            return True
        return relpath == prefix or relpath.startswith(prefix + "/")
