"""SiteSettings: CLI flags, env vars, and ``sitesmith.toml`` merged into one object.

Later sources lose to earlier ones:

1. keyword arguments from the CLI (paths and output flags),
2. ``SITESMITH_*`` environment variables (``SITESMITH_SITE__TITLE=...``),
3. the site, collections and defaults tables of ``sitesmith.toml``,
4. defaults baked into :mod:`sitesmith.config.models`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from sitesmith.config.discovery import find_config
from sitesmith.config.models import CollectionConfig, DefaultsEntry, SiteConfig

DEFAULT_DESTINATION = "_site"
TOML_SECTIONS = ("site", "collections", "defaults")


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Supply the site, collections and defaults tables of ``sitesmith.toml``.

    Paths and output flags are never read from the file. Unparseable TOML
    or an unknown top-level key is reported as a :class:`click.ClickException`.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None or not toml_path.is_file():
            return
        try:
            with toml_path.open("rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc
        unknown = sorted(set(data) - set(TOML_SECTIONS))
        if unknown:
            msg = f"Unknown key(s) in {toml_path}: {', '.join(unknown)}"
            raise click.ClickException(msg)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


# Thread-local storage for TOML path during construction.
_tls = threading.local()


def _default_collections() -> dict[str, CollectionConfig]:
    return {"posts": CollectionConfig()}


class SiteSettings(BaseSettings):
    """Unified settings for a sitesmith invocation.

    Stored on the CLI's :class:`~sitesmith.commands._context.AppContext`.

    Attributes:
        source: Site source directory (parent of ``sitesmith.toml``, or
            CWD if no config is found).
        destination: Output directory; ``<source>/_site`` when unset.
        config_path: The config file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SITESMITH_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved paths (not in TOML) ---
    source: Path = Field(default_factory=Path.cwd)
    destination: Path | None = None
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    site: SiteConfig = Field(default_factory=SiteConfig)
    collections: dict[str, CollectionConfig] = Field(default_factory=_default_collections)
    defaults: list[DefaultsEntry] = Field(default_factory=list)

    @property
    def destination_dir(self) -> Path:
        """The output directory, defaulting to ``_site`` inside the source."""
        if self.destination is not None:
            return self.destination
        return self.source / DEFAULT_DESTINATION

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read init kwargs, then env vars, then the TOML file; no dotenv or secrets."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        source: Path | None = None,
        destination: Path | None = None,
        **cli_flags: Any,
    ) -> SiteSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* must exist; otherwise ``sitesmith.toml`` is
        searched for from *source* upwards. Without *source*, the site root
        is the config file's directory, or the cwd when there is none.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(source)

        resolved_source = source
        if resolved_source is None:
            resolved_source = toml_path.parent if toml_path else Path.cwd()

        init: dict[str, Any] = {"source": resolved_source, "config_path": toml_path}
        if destination is not None:
            init["destination"] = destination

        _tls.toml_path = toml_path
        try:
            return cls(**init, **cli_flags)
        finally:
            _tls.toml_path = None
