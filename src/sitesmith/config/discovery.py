"""Locating ``sitesmith.toml``.

The config file marks the site root: it is searched for in the starting
directory and each of its parents, the same way git finds ``.git``.
``SITESMITH_CONFIG`` names a file explicitly and disables the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "sitesmith.toml"
CONFIG_ENV_VAR = "SITESMITH_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    A ``SITESMITH_CONFIG`` that does not name an existing file yields None
    rather than falling back to the search.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidate = Path(explicit)
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
