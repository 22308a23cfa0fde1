"""sitesmith — a Jekyll-style static site generator."""

__version__ = "0.1.0"
