"""Domain layer — front matter, pages, and permalinks.

Pages are read through the filesystem primitives in
:mod:`sitesmith.infrastructure.filesystem`; nothing here logs or renders.
"""
