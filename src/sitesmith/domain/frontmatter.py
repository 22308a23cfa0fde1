"""Front matter detection, extraction, and typed access.

A source file has front matter when its first line is exactly ``---``.
Detection only looks at the first four bytes (see
:func:`~sitesmith.infrastructure.filesystem.read_file_magic`), so binary
assets are rejected without reading them. Extraction splits the YAML
block from the body and hands the block to ruamel.yaml.

Front matter is user-authored content: a malformed block degrades to "no
front matter" and the typed accessors fall back to defaults rather than
raising.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from sitesmith.infrastructure.filesystem import PathError, read_file_magic

FRONT_MATTER_MAGIC = b"---\n"

_BLOCK_RE = re.compile(r"^---\n(.+?\n)---(?:\n|\Z)", re.DOTALL)
_EMPTY_BLOCK_RE = re.compile(r"^---\n(?:[ \t]*\n)*---(?:\n|\Z)")


def _new_yaml() -> YAML:
    """Create a fresh YAML loader.

    Front matter is only read, never written back, so the safe loader is
    enough and yields plain ``dict``/``list``/``str`` values.
    """
    return YAML(typ="safe", pure=True)


class FrontMatter(Mapping[str, Any]):
    """An immutable mapping of front matter variables.

    Merging produces a new instance; the receiver is never changed.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"FrontMatter({self._data!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FrontMatter):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def merged(self, other: Mapping[str, Any] | None) -> FrontMatter:
        """Return a new FrontMatter with *other*'s keys taking precedence."""
        if not other:
            return self
        return FrontMatter({**self._data, **other})

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow, mutable copy."""
        return dict(self._data)

    def get_bool(self, key: str, default: bool) -> bool:
        """Return the value at *key* if it is a bool, otherwise *default*."""
        value = self._data.get(key)
        if isinstance(value, bool):
            return value
        return default

    def sorted_string_list(self, key: str) -> list[str]:
        """Return the value at *key* as a sorted list of strings.

        A string is split on whitespace; a list or tuple has its items
        converted with ``str``. Duplicates are kept. Anything else, including
        a missing key, gives an empty list.
        """
        value = self._data.get(key)
        if isinstance(value, str):
            items = value.split()
        elif isinstance(value, (list, tuple)):
            items = [item if isinstance(item, str) else str(item) for item in value]
        else:
            return []
        return sorted(items)


def file_has_front_matter(path: Path) -> bool:
    """Whether *path* starts with a front matter marker line."""
    return read_file_magic(path) == FRONT_MATTER_MAGIC


def split_front_matter(text: str) -> tuple[dict[str, Any] | None, str]:
    """Split *text* into ``(front_matter, body)``.

    Line endings are normalized to ``\\n`` first, so closing markers
    written as ``---\\r\\n`` are recognized.

    Returns ``({}, body)`` for an empty block, ``(mapping, body)`` for a
    block that parses to a mapping, and ``(None, body)`` when the block
    is malformed YAML or not a mapping. Without a closing marker the whole
    text is the body and the front matter is ``None``.
    """
    normalized = text.replace("\r\n", "\n")

    empty = _EMPTY_BLOCK_RE.match(normalized)
    if empty:
        return {}, normalized[empty.end() :]

    match = _BLOCK_RE.match(normalized)
    if match is None:
        return None, normalized

    body = normalized[match.end() :]
    try:
        data = _new_yaml().load(match.group(1))
    except YAMLError:
        return None, body
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        return None, body
    return {str(k): v for k, v in data.items()}, body


def read_front_matter(path: Path) -> tuple[FrontMatter | None, str]:
    """Read *path* and return its parsed front matter and body.

    Invalid UTF-8 is decoded with replacement characters.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise PathError("read", path, exc) from exc
    data, body = split_front_matter(text)
    if data is None:
        return None, body
    return FrontMatter(data), body
