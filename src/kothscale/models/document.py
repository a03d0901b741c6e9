"""In-memory form of the game server settings document."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from kothscale._constants import SETTINGS_KEY


class ConfigDocument:
    """An ordered JSON object with a typed accessor for its ``settings`` subtree.

    The document is schemaless: every sibling key the game
    server (or an operator) put into the file is kept in ``data`` as-is so
    that it round-trips through a rewrite unchanged.
    """

    __slots__ = ("data",)

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = data if data is not None else {}

    def ensure_settings(self) -> MutableMapping[str, Any]:
        """Replace a missing or non-mapping ``settings`` value with ``{}``."""
        value = self.data.get(SETTINGS_KEY)
        if not isinstance(value, MutableMapping):
            value = {}
            self.data[SETTINGS_KEY] = value
        return value

    @property
    def settings(self) -> MutableMapping[str, Any]:
        return self.ensure_settings()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigDocument):
            return NotImplemented
        return self.data == other.data

    def __repr__(self) -> str:
        return f"ConfigDocument(keys={list(self.data)!r})"
