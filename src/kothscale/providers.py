"""Player count providers.

Two interchangeable strategies feed the coordinator:

* :class:`LivePlayerCountProvider` reads a count the host keeps up to date
  (for example a cached server query result).
* :class:`FilePlayerCountProvider` counts entries in a side-channel JSON
  player list written by another process.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from kothscale._constants import PLAYERS_KEY
from kothscale._sanitize import decode_json_bytes, reject_constant
from kothscale.exceptions import SignalUnavailableError

_logger = logging.getLogger(__name__)


class PlayerCountProvider(Protocol):
    """Structural interface for player count sources."""

    async def count(self) -> int:
        """Return the current player count.

        Raises :class:`SignalUnavailableError` when the count is unknown.
        """
        ...


class LivePlayerCountProvider:
    """Expose a host-maintained player count.

    *getter* returns ``None`` while the host has no count yet; that is
    reported as :class:`SignalUnavailableError` rather than as zero players.
    """

    def __init__(self, getter: Callable[[], int | None]) -> None:
        self._getter = getter

    async def count(self) -> int:
        value = self._getter()
        if value is None:
            raise SignalUnavailableError("Live player count not available yet")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SignalUnavailableError(f"Live player count is invalid: {value!r}")
        return value


def count_players(payload: Any) -> int:
    """Return the player count held by a parsed player list.

    Accepts a bare list or an object with a ``players`` list.
    Raises :class:`ValueError` for any other shape.
    """
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, dict):
        players = payload.get(PLAYERS_KEY)
        if isinstance(players, list):
            return len(players)
        raise ValueError(f"object has no {PLAYERS_KEY!r} list")
    raise ValueError(f"unexpected JSON type {type(payload).__name__}")


def _read_player_file(path: Path) -> int:
    text = decode_json_bytes(path.read_bytes())
    if not text.startswith(("{", "[")):
        raise ValueError("content does not start with '{' or '['")
    return count_players(json.loads(text, parse_constant=reject_constant))


class FilePlayerCountProvider:
    """Count players listed in a JSON file.

    By default any failure (missing file, unreadable file, unexpected shape,
    invalid JSON) is reported as ``0`` players, which the coordinator treats
    as a legitimate low-population reading. Pass ``strict=True`` to raise
    :class:`SignalUnavailableError` instead so an unreadable file suspends
    scaling rather than driving the server to level 1.
    """

    def __init__(self, path: str | Path, *, strict: bool = False) -> None:
        self._path = Path(path)
        self._strict = strict

    @property
    def path(self) -> Path:
        return self._path

    async def count(self) -> int:
        try:
            return await asyncio.to_thread(_read_player_file, self._path)
        except (OSError, ValueError) as exc:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors
            if self._strict:
                raise SignalUnavailableError(f"Cannot read player list {self._path}: {exc}") from exc
            _logger.warning("Player list %s unusable, counting 0 players: %s", self._path, exc)
            return 0
