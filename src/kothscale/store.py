"""Read and atomically rewrite the game server settings document."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from kothscale._sanitize import decode_json_bytes, reject_constant
from kothscale.exceptions import (
    ConfigNotFoundError,
    ConfigUnreadableError,
    ConfigUnwritableError,
    MalformedJsonError,
)
from kothscale.models.document import ConfigDocument

_logger = logging.getLogger(__name__)


def parse_document(text: str, *, path: str | Path = "") -> ConfigDocument:
    """Parse sanitized document text.

    Raises :class:`MalformedJsonError` unless *text* is a JSON object.
    """
    if not text.startswith("{"):
        raise MalformedJsonError(f"Settings document {path} does not start with '{{'", path=path)
    try:
        data = json.loads(text, parse_constant=reject_constant)
    except ValueError as exc:
        raise MalformedJsonError(f"Settings document {path} is not valid JSON: {exc}", path=path) from exc
    if not isinstance(data, dict):
        raise MalformedJsonError(f"Settings document {path} is not a JSON object", path=path)

    document = ConfigDocument(data)
    document.ensure_settings()
    return document


def render(document: ConfigDocument) -> str:
    """Serialize *document* with tab indentation and one trailing newline.

    Raises :class:`ValueError` for non-finite floats, which JSON cannot carry.
    """
    return json.dumps(document.data, indent="\t", ensure_ascii=False, allow_nan=False) + "\n"


def _read_sync(path: Path) -> ConfigDocument:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise ConfigNotFoundError(f"Settings document not found: {path}", path=path) from exc
    except OSError as exc:
        raise ConfigUnreadableError(f"Cannot read settings document {path}: {exc}", path=path) from exc

    try:
        text = decode_json_bytes(raw)
    except UnicodeDecodeError as exc:
        raise ConfigUnreadableError(f"Settings document {path} is not UTF-8: {exc}", path=path) from exc
    return parse_document(text, path=path)


def _copy_mode(source: Path, dest: Path) -> None:
    try:
        mode = source.stat().st_mode
    except FileNotFoundError:
        return
    os.chmod(dest, mode & 0o7777)


def _write_sync(path: Path, payload: str) -> None:
    tmp_path: Path | None = None
    try:
        # Atomic replace; the game server never observes a half-written file.
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            delete=False,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        _copy_mode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                _logger.debug("Could not remove temporary file %s", tmp_path, exc_info=True)
        raise ConfigUnwritableError(f"Cannot write settings document {path}: {exc}", path=path) from exc


class ConfigStore:
    """Async access to the settings document.

    Every read parses the file from scratch and every write is a complete
    rewrite; nothing is cached between calls.
    """

    async def read(self, path: str | Path) -> ConfigDocument:
        """Read, sanitize and parse the document at *path*.

        Raises
        ------
        ConfigNotFoundError
            The file does not exist.
        ConfigUnreadableError
            The file could not be read or is not UTF-8.
        MalformedJsonError
            The content is not a JSON object.
        """
        target = Path(path)
        document = await asyncio.to_thread(_read_sync, target)
        _logger.debug("Read settings document %s (%d top-level keys)", target, len(document.data))
        return document

    async def write(self, path: str | Path, document: ConfigDocument) -> None:
        """Replace the document at *path* with *document*.

        Raises :class:`ConfigUnwritableError`; the existing file is untouched on failure.
        """
        target = Path(path)
        try:
            payload = render(document)
        except ValueError as exc:
            raise ConfigUnwritableError(f"Cannot serialize settings document {target}: {exc}", path=target) from exc
        await asyncio.to_thread(_write_sync, target, payload)
        _logger.debug("Wrote settings document %s (%d bytes)", target, len(payload.encode("utf-8")))

