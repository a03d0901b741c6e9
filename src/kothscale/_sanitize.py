"""Helpers for reading hand-edited or externally produced JSON files.

Game server tooling frequently writes these files with a UTF-8 byte-order
mark or stray control bytes. Both readers in this package (the player list
and the settings document) run their raw text through :func:`clean_json_text`
before looking at it.
"""

from __future__ import annotations

import re

_BOM = "\ufeff"
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def clean_json_text(text: str) -> str:
    """Strip a leading BOM and all C0/C1 control characters, then trim."""
    if text.startswith(_BOM):
        text = text[len(_BOM) :]
    return _CONTROL_CHARS.sub("", text).strip()


def decode_json_bytes(raw: bytes) -> str:
    """Decode file bytes as UTF-8 (BOM tolerant) and clean the result."""
    return clean_json_text(raw.decode("utf-8"))


def reject_constant(name: str) -> float:
    """``parse_constant`` hook refusing ``NaN`` and ``Infinity``, which are not JSON."""
    raise ValueError(f"non-standard JSON constant {name}")
