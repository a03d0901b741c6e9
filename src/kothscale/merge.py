"""Deep merge of a settings profile into an existing settings mapping.

Merge rules, applied per key of the incoming mapping:

- mapping into mapping: recurse
- keyed list (``rewards`` by default) into list: reconcile entries by their
  identity key; matched entries are updated field by field, unmatched
  incoming entries are appended, entries only present in the target stay
  where they are
- any other list: replaced by a copy of the incoming list
- anything else: overwritten

Keys that exist only in the target are never removed, and the incoming
mapping is never mutated or aliased by the result.
"""

from __future__ import annotations

import copy
from collections.abc import Hashable, Mapping, MutableMapping
from typing import Any

from kothscale._constants import REWARD_IDENTITY_KEY, REWARDS_KEY

DEFAULT_KEYED_LISTS: Mapping[str, str] = {REWARDS_KEY: REWARD_IDENTITY_KEY}


def _identity_of(entry: Any, identity: str) -> Hashable | None:
    # Entries without a usable (hashable) identity never match anything
    if not isinstance(entry, Mapping):
        return None
    key = entry.get(identity)
    if not isinstance(key, Hashable):
        return None
    try:
        hash(key)
    except TypeError:
        return None
    return key


def _merge_keyed_list(target: list[Any], incoming: list[Any], identity: str) -> list[Any]:
    index: dict[Hashable, MutableMapping[str, Any]] = {}
    for entry in target:
        key = _identity_of(entry, identity)
        if key is not None and isinstance(entry, MutableMapping):
            index.setdefault(key, entry)

    for entry in incoming:
        key = _identity_of(entry, identity)
        existing = index.get(key) if key is not None else None
        if existing is not None:
            existing.update(copy.deepcopy(dict(entry)))
            continue
        copied = copy.deepcopy(entry)
        target.append(copied)
        if key is not None and isinstance(copied, MutableMapping):
            index.setdefault(key, copied)
    return target


def deep_merge(
    target: MutableMapping[str, Any],
    source: Mapping[str, Any],
    *,
    keyed_lists: Mapping[str, str] = DEFAULT_KEYED_LISTS,
) -> MutableMapping[str, Any]:
    """Merge *source* into *target* in place and return *target*.

    Parameters
    ----------
    keyed_lists
        Maps a key name to the identity field used to reconcile the list
        stored under that key. Applies at any depth.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, MutableMapping):
            deep_merge(existing, value, keyed_lists=keyed_lists)
        elif isinstance(value, list) and isinstance(existing, list) and key in keyed_lists:
            _merge_keyed_list(existing, value, keyed_lists[key])
        else:
            target[key] = copy.deepcopy(value)
    return target
