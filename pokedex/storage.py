# pokedex/storage.py
"""
Durable storage for the owned set.

The owned ids live in a small JSON file (``data/owned.json``).  The file
holds a JSON object and the ids are kept under a single named slot,
``pokedex-owned``, as a sorted array of integers.  Reading never fails:
a missing, unreadable or malformed file simply means there is no saved
selection yet.  All writes go through a ``threading.Lock``.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional

from .config import CATALOG_SIZE, STORAGE_FILE, STORAGE_KEY


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

_storage_lock = threading.Lock()


def _valid_ids(values: Iterable[Any]) -> FrozenSet[int]:
    return frozenset(
        v for v in values
        if isinstance(v, int) and not isinstance(v, bool) and 1 <= v <= CATALOG_SIZE
    )


def _read_document(path: Path) -> Dict[str, Any]:
    try:
        if path.exists():
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring storage file %s: expected a JSON object", path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read storage file %s: %s", path, exc)
    return {}


def load_owned(path: Optional[Path] = None) -> FrozenSet[int]:
    """Load the owned ids from disk.

    Parameters
    ----------
    path : Optional[Path]
        Storage file.  Defaults to ``STORAGE_FILE``.

    Returns
    -------
    FrozenSet[int]
        The stored ids.  Empty when the file is missing or corrupt, or
        when the slot does not hold a list.  Entries that are not ids in
        ``[1, CATALOG_SIZE]`` are dropped.
    """
    document = _read_document(path or STORAGE_FILE)
    stored = document.get(STORAGE_KEY)
    if not isinstance(stored, list):
        return frozenset()
    return _valid_ids(stored)


def save_owned(owned: Iterable[int], path: Optional[Path] = None) -> None:
    """Persist the owned ids, keeping any other slots in the file."""
    target = path or STORAGE_FILE
    with _storage_lock:
        document = _read_document(target)
        document[STORAGE_KEY] = sorted(owned)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
        except OSError as exc:
            logger.warning("Could not write storage file %s: %s", target, exc)


def toggle_owned(owned: FrozenSet[int], item_id: int, path: Optional[Path] = None) -> FrozenSet[int]:
    """Return ``owned`` with ``item_id`` flipped, and persist the result."""
    if item_id in owned:
        updated = owned - {item_id}
    else:
        updated = owned | {item_id}
    save_owned(updated, path)
    return updated


class OwnedStore:
    """The session's owned set, mirrored to disk on every change.

    The set is read from storage the first time it is needed, so a
    store can be created before the storage file exists.  Each change
    reads, saves and swaps the set under one lock, so concurrent
    requests never drop each other's updates.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self._ids: Optional[FrozenSet[int]] = None
        self._lock = threading.RLock()

    @property
    def ids(self) -> FrozenSet[int]:
        with self._lock:
            if self._ids is None:
                self._ids = load_owned(self.path)
            return self._ids

    def contains(self, item_id: int) -> bool:
        return item_id in self.ids

    def toggle(self, item_id: int) -> FrozenSet[int]:
        with self._lock:
            self._ids = toggle_owned(self.ids, item_id, self.path)
            return self._ids

    def replace(self, ids: Iterable[int]) -> FrozenSet[int]:
        """Adopt ``ids`` as the new baseline (used for share links)."""
        with self._lock:
            self._ids = _valid_ids(ids)
            save_owned(self._ids, self.path)
            logger.info("Owned set replaced with %s ids", len(self._ids))
            return self._ids

    def clear(self) -> FrozenSet[int]:
        with self._lock:
            self._ids = frozenset()
            save_owned(self._ids, self.path)
            return self._ids

    def reload(self) -> FrozenSet[int]:
        with self._lock:
            self._ids = load_owned(self.path)
            return self._ids
