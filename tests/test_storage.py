import json
import threading
from pathlib import Path

import pytest

from pokedex import storage
from pokedex.config import CATALOG_SIZE, STORAGE_KEY


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_missing_file_loads_empty(storage_file: Path) -> None:
    assert storage.load_owned(storage_file) == frozenset()


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps({STORAGE_KEY: "1,2,3"}),
        json.dumps({"other-slot": [1, 2]}),
    ],
)
def test_corrupt_or_unexpected_content_loads_empty(storage_file: Path, content: str) -> None:
    _write(storage_file, content)
    assert storage.load_owned(storage_file) == frozenset()


def test_invalid_entries_are_dropped(storage_file: Path) -> None:
    _write(storage_file, json.dumps({STORAGE_KEY: [1, "4", 9, 0, -2, True, 2.5, CATALOG_SIZE + 1]}))
    assert storage.load_owned(storage_file) == {1, 9}


def test_save_writes_sorted_list_and_keeps_other_slots(storage_file: Path) -> None:
    _write(storage_file, json.dumps({"theme": "dark"}))
    storage.save_owned({9, 1, 4}, storage_file)

    document = json.loads(storage_file.read_text(encoding="utf-8"))
    assert document == {"theme": "dark", STORAGE_KEY: [1, 4, 9]}
    assert storage.load_owned(storage_file) == {1, 4, 9}


def test_save_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "owned.json"
    storage.save_owned({3}, target)
    assert storage.load_owned(target) == {3}


def test_toggle_adds_then_removes_and_persists(storage_file: Path) -> None:
    start = frozenset({1, 4})

    added = storage.toggle_owned(start, 9, storage_file)
    assert added == {1, 4, 9}
    assert start == {1, 4}
    assert storage.load_owned(storage_file) == {1, 4, 9}

    removed = storage.toggle_owned(added, 9, storage_file)
    assert removed == start
    assert storage.load_owned(storage_file) == start


def test_owned_store_loads_lazily(storage_file: Path) -> None:
    store = storage.OwnedStore(storage_file)
    _write(storage_file, json.dumps({STORAGE_KEY: [1, 4, 9]}))
    assert store.ids == {1, 4, 9}
    assert len(store.ids) == 3
    assert store.contains(4)
    assert not store.contains(2)


def test_owned_store_replace_and_clear(storage_file: Path) -> None:
    _write(storage_file, json.dumps({STORAGE_KEY: [1]}))
    store = storage.OwnedStore(storage_file)

    assert store.replace({2, 3, 0}) == {2, 3}
    assert storage.load_owned(storage_file) == {2, 3}

    store.toggle(7)
    assert storage.OwnedStore(storage_file).ids == {2, 3, 7}

    assert store.clear() == frozenset()
    assert storage.load_owned(storage_file) == frozenset()


def test_concurrent_toggles_keep_every_update(storage_file: Path) -> None:
    store = storage.OwnedStore(storage_file)
    ids = list(range(1, 41))
    start = threading.Barrier(len(ids))

    def toggle(item_id: int) -> None:
        start.wait()
        store.toggle(item_id)

    threads = [threading.Thread(target=toggle, args=(i,)) for i in ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.ids == set(ids)
    assert storage.load_owned(storage_file) == set(ids)


def test_owned_store_reload_picks_up_external_changes(storage_file: Path) -> None:
    store = storage.OwnedStore(storage_file)
    assert store.ids == frozenset()
    storage.save_owned({5}, storage_file)
    assert store.ids == frozenset()
    assert store.reload() == {5}
