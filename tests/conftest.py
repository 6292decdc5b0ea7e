from __future__ import annotations

from pathlib import Path
from typing import List

import pytest
from fastapi.testclient import TestClient

from pokedex.catalog import router as catalog_routes
from pokedex.catalog.pokeapi_service import CatalogAPIError
from pokedex.catalog.schemas import Item
from pokedex.main import app
from pokedex.storage import OwnedStore


SAMPLE_ITEMS: List[Item] = [
    Item(id=1, name="bulbasaur", sprite_url="https://img.example/1.png"),
    Item(id=4, name="charmander", sprite_url="https://img.example/4.png"),
    Item(id=25, name="pikachu", sprite_url="https://img.example/25.png"),
    Item(id=125, name="electabuzz", sprite_url=None),
    Item(id=250, name="ho-oh", sprite_url="https://img.example/250.png"),
]


class FakeFetcher:
    """Stands in for ``fetch_all``; counts calls and can be told to fail."""

    def __init__(self, items=None, error: CatalogAPIError = None):
        self.items = list(SAMPLE_ITEMS if items is None else items)
        self.error = error
        self.calls = 0

    async def __call__(self) -> List[Item]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.items)


@pytest.fixture
def sample_items() -> List[Item]:
    return list(SAMPLE_ITEMS)


@pytest.fixture
def storage_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "owned.json"


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def client(monkeypatch, storage_file: Path, fetcher: FakeFetcher) -> TestClient:
    """API client with the session state pointed at temporary storage.

    The client is not used as a context manager, so the startup fetch
    does not run; tests trigger fetches through ``/refresh``.
    """
    monkeypatch.setattr(catalog_routes, "catalog_state", catalog_routes.CatalogState(fetcher))
    monkeypatch.setattr(catalog_routes, "owned_store", OwnedStore(storage_file))
    return TestClient(app)
