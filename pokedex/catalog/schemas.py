"""
Pydantic schema definitions for the catalog module.

``Item`` is what the fetcher produces from PokeAPI: an id, a name and
the best sprite URL available.  ``ItemCard`` adds what a grid card needs
to render (the ``#001`` style number and the owned flag).  ``CatalogView``
bundles the cards with the loading/error/search state so a front-end can
draw the whole page from a single response.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """A single catalog entry.  Immutable once fetched."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    name: str
    # ``None`` when PokeAPI has neither official artwork nor a default
    # sprite for the entry.
    sprite_url: Optional[str] = None


class ItemCard(BaseModel):
    id: int
    name: str
    sprite_url: Optional[str] = None
    number: str
    owned: bool = False


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class CatalogView(BaseModel):
    """Everything the grid page shows.

    ``items`` is empty unless the catalog is ready.  ``total`` is the
    size of the whole catalog, not of the filtered list, matching the
    "N / total owned" counter of the page header.
    """

    status: FetchStatus
    loading: bool
    error_message: Optional[str] = None
    search_text: str = ""
    owned_count: int = 0
    total: int = 0
    items: List[ItemCard] = Field(default_factory=list)


class OwnedIds(BaseModel):
    ids: List[int]
    count: int


class ShareLink(BaseModel):
    token: str
    url: str
