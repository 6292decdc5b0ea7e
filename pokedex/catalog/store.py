"""
In-memory catalog state for the Pokedex API.

``CatalogState`` holds the fetched items together with the transient
page flags: fetch status, error message and the last search text.
Nothing here is persisted; a restart begins from ``idle`` and fetches
again.  The fetch itself is delegated to ``fetch_all()`` in
``pokeapi_service`` (or to any coroutine with the same shape, which is
how the tests substitute canned data).

Status moves ``idle -> loading -> ready | failed``.  Calling
``refresh()`` again is the manual retry.  Overlapping refreshes are not
guarded: whichever finishes last decides the state.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from .pokeapi_service import CatalogAPIError, fetch_all
from .schemas import CatalogView, FetchStatus, Item, ItemCard


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

Fetcher = Callable[[], Awaitable[List[Item]]]


def _norm(s: Optional[str]) -> str:
    """Normalize a string for case-insensitive comparison."""
    return (s or "").strip().lower()


def filter_items(items: Sequence[Item], search_text: Optional[str]) -> List[Item]:
    """Filter items by name or id.

    A blank query returns every item.  Otherwise an item matches when the
    trimmed, lowercased query occurs in its lowercased name or in its id
    written as a string (so ``"25"`` matches #25, #125 and #250).  The
    catalog order is kept; there is no ranking.
    """
    q = _norm(search_text)
    if not q:
        return list(items)
    return [i for i in items if q in i.name.lower() or q in str(i.id)]


def card_number(item_id: int) -> str:
    return f"#{item_id:03d}"


def build_cards(items: Iterable[Item], owned: Iterable[int]) -> List[ItemCard]:
    owned_ids = frozenset(owned)
    return [
        ItemCard(
            id=i.id,
            name=i.name,
            sprite_url=i.sprite_url,
            number=card_number(i.id),
            owned=i.id in owned_ids,
        )
        for i in items
    ]


class CatalogState:
    """Fetch status, items and search text for the running session."""

    def __init__(self, fetcher: Optional[Fetcher] = None):
        self.fetcher: Fetcher = fetcher or fetch_all
        self.status = FetchStatus.IDLE
        self.items: List[Item] = []
        self.error_message: Optional[str] = None
        self.search_text = ""

    @property
    def loading(self) -> bool:
        return self.status == FetchStatus.LOADING

    def get_item(self, item_id: int) -> Optional[Item]:
        return next((i for i in self.items if i.id == item_id), None)

    async def refresh(self) -> FetchStatus:
        """Fetch the catalog, recording the outcome in the state."""
        self.status = FetchStatus.LOADING
        self.error_message = None
        try:
            items = await self.fetcher()
        except CatalogAPIError as exc:
            logger.error("Catalog fetch failed: %s", exc)
            self.items = []
            self.error_message = str(exc)
            self.status = FetchStatus.FAILED
        else:
            self.items = list(items)
            self.status = FetchStatus.READY
        return self.status

    def view(self, owned: Iterable[int], search_text: Optional[str] = None) -> CatalogView:
        """Build the page view.

        ``search_text`` replaces the stored search text when given.
        Cards are only listed once the catalog is ready.
        """
        if search_text is not None:
            self.search_text = search_text
        owned_ids = frozenset(owned)
        cards: List[ItemCard] = []
        if self.status == FetchStatus.READY:
            cards = build_cards(filter_items(self.items, self.search_text), owned_ids)
        return CatalogView(
            status=self.status,
            loading=self.loading,
            error_message=self.error_message,
            search_text=self.search_text,
            owned_count=len(owned_ids),
            total=len(self.items),
            items=cards,
        )
