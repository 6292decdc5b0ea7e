"""
Route definitions for the Pokedex API.

Endpoints under /api/pokedex:
- GET    /view                     : page view (filtered cards + flags), optional ?ids= share token
- POST   /refresh                  : fetch the catalog again (manual retry)
- GET    /items/{item_id}          : one card
- GET    /owned                    : owned ids
- POST   /owned/{item_id}/toggle   : mark / unmark an item as owned
- DELETE /owned                    : clear the owned set
- GET    /share                    : share token and link for the owned set
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request

from .. import share
from ..config import CATALOG_SIZE, SHARE_PARAM
from ..storage import OwnedStore
from .schemas import CatalogView, ItemCard, OwnedIds, ShareLink
from .store import CatalogState, build_cards


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/api/pokedex", tags=["pokedex"])

# Session state.  A single user per process: the catalog is shared by
# every request and the owned set is mirrored to ``data/owned.json``.
catalog_state = CatalogState()
owned_store = OwnedStore()


def _owned_response() -> OwnedIds:
    ids = sorted(owned_store.ids)
    return OwnedIds(ids=ids, count=len(ids))


@router.get("/view", response_model=CatalogView)
def view_catalog(
    q: Optional[str] = Query(default=None, description="Search by name or number"),
    ids: Optional[str] = Query(default=None, alias=SHARE_PARAM, description="Share token"),
) -> CatalogView:
    """
    Returns the page view.

    When a share token is supplied and decodes, it replaces the owned
    set and becomes the stored baseline.  A token that does not decode
    is ignored and the stored set is used.
    """
    if ids is not None:
        shared = share.decode(ids)
        if shared is None:
            logger.info("Ignoring undecodable share token")
        else:
            owned_store.replace(shared)
    return catalog_state.view(owned_store.ids, search_text=q)


@router.post("/refresh", response_model=CatalogView)
async def refresh_catalog() -> CatalogView:
    await catalog_state.refresh()
    return catalog_state.view(owned_store.ids)


@router.get("/items/{item_id}", response_model=ItemCard)
def get_item(item_id: int) -> ItemCard:
    item = catalog_state.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return build_cards([item], owned_store.ids)[0]


@router.get("/owned", response_model=OwnedIds)
def list_owned() -> OwnedIds:
    return _owned_response()


@router.post("/owned/{item_id}/toggle", response_model=OwnedIds)
def toggle_owned(item_id: int = Path(..., ge=1, le=CATALOG_SIZE)) -> OwnedIds:
    """Flip the owned flag of one item; the change is saved immediately."""
    owned_store.toggle(item_id)
    return _owned_response()


@router.delete("/owned", response_model=OwnedIds)
def clear_owned() -> OwnedIds:
    owned_store.clear()
    return _owned_response()


@router.get("/share", response_model=ShareLink)
def share_owned(request: Request) -> ShareLink:
    """
    Returns the share token for the owned set and a full link to the
    view endpoint carrying it.  Copying the link is left to the client.
    """
    owned = owned_store.ids
    base_url = str(request.url_for("view_catalog"))
    return ShareLink(token=share.encode(owned), url=share.share_url(base_url, owned))
