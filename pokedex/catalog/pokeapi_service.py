"""
PokeAPI integration for the catalog.  It exposes one primary coroutine:

* ``fetch_all()``: request the list endpoint once, then resolve each
  listed URL to its detail record.  Details are fetched in batches of
  ``BATCH_SIZE`` concurrent requests; a batch starts only once the
  previous one has fully resolved, which keeps PokeAPI from seeing
  more than ``BATCH_SIZE`` requests in flight from us.

Fetching is all-or-nothing.  A failing list request or any failing
detail request raises ``CatalogAPIError`` and no partial catalog is
returned.  There is no retry and no timeout beyond the transport's own
defaults; retrying is up to the caller.

Only the Python standard library is used for HTTP requests.  Blocking
calls run on worker threads via ``asyncio.to_thread`` so the event loop
stays free while a batch is in flight.
"""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

from ..config import API_URL, BATCH_SIZE, CATALOG_SIZE
from .schemas import Item


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class CatalogAPIError(Exception):
    """Raised when PokeAPI cannot provide the catalog."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _http_get_json(url: str) -> Any:
    """Perform an HTTP GET and return the parsed JSON body.

    A custom User-Agent and Accept header are sent with every request.
    Any non-success status, network error or undecodable body raises
    ``CatalogAPIError``; the status code is attached when there is one.
    """
    request = urllib.request.Request(
        url,
        headers={
            'User-Agent': 'pokedex-tracker/1.0 (+https://pokeapi.co)',
            'Accept': 'application/json',
        },
    )
    try:
        with urllib.request.urlopen(request) as response:
            if not 200 <= response.status < 300:
                logger.warning("PokeAPI request to %s returned status %s", url, response.status)
                raise CatalogAPIError(f"API returned {response.status}", response.status)
            data = response.read().decode('utf-8', errors='ignore')
    except urllib.error.HTTPError as exc:
        logger.warning("PokeAPI request to %s returned status %s", url, exc.code)
        raise CatalogAPIError(f"API returned {exc.code}", exc.code) from exc
    except urllib.error.URLError as exc:
        logger.error("Error fetching %s: %s", url, exc.reason)
        raise CatalogAPIError(f"Could not reach API: {exc.reason}") from exc
    except (http.client.HTTPException, OSError) as exc:
        # Dropped connections, resets and truncated bodies surface here
        # unwrapped by urllib.
        logger.error("Error fetching %s: %s", url, exc)
        raise CatalogAPIError(f"Could not reach API: {exc!r}") from exc
    try:
        return json.loads(data)
    except ValueError as exc:
        logger.error("Invalid JSON from %s: %s", url, exc)
        raise CatalogAPIError(f"Invalid response from {url}") from exc


def select_sprite(sprites: Any) -> Optional[str]:
    """Pick the best image URL from a PokeAPI ``sprites`` block.

    The official artwork is preferred; the default front sprite is the
    fallback.  Empty values count as missing.
    """
    if not isinstance(sprites, dict):
        return None
    other = sprites.get('other')
    artwork = other.get('official-artwork') if isinstance(other, dict) else None
    if isinstance(artwork, dict) and artwork.get('front_default'):
        return artwork['front_default']
    return sprites.get('front_default') or None


def parse_item(detail: Any) -> Item:
    """Map a PokeAPI detail record onto ``Item``."""
    if not isinstance(detail, dict):
        raise CatalogAPIError("Malformed detail record")
    item_id = detail.get('id')
    name = detail.get('name')
    if not isinstance(item_id, int) or item_id <= 0 or not isinstance(name, str):
        raise CatalogAPIError(f"Malformed detail record: {detail.get('id')!r}")
    return Item(id=item_id, name=name, sprite_url=select_sprite(detail.get('sprites')))


def list_url(limit: int = CATALOG_SIZE) -> str:
    return f"{API_URL}?{urllib.parse.urlencode({'limit': limit})}"


async def _fetch_detail(url: str) -> Item:
    detail = await asyncio.to_thread(_http_get_json, url)
    return parse_item(detail)


async def fetch_all(limit: int = CATALOG_SIZE, batch_size: int = BATCH_SIZE) -> List[Item]:
    """Fetch the full catalog from PokeAPI.

    Parameters
    ----------
    limit : int
        Number of entries requested from the list endpoint.
    batch_size : int
        Maximum number of detail requests in flight at once.

    Returns
    -------
    List[Item]
        Items in the order the list endpoint returned them.

    Raises
    ------
    CatalogAPIError
        When the list request or any detail request fails.
    """
    data: Dict[str, Any] = await asyncio.to_thread(_http_get_json, list_url(limit))
    results = data.get('results') if isinstance(data, dict) else None
    if not isinstance(results, list):
        raise CatalogAPIError("Malformed list response")
    if any(not isinstance(r, dict) or not isinstance(r.get('url'), str) for r in results):
        raise CatalogAPIError("Malformed list response")
    urls = [r['url'] for r in results]
    logger.info("Resolving %s catalog entries in batches of %s", len(urls), batch_size)

    size = max(1, int(batch_size))
    items: List[Item] = []
    for start in range(0, len(urls), size):
        batch = urls[start:start + size]
        items.extend(await asyncio.gather(*(_fetch_detail(u) for u in batch)))
    logger.info("Fetched %s catalog entries", len(items))
    return items
