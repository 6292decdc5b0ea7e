"""
Share-link codec for the owned set.

An owned set is packed into a fixed-width bitset, one bit per catalog
id, and rendered as URL-safe base64 so it can travel in the ``ids``
query parameter.  Byte ``(id - 1) // 8`` holds the id at bit
``(id - 1) % 8`` (least significant bit first).  Because the buffer
always has ``ceil(size / 8)`` bytes, the token length does not depend
on how many items are owned.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from .config import CATALOG_SIZE, SHARE_PARAM


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def token_bytes(size: int = CATALOG_SIZE) -> int:
    """Return the bitset length in bytes for a catalog of ``size`` ids."""
    return (size + 7) // 8


def encode(owned: Iterable[int], size: int = CATALOG_SIZE) -> str:
    """Encode ``owned`` as a share token.

    Ids outside ``[1, size]`` are dropped.  The returned token has its
    base64 padding stripped.
    """
    buffer = bytearray(token_bytes(size))
    for item_id in owned:
        if not isinstance(item_id, int) or isinstance(item_id, bool):
            continue
        if 1 <= item_id <= size:
            index = item_id - 1
            buffer[index // 8] |= 1 << (index % 8)
    token = base64.urlsafe_b64encode(bytes(buffer)).decode("ascii")
    return token.rstrip("=")


def decode(token: Optional[str], size: int = CATALOG_SIZE) -> Optional[FrozenSet[int]]:
    """Decode a share token back into an owned set.

    Returns ``None`` when the token is empty or malformed, or when it
    does not decode to exactly ``token_bytes(size)`` bytes.  Padding is
    optional.
    """
    if not token or not isinstance(token, str):
        return None
    text = token.strip().rstrip("=")
    text += "=" * (-len(text) % 4)
    try:
        raw = base64.b64decode(text.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        logger.debug("Ignoring malformed share token: %s", exc)
        return None
    if len(raw) != token_bytes(size):
        logger.debug("Ignoring share token of %s bytes (expected %s)", len(raw), token_bytes(size))
        return None
    owned = set()
    for byte_index, byte in enumerate(raw):
        if not byte:
            continue
        for bit in range(8):
            if byte & (1 << bit):
                item_id = byte_index * 8 + bit + 1
                if item_id <= size:
                    owned.add(item_id)
    return frozenset(owned)


def share_url(base_url: str, owned: Iterable[int], size: int = CATALOG_SIZE) -> str:
    """Build a shareable link: ``base_url`` with ``?ids=<token>``.

    Any query string or fragment already on ``base_url`` is replaced.
    """
    parts = urlsplit(base_url)
    query = urlencode({SHARE_PARAM: encode(owned, size)})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))
