# pokedex/config.py
"""
Static settings for the Pokedex tracker.

There are no environment variables or config files: everything the
service needs is a constant here.  Paths are resolved relative to the
project root so the service behaves the same wherever it is launched
from.
"""

from pathlib import Path

# PokeAPI list endpoint.  Details are fetched from the per-item URLs it
# returns.
API_URL = "https://pokeapi.co/api/v2/pokemon"

# Number of known catalog entries.  Owned ids live in [1, CATALOG_SIZE]
# and share tokens always carry exactly this many bits.
CATALOG_SIZE = 1051

# Detail requests issued concurrently per batch.
BATCH_SIZE = 20

# Name of the slot holding the owned ids inside the storage file.
STORAGE_KEY = "pokedex-owned"
STORAGE_FILE = Path(__file__).resolve().parents[1] / "data" / "owned.json"

# Query parameter carrying a share token.
SHARE_PARAM = "ids"
