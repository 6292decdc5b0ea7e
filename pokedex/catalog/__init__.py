"""
Catalog package for the Pokedex API.

This package fetches the Pokemon catalog from PokeAPI, keeps it in
memory with the page state (loading, error, search text) and exposes a
REST API a grid front-end can render from, including the endpoints that
mark items as owned and produce share links.
"""

from .router import router as catalog_router  # noqa: F401
