"""Pokedex tracker: PokeAPI catalog, owned set and share links."""
