"""Terminal creature dex over the PokeAPI reference API."""

__version__ = "0.1.0"
