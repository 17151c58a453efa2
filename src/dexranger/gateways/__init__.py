from .errors import DexError, NetworkError, NotFoundError
from .pokeapi import PokeAPI

__all__ = ["DexError", "NetworkError", "NotFoundError", "PokeAPI"]
