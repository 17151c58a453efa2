"""
Filter Engine - name search and category filtering over the bootstrap index.

Candidate ids keep the order of the bootstrap index. Selected categories are
combined by intersection: with two categories only creatures carrying both are
kept.
"""

import asyncio
from typing import Awaitable, Callable, Sequence

from loguru import logger

from dexranger.models import IndexEntry
from dexranger.services.category_cache import CategoryCache

KNOWN_CATEGORIES = (
    "normal",
    "fire",
    "water",
    "grass",
    "electric",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dark",
    "dragon",
    "steel",
    "fairy",
)
MAX_SELECTED_CATEGORIES = 2


def normalize_search_text(text: str | None) -> str:
    return (text or "").strip().lower()


def toggle_category(selected: Sequence[str], category: str) -> tuple[str, ...]:
    """
    Toggle a category in a selection of at most two.

    Args:
        selected: Current selection, earliest first
        category: Category to add or remove

    Returns:
        The new selection. Adding a third category drops the earliest one.
    """
    if category not in KNOWN_CATEGORIES:
        raise ValueError(f"Unknown category '{category}'. Known categories: {', '.join(KNOWN_CATEGORIES)}")

    current = tuple(selected)
    if category in current:
        return tuple(name for name in current if name != category)
    if len(current) < MAX_SELECTED_CATEGORIES:
        return current + (category,)
    return current[1:] + (category,)


class FilterEngine:
    """Computes ordered candidate ids for a search text and category selection."""

    def __init__(
        self,
        fetch_ids_by_category: Callable[[str], Awaitable[list[int]]],
        cache: CategoryCache | None = None,
    ):
        self._fetch_ids_by_category = fetch_ids_by_category
        self.cache = cache if cache is not None else CategoryCache()
        self._index: list[IndexEntry] = []

    @property
    def index(self) -> list[IndexEntry]:
        return self._index

    def set_index(self, entries: list[IndexEntry]) -> None:
        self._index = list(entries)

    @staticmethod
    def is_active(search_text: str, categories: Sequence[str]) -> bool:
        return bool(search_text) or bool(categories)

    def search_ids(self, search_text: str) -> list[int]:
        """Ids whose name contains the search text, case-insensitively."""
        needle = normalize_search_text(search_text)
        if not needle:
            return [entry.id for entry in self._index]
        return [entry.id for entry in self._index if needle in entry.name.lower()]

    async def category_ids(self, categories: Sequence[str]) -> set[int] | None:
        """Intersection of the id sets of every selected category, or None when none is selected."""
        if not categories:
            return None

        id_lists = await asyncio.gather(
            *(self.cache.resolve(category, self._fetch_ids_by_category) for category in categories)
        )
        matching = set(id_lists[0])
        for ids in id_lists[1:]:
            matching &= set(ids)
        return matching

    async def candidate_ids(self, search_text: str, categories: Sequence[str]) -> list[int]:
        """Ordered candidate ids for the given filter configuration."""
        candidates = self.search_ids(search_text)

        matching = await self.category_ids(categories)
        if matching is not None:
            candidates = [creature_id for creature_id in candidates if creature_id in matching]

        logger.debug(
            f"Filter search='{search_text}' categories={list(categories)} matched {len(candidates)} creatures"
        )
        return candidates
